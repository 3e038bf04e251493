# -*- coding: utf-8 -*-
"""Display blocks produced from analysis text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class SectionHeader:
    text: str


@dataclass(frozen=True)
class LabeledField:
    label: str
    value: str


@dataclass(frozen=True)
class BulletItem:
    text: str


@dataclass(frozen=True)
class Paragraph:
    text: str


DisplayBlock = Union[SectionHeader, LabeledField, BulletItem, Paragraph]
