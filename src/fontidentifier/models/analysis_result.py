# -*- coding: utf-8 -*-
"""Analysis result data model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisResult:
    """Raw font analysis text as returned by the vision model."""

    text: str
    provider: str = ""
    model_used: str = ""
    is_default: bool = False
