# -*- coding: utf-8 -*-
"""Turn the semi-structured analysis text into display blocks.

The model's output format is not guaranteed, so parsing is best-effort:
every non-empty line becomes exactly one block and anything unrecognised
falls through to a ``Paragraph``.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from fontidentifier.models.display_block import (
    BulletItem,
    DisplayBlock,
    LabeledField,
    Paragraph,
    SectionHeader,
)


_MARKUP_RE = re.compile(r"[*_#`]")
_SECTION_RE = re.compile(r"^\d+\.\s*")


def clean_line(line: str) -> str:
    """Drop markdown emphasis, heading and code markers and trim whitespace."""
    return _MARKUP_RE.sub("", line).strip()


def classify_line(line: str) -> DisplayBlock | None:
    """Classify one already-cleaned line; empty lines yield None."""
    if not line:
        return None
    section = _SECTION_RE.match(line)
    if section:
        return SectionHeader(line[section.end():])
    if line.startswith("-"):
        body = line[1:]
        if ":" in body:
            label, value = body.split(":", 1)
            return LabeledField(label.strip(), value.strip())
        return BulletItem(body.strip())
    return Paragraph(line)


def iter_display_blocks(text: str) -> Iterator[DisplayBlock]:
    """Yield display blocks for ``text`` in line order."""
    for raw_line in text.split("\n"):
        block = classify_line(clean_line(raw_line))
        if block is not None:
            yield block


def format_analysis(text: str) -> list[DisplayBlock]:
    return list(iter_display_blocks(text))
