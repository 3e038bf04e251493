# -*- coding: utf-8 -*-
"""Tests for the analysis text formatter."""

from __future__ import annotations

from pathlib import Path

import pytest

from fontidentifier.core.formatter import clean_line, format_analysis, iter_display_blocks
from fontidentifier.models.display_block import BulletItem, LabeledField, Paragraph, SectionHeader


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1. Foo", [SectionHeader("Foo")]),
        ("- Weight: Regular", [LabeledField("Weight", "Regular")]),
        ("- Serif", [BulletItem("Serif")]),
        ("Plain sentence.", [Paragraph("Plain sentence.")]),
        ("", []),
        ("   ", []),
    ],
)
def test_format_single_lines(text: str, expected: list) -> None:
    assert format_analysis(text) == expected


def test_markdown_markers_are_removed_before_classification() -> None:
    blocks = format_analysis("**2. Font Details:**\n- **Designer**: `Claude Garamond`\n## Notes")
    assert blocks == [
        SectionHeader("Font Details:"),
        LabeledField("Designer", "Claude Garamond"),
        Paragraph("Notes"),
    ]


def test_labeled_field_keeps_extra_colons_in_value() -> None:
    assert format_analysis("- Era: 16th century: Renaissance") == [
        LabeledField("Era", "16th century: Renaissance")
    ]


def test_lines_emptied_by_cleaning_are_skipped() -> None:
    assert format_analysis("***\n\n  ##  \n`") == []


def test_edge_case_dash_lines() -> None:
    assert format_analysis("-") == [BulletItem("")]
    assert format_analysis("- : x") == [LabeledField("", "x")]


def test_section_number_without_space() -> None:
    assert format_analysis("10.Usage") == [SectionHeader("Usage")]


def test_unrecognised_structures_fall_back_to_paragraph() -> None:
    blocks = format_analysis("| Font | Score |\n> quote\n1) not a header")
    assert all(isinstance(block, Paragraph) for block in blocks)
    assert len(blocks) == 3


def test_format_is_pure_and_repeatable() -> None:
    text = "1. Primary\n- Font Name: Garamond\n- Bembo\nSome text."
    assert format_analysis(text) == format_analysis(text)
    assert list(iter_display_blocks(text)) == format_analysis(text)


def test_clean_line_strips_markers_and_whitespace() -> None:
    assert clean_line("  **Bold** _it_ `code` #tag  ") == "Bold it code tag"


def test_bundled_default_analysis_formats_into_eight_sections() -> None:
    asset = Path(__file__).resolve().parents[1] / "src" / "fontidentifier" / "assets" / "default_analysis.md"
    blocks = format_analysis(asset.read_text(encoding="utf-8"))
    headers = [block.text for block in blocks if isinstance(block, SectionHeader)]
    assert len(headers) == 8
    assert headers[0] == "Primary Font Identification:"
    assert LabeledField("Font Name", "Garamond (Classic style)") in blocks
    assert BulletItem("Adobe Garamond Pro") in blocks
