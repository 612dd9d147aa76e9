# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for snapshot line tables and ESLint position mapping."""

from __future__ import annotations

import pytest

from eslint_overlay.models import LintFix, TextChange, TextSpan
from eslint_overlay.text import SourceText, apply_text_changes, compute_line_starts

MIXED_TEXT = "a\nbb\r\nccc\N{LINE SEPARATOR}d"
ASTRAL_TEXT = "a('\N{GRINNING FACE}')\nb('y')\n"
BOM_TEXT = "\N{ZERO WIDTH NO-BREAK SPACE}let a = 1\n"


def test_line_starts_cover_every_terminator() -> None:
    assert compute_line_starts(MIXED_TEXT) == (0, 2, 6, 10)
    assert compute_line_starts("") == (0,)
    assert compute_line_starts("x\ry\N{PARAGRAPH SEPARATOR}z") == (0, 2, 4)


def test_line_end_excludes_terminator() -> None:
    source = SourceText("mixed.ts", MIXED_TEXT)

    assert source.line_end(0) == 1
    assert source.line_end(1) == 4
    assert source.line_end(2) == 9
    assert source.line_end(3) == len(MIXED_TEXT)
    assert source.line_start(1) == 2


def test_resolve_position_variants() -> None:
    source = SourceText("mixed.ts", MIXED_TEXT)

    assert source.resolve_position(2, 1) == 2
    assert source.resolve_position(2, 3) == 4
    assert source.resolve_position(2, None) == 4
    assert source.resolve_position(None, 1) is None
    assert source.resolve_position(0, 1) is None


def test_resolve_position_clamps_out_of_range_input() -> None:
    source = SourceText("mixed.ts", MIXED_TEXT)

    assert source.resolve_position(2, 40) == 4
    assert source.resolve_position(9, 1) == len(MIXED_TEXT)
    assert source.resolve_position(1, 0) == 0


def test_first_column_offsets_follow_line_table() -> None:
    text = "\n".join(f"line{index}" for index in range(10))
    source = SourceText("ten.ts", text)

    offsets = [source.resolve_position(line, 1) for line in (1, 5, 9)]

    assert offsets == [source.line_starts[0], source.line_starts[4], source.line_starts[8]]
    assert offsets == sorted(offsets)
    assert len(set(offsets)) == 3


def test_text_span_for_messages(make_message) -> None:
    source = SourceText("mixed.ts", MIXED_TEXT)

    full = source.text_span_for(make_message("rule", 2, 1, 2, 3))
    assert full == TextSpan(start=2, end=4)
    assert full.length == 2

    open_ended = source.text_span_for(make_message("rule", 3, 2))
    assert open_ended == TextSpan(start=7, end=7)
    assert open_ended.length == 0

    positionless = source.text_span_for(make_message(None, 0, 0))
    assert positionless == TextSpan(start=0, end=0)


def test_apply_text_changes_in_any_order() -> None:
    changes = [
        TextChange(span=TextSpan(start=6, end=11), new_text="there"),
        TextChange(span=TextSpan(start=0, end=5), new_text="HELLO"),
    ]

    assert apply_text_changes("hello world", changes) == "HELLO there"


def test_apply_text_changes_rejects_overlap() -> None:
    changes = [
        TextChange(span=TextSpan(start=0, end=5), new_text="x"),
        TextChange(span=TextSpan(start=3, end=7), new_text="y"),
    ]

    with pytest.raises(ValueError, match="overlapping"):
        apply_text_changes("hello world", changes)


def test_columns_after_astral_characters_count_utf16_units() -> None:
    source = SourceText("emoji.ts", ASTRAL_TEXT)

    assert source.resolve_position(1, 4) == 3
    assert source.resolve_position(1, 6) == 4
    assert source.resolve_position(2, 3) == 9
    assert source.resolve_position(2, 6) == 12


def test_fix_ranges_after_astral_characters_are_localized(make_message) -> None:
    source = SourceText("emoji.ts", ASTRAL_TEXT)
    message = make_message("quotes", 2, 3, 2, 6, fix={"range": [10, 13], "text": '"y"'})

    localized = source.localize_fix(message)

    assert localized.replacements == (LintFix(range=(9, 12), text='"y"'),)
    changes = [TextChange.from_fix(fix) for fix in localized.replacements]
    assert apply_text_changes(ASTRAL_TEXT, changes) == 'a(\'\N{GRINNING FACE}\')\nb("y")\n'


def test_offset_inside_surrogate_pair_maps_to_character_start() -> None:
    source = SourceText("emoji.ts", ASTRAL_TEXT)

    assert source.position_of_utf16_offset(4) == 3
    assert source.position_of_utf16_offset(5) == 4
    assert source.position_of_utf16_offset(99) == len(ASTRAL_TEXT)


def test_byte_order_mark_is_skipped(make_message) -> None:
    source = SourceText("bom.ts", BOM_TEXT)
    message = make_message("semi", 1, 10, fix={"range": [9, 9], "text": ";"})

    assert source.line_start(0) == 1
    assert source.resolve_position(1, 1) == 1
    assert source.resolve_position(1, 10) == 10
    localized = source.localize_fix(message)
    changes = [TextChange.from_fix(fix) for fix in localized.replacements]
    assert apply_text_changes(BOM_TEXT, changes) == "\N{ZERO WIDTH NO-BREAK SPACE}let a = 1;\n"


def test_plain_text_messages_are_returned_unchanged(make_message) -> None:
    source = SourceText("mixed.ts", MIXED_TEXT)
    message = make_message("semi", 1, 2, fix={"range": [1, 1], "text": ";"})

    assert source.localize_fix(message) is message
