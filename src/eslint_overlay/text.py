# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Source snapshots and mapping of ESLint line/column positions to offsets.

ESLint reports 1-based lines and columns computed from its own read of the
file. The editor snapshot may treat line endings differently, so every lookup
is clamped to the snapshot instead of failing on out-of-range input.

ESLint counts columns and fix ranges in UTF-16 code units of the file with any
byte order mark removed, while snapshots are indexed by code point. Characters
outside the Basic Multilingual Plane take two units, so positions after them
are translated before use.
"""

from __future__ import annotations

import re
from bisect import bisect_left, bisect_right
from collections.abc import Iterable
from typing import Final

from .models import LintFix, LintMessage, TextChange, TextSpan

_LINE_BREAK: Final[re.Pattern[str]] = re.compile(r"\r\n|[\r\n\u2028\u2029]")
_BYTE_ORDER_MARK: Final[str] = "\ufeff"
_BMP_LIMIT: Final[int] = 0xFFFF


def compute_line_starts(text: str) -> tuple[int, ...]:
    """Return the offset at which each line of ``text`` starts."""

    return (0, *(match.end() for match in _LINE_BREAK.finditer(text)))


class SourceText:
    """Immutable text of one file together with its line-start table."""

    def __init__(self, file_name: str, text: str) -> None:
        self.file_name = file_name
        self.text = text
        self._line_starts = compute_line_starts(text)
        self._line_ends = tuple(self._compute_line_end(index) for index in range(len(self._line_starts)))
        self._bom = 1 if text.startswith(_BYTE_ORDER_MARK) else 0
        astral = [index for index, char in enumerate(text) if ord(char) > _BMP_LIMIT]
        # UTF-16 offset of each astral character, ascending.
        self._astral_units = tuple(index + count for count, index in enumerate(astral))
        self._astral = tuple(astral)

    def _compute_line_end(self, line: int) -> int:
        if line + 1 >= len(self._line_starts):
            return len(self.text)
        end = self._line_starts[line + 1] - 1
        if self.text[end] == "\n" and end > 0 and self.text[end - 1] == "\r":
            end -= 1
        return end

    @property
    def line_starts(self) -> tuple[int, ...]:
        return self._line_starts

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    @property
    def end(self) -> int:
        return len(self.text)

    def line_of_position(self, position: int) -> int:
        """Return the 0-based line containing ``position``."""

        return max(bisect_right(self._line_starts, position) - 1, 0)

    def line_start(self, line: int) -> int:
        """Return the offset of the first character of 0-based ``line``, past any byte order mark."""

        return self._bom if line == 0 else self._line_starts[line]

    def line_end(self, line: int) -> int:
        """Return the offset of the terminator of 0-based ``line``.

        For the last line this is the length of the text.
        """

        return self._line_ends[line]

    def _units_before(self, position: int) -> int:
        return position + bisect_left(self._astral, position)

    def position_of_utf16_offset(self, offset: int) -> int:
        """Map an ESLint UTF-16 offset into the file to an index into :attr:`text`.

        An offset that falls between the two halves of a surrogate pair maps
        to the start of that character.
        """

        units = max(offset, 0) + self._bom
        return min(units - bisect_left(self._astral_units, units), len(self.text))

    def localize_fix(self, message: LintMessage) -> LintMessage:
        """Return ``message`` with its fix ranges expressed as indexes into :attr:`text`."""

        if message.fix is None or not (self._astral or self._bom):
            return message
        replacements = tuple(
            LintFix(
                range=(self.position_of_utf16_offset(fix.start), self.position_of_utf16_offset(fix.end)),
                text=fix.text,
            )
            for fix in message.fix
        )
        return message.model_copy(update={"fix": replacements})

    def resolve_position(self, line: int | None, column: int | None) -> int | None:
        """Map a 1-based ``(line, column)`` pair to a 0-based offset.

        Args:
            line: 1-based line number; ``None`` or ``0`` means "no position".
            column: 1-based column in UTF-16 code units, or ``None`` to address
                the end of the line.

        Returns:
            int | None: Offset inside the snapshot, or ``None`` when ``line`` is
            absent.
        """

        if not line:
            return None
        if line > self.line_count:
            return self.line_end(self.line_count - 1)

        index = line - 1
        line_start = self.line_start(index)
        line_end = self._line_ends[index]
        if column is None:
            return line_end

        units = self._units_before(line_start) + max(column - 1, 0)
        position = units - bisect_left(self._astral_units, units)
        if position <= line_end:
            return position
        return line_end

    def text_span_for(self, message: LintMessage) -> TextSpan:
        """Return the span a diagnostic for ``message`` covers in this snapshot."""

        start = self.resolve_position(message.line, message.column)
        if start is None:
            start = 0
        end = self.resolve_position(message.end_line, message.end_column)
        if end is None:
            end = start
        return TextSpan(start=start, end=end)


def apply_text_changes(text: str, changes: Iterable[TextChange]) -> str:
    """Apply non-overlapping ``changes`` to ``text`` and return the new text.

    Raises:
        ValueError: If two changes overlap.
    """

    ordered = sorted(changes, key=lambda change: (change.span.start, change.span.end))
    pieces: list[str] = []
    cursor = 0
    for change in ordered:
        if change.span.start < cursor:
            raise ValueError(f"overlapping text change at offset {change.span.start}")
        pieces.append(text[cursor : change.span.start])
        pieces.append(change.new_text)
        cursor = change.span.end
    pieces.append(text[cursor:])
    return "".join(pieces)


__all__ = ["SourceText", "apply_text_changes", "compute_line_starts"]
