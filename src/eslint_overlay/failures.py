# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers selecting ESLint failures and merging their proposed fixes."""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence

from .models import LintFix, LintMessage, LintReport


def _normalize(path: str) -> str:
    return os.path.normcase(os.path.normpath(path))


def filter_problems_for_file(file_path: str, report: LintReport) -> list[LintMessage]:
    """Return the messages of ``report`` that target ``file_path``.

    Some rules report problems against other files of the same run; only the
    messages addressed at the requested document are kept.

    Args:
        file_path: Path of the document diagnostics were requested for.
        report: Report produced by the runner.

    Returns:
        list[LintMessage]: Messages whose result path normalises to ``file_path``.
    """

    normalized_path = _normalize(file_path)
    normalized_files: dict[str, str] = {}
    messages: list[LintMessage] = []
    for result in report.results:
        if not result.file_path:
            continue
        if result.file_path not in normalized_files:
            normalized_files[result.file_path] = _normalize(result.file_path)
        if normalized_files[result.file_path] == normalized_path:
            messages.extend(result.messages)
    return messages


def get_replacements(failure: LintMessage) -> tuple[LintFix, ...]:
    return failure.replacements


def sort_failures(failures: Iterable[LintMessage]) -> list[LintMessage]:
    """Sort failures by the start of their first replacement.

    Replacements of a single fix are already ordered by position, so the first
    one is representative. Every failure must carry at least one replacement.
    """

    return sorted(failures, key=lambda failure: get_replacements(failure)[0].start)


def _overlaps(first: LintFix, second: LintFix) -> bool:
    # Touching ranges count as overlapping.
    return first.end >= second.start


def get_non_overlapping_replacements(failures: Sequence[LintMessage]) -> list[LintFix]:
    """Return the replacements of ``failures`` that can be applied together.

    Failures are walked in position order. The first one is always kept; each
    following failure is kept only when its first replacement starts after the
    last kept replacement. Rejected failures are dropped as a whole.

    Args:
        failures: Fixable failures, each with at least one replacement.

    Returns:
        list[LintFix]: Replacements that do not overlap one another.
    """

    non_overlapping: list[LintFix] = []
    for index, failure in enumerate(sort_failures(failures)):
        replacements = get_replacements(failure)
        if index == 0 or not _overlaps(non_overlapping[-1], replacements[0]):
            non_overlapping.extend(replacements)
    return non_overlapping


__all__ = [
    "filter_problems_for_file",
    "get_non_overlapping_replacements",
    "get_replacements",
    "sort_failures",
]
