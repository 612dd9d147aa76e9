# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-file registry of ESLint problems keyed by their published span."""

from __future__ import annotations

from collections.abc import Iterator

from .constants import FIX_ID_PREFIX
from .models import LintMessage, Problem


class EslintFixId:
    """Encode and decode the fix-group identifiers of rule-scoped fixes."""

    @staticmethod
    def from_failure(failure: LintMessage) -> str:
        return EslintFixId.from_rule(failure.rule_id or "")

    @staticmethod
    def from_rule(rule_id: str) -> str:
        return f"{FIX_ID_PREFIX}{rule_id}"

    @staticmethod
    def to_rule_name(fix_id: object) -> str | None:
        """Return the rule encoded in ``fix_id`` or ``None`` for foreign ids."""

        if not isinstance(fix_id, str) or not fix_id.startswith(FIX_ID_PREFIX):
            return None
        return fix_id.removeprefix(FIX_ID_PREFIX)


class ProblemMap:
    """Problems of one file, keyed by the exact span of their diagnostic.

    Span identity is the key: registering a second problem for the same span
    replaces the first one. Lookups never match partially overlapping spans.
    """

    def __init__(self) -> None:
        self._map: dict[str, Problem] = {}

    @staticmethod
    def key(start: int, end: int) -> str:
        return f"[{start},{end}]"

    def get(self, start: int, end: int) -> Problem | None:
        return self._map.get(self.key(start, end))

    def set(self, start: int, end: int, problem: Problem) -> None:
        self._map[self.key(start, end)] = problem

    def values(self) -> Iterator[Problem]:
        return iter(self._map.values())

    def fixable(self) -> list[Problem]:
        return [problem for problem in self._map.values() if problem.fixable]

    def fixable_for_rule(self, rule_id: str) -> list[Problem]:
        return [problem for problem in self._map.values() if problem.fixable and problem.failure.rule_id == rule_id]

    def __len__(self) -> int:
        return len(self._map)


__all__ = ["EslintFixId", "ProblemMap"]
