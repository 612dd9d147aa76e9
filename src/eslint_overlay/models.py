# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models shared by the ESLint runner and the diagnostic overlay."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import TypeAliasType

from .constants import ESLINT_WARNING_LEVEL

JsonScalar = TypeAliasType("JsonScalar", str | int | float | bool | None)
JsonValue = TypeAliasType("JsonValue", "JsonScalar | list[JsonValue] | dict[str, JsonValue]")


@dataclass(frozen=True, slots=True)
class TextSpan:
    """Zero-based half-open character range inside one source snapshot.

    Attributes:
        start: Offset of the first character covered by the span.
        end: Offset one past the last character covered by the span.
    """

    start: int
    end: int

    @property
    def length(self) -> int:
        """Return the number of characters covered by the span."""

        return self.end - self.start


class LintFix(BaseModel):
    """Single textual replacement proposed by ESLint."""

    model_config = ConfigDict(frozen=True)

    range: tuple[int, int]
    text: str = ""

    @property
    def start(self) -> int:
        return self.range[0]

    @property
    def end(self) -> int:
        return self.range[1]

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when applying the replacement would not change the text."""

        return self.range[0] == self.range[1] and not self.text


class LintMessage(BaseModel):
    """One problem reported by ESLint for a file.

    ESLint reports a fix either as a single object or as a list of disjoint
    replacements; both shapes are normalised into a tuple of :class:`LintFix`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    rule_id: str | None = Field(default=None, alias="ruleId")
    message: str = ""
    severity: int = ESLINT_WARNING_LEVEL
    line: int | None = None
    column: int | None = None
    end_line: int | None = Field(default=None, alias="endLine")
    end_column: int | None = Field(default=None, alias="endColumn")
    fix: tuple[LintFix, ...] | None = None

    @field_validator("fix", mode="before")
    @classmethod
    def _normalize_fix(
        cls,
        value: LintFix | Mapping[str, JsonValue] | Sequence[LintFix | Mapping[str, JsonValue]] | None,
    ) -> tuple[LintFix | Mapping[str, JsonValue], ...] | None:
        """Accept both the single-object and the list form of an ESLint fix.

        Args:
            value: Raw ``fix`` payload taken from the ESLint report.

        Returns:
            tuple | None: Tuple of replacement payloads, or ``None`` when ESLint
            did not propose a fix.
        """

        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return tuple(value)
        return (value,)

    @property
    def replacements(self) -> tuple[LintFix, ...]:
        """Return the replacements of the fix, empty when there is no fix."""

        return self.fix or ()


class LintResult(BaseModel):
    """Messages ESLint reported for a single file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    file_path: str = Field(default="", alias="filePath")
    messages: tuple[LintMessage, ...] = ()
    error_count: int = Field(default=0, alias="errorCount")
    warning_count: int = Field(default=0, alias="warningCount")


class LintReport(BaseModel):
    """Complete ESLint report for one run, grouped per file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    results: tuple[LintResult, ...] = ()
    error_count: int = Field(default=0, alias="errorCount")
    warning_count: int = Field(default=0, alias="warningCount")

    @classmethod
    def empty(cls) -> LintReport:
        return cls()


@dataclass(frozen=True, slots=True)
class Problem:
    """ESLint message recorded for a published diagnostic span."""

    failure: LintMessage
    fixable: bool

    @classmethod
    def from_failure(cls, failure: LintMessage) -> Problem:
        """Wrap ``failure`` and decide whether it carries a usable fix.

        ESLint can return a fix whose replacement list is empty; such fixes
        are ignored.
        """

        fixable = failure.fix is not None and any(not replacement.is_empty for replacement in failure.fix)
        return cls(failure=failure, fixable=fixable)


class DiagnosticCategory(IntEnum):
    """Diagnostic categories understood by the host language service."""

    WARNING = 0
    ERROR = 1
    SUGGESTION = 2
    MESSAGE = 3


class Diagnostic(BaseModel):
    """Diagnostic exchanged with the host language service."""

    model_config = ConfigDict(frozen=True)

    file_name: str | None = None
    start: int | None = None
    length: int | None = None
    message_text: str
    category: DiagnosticCategory
    code: int
    source: str | None = None


class TextChange(BaseModel):
    """Replacement of ``span`` with ``new_text``."""

    model_config = ConfigDict(frozen=True)

    span: TextSpan
    new_text: str

    @classmethod
    def from_fix(cls, fix: LintFix) -> TextChange:
        return cls(span=TextSpan(start=fix.start, end=fix.end), new_text=fix.text)


class FileTextChanges(BaseModel):
    """Text changes targeting one file."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    text_changes: tuple[TextChange, ...] = ()


class CodeFixAction(BaseModel):
    """Quick fix offered to the user for a diagnostic."""

    model_config = ConfigDict(frozen=True)

    fix_name: str
    description: str
    changes: tuple[FileTextChanges, ...] = ()
    commands: tuple[JsonValue, ...] = ()
    fix_id: str | None = None
    fix_all_description: str | None = None


class CombinedCodeFixScope(BaseModel):
    """Scope of a combined ("fix all of this kind") request."""

    model_config = ConfigDict(frozen=True)

    type: Literal["file"] = "file"
    file_name: str


class CombinedCodeActions(BaseModel):
    """Edits produced by a combined code fix request."""

    model_config = ConfigDict(frozen=True)

    changes: tuple[FileTextChanges, ...] = ()
    commands: tuple[JsonValue, ...] = ()


__all__ = [
    "CodeFixAction",
    "CombinedCodeActions",
    "CombinedCodeFixScope",
    "Diagnostic",
    "DiagnosticCategory",
    "FileTextChanges",
    "JsonValue",
    "LintFix",
    "LintMessage",
    "LintReport",
    "LintResult",
    "Problem",
    "TextChange",
    "TextSpan",
]
