# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run configuration and result models for the ESLint runner."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..models import LintReport


class PackageManager(str, Enum):
    """Package managers that may hold a global ESLint install."""

    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"

    @classmethod
    def from_str(cls, value: str | None) -> PackageManager | None:
        """Return the package manager named by ``value``, ignoring case.

        Args:
            value: Raw setting value.

        Returns:
            PackageManager | None: Matching member, or ``None`` for missing or
            unknown names.
        """

        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class RunConfiguration(BaseModel):
    """Describe how ESLint should be run for one request."""

    model_config = ConfigDict(frozen=True)

    allow_inline_config: bool | None = None
    report_unused_disable_directives: bool | None = None
    js_enable: bool = False
    config_file: str | None = None
    use_eslintrc: bool | None = None
    ignore_definition_files: bool = True
    exclude: tuple[str, ...] = ()
    node_path: str | None = None
    package_manager: PackageManager | None = None
    workspace_folder_path: str | None = None


class RunResult(BaseModel):
    """Report of one run together with non-fatal operational warnings."""

    model_config = ConfigDict(frozen=True)

    lint_result: LintReport = Field(default_factory=LintReport.empty)
    warnings: tuple[str, ...] = ()
    workspace_folder_path: str | None = None
    config_file_path: str | None = None

    @classmethod
    def empty(cls) -> RunResult:
        return cls()


__all__ = ["PackageManager", "RunConfiguration", "RunResult"]
