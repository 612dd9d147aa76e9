# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Host-side services the overlay decorates or consumes."""

# pylint: disable=too-few-public-methods -- Protocol definitions intentionally expose minimal method surfaces.

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from .models import CodeFixAction, CombinedCodeActions, CombinedCodeFixScope, Diagnostic
from .text import SourceText

FormatOptions = Mapping[str, Any]
UserPreferences = Mapping[str, Any]


@runtime_checkable
class LanguageService(Protocol):
    """Diagnostics and code-fix operations of the host language service."""

    def get_semantic_diagnostics(self, file_name: str) -> list[Diagnostic]:
        """Return the host's own diagnostics for ``file_name``."""

        raise NotImplementedError

    def get_code_fixes_at_position(
        self,
        file_name: str,
        start: int,
        end: int,
        error_codes: Sequence[int],
        format_options: FormatOptions | None = None,
        preferences: UserPreferences | None = None,
    ) -> Sequence[CodeFixAction]:
        """Return quick fixes for the diagnostic published at ``[start, end)``."""

        raise NotImplementedError

    def get_combined_code_fix(
        self,
        scope: CombinedCodeFixScope,
        fix_id: object,
        format_options: FormatOptions | None = None,
        preferences: UserPreferences | None = None,
    ) -> CombinedCodeActions:
        """Return the edits applying every fix of the group ``fix_id``."""

        raise NotImplementedError

    def get_supported_code_fixes(self) -> list[str]:
        """Return the diagnostic codes the service can offer fixes for."""

        raise NotImplementedError


@runtime_checkable
class LanguageServiceHost(Protocol):
    """Access to the editor's current file contents."""

    def get_script_snapshot(self, file_name: str) -> str | None:
        """Return the current text of ``file_name`` or ``None`` when unknown."""

        raise NotImplementedError


@runtime_checkable
class Project(Protocol):
    """Project the language service belongs to."""

    def get_source_file(self, file_name: str) -> SourceText | None:
        """Return the snapshot diagnostics are computed against."""

        raise NotImplementedError

    def get_current_directory(self) -> str:
        """Return the project root directory."""

        raise NotImplementedError

    def refresh_diagnostics(self) -> None:
        """Ask the host to recompute diagnostics of open files."""

        raise NotImplementedError


@runtime_checkable
class WatchHandle(Protocol):
    """Handle returned by a file watch registration."""

    def close(self) -> None:
        """Stop watching."""

        raise NotImplementedError


@runtime_checkable
class FileWatcherHost(Protocol):
    """Host facility that reports changes of individual files."""

    def watch_file(self, path: str, callback: Callable[[str], None]) -> WatchHandle:
        """Invoke ``callback`` with ``path`` whenever the file changes."""

        raise NotImplementedError


__all__ = [
    "FileWatcherHost",
    "FormatOptions",
    "LanguageService",
    "LanguageServiceHost",
    "Project",
    "UserPreferences",
    "WatchHandle",
]
