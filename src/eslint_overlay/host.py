# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Stand-alone host backed by the file system.

The command line has no editor behind it, so this host plays every host role
at once: it serves file contents from disk, reports no diagnostics or fixes of
its own and treats diagnostic refreshes as no-ops.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from .interfaces import FormatOptions, UserPreferences
from .models import CodeFixAction, CombinedCodeActions, CombinedCodeFixScope, Diagnostic
from .text import SourceText

LOGGER = logging.getLogger(__name__)


class WorkspaceHost:
    """Language service, language service host and project for one directory."""

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()
        self._snapshots: dict[str, SourceText] = {}

    @property
    def root(self) -> Path:
        return self._root

    def _read(self, file_name: str) -> SourceText | None:
        cached = self._snapshots.get(file_name)
        if cached is not None:
            return cached
        path = Path(file_name)
        if not path.is_file():
            return None
        source = SourceText(file_name, path.read_bytes().decode("utf-8"))
        self._snapshots[file_name] = source
        return source

    def forget(self, file_name: str) -> None:
        """Drop the cached snapshot of ``file_name`` so the next read hits disk."""

        self._snapshots.pop(file_name, None)

    # LanguageServiceHost

    def get_script_snapshot(self, file_name: str) -> str | None:
        source = self._read(file_name)
        return source.text if source is not None else None

    # Project

    def get_source_file(self, file_name: str) -> SourceText | None:
        return self._read(file_name)

    def get_current_directory(self) -> str:
        return str(self._root)

    def refresh_diagnostics(self) -> None:
        LOGGER.debug("diagnostics refresh requested for %s", self._root)

    # LanguageService

    def get_semantic_diagnostics(self, file_name: str) -> list[Diagnostic]:
        return []

    def get_code_fixes_at_position(
        self,
        file_name: str,
        start: int,
        end: int,
        error_codes: Sequence[int],
        format_options: FormatOptions | None = None,
        preferences: UserPreferences | None = None,
    ) -> list[CodeFixAction]:
        return []

    def get_combined_code_fix(
        self,
        scope: CombinedCodeFixScope,
        fix_id: object,
        format_options: FormatOptions | None = None,
        preferences: UserPreferences | None = None,
    ) -> CombinedCodeActions:
        return CombinedCodeActions()

    def get_supported_code_fixes(self) -> list[str]:
        return []


__all__ = ["WorkspaceHost"]
