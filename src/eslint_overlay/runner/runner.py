# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve, cache and run the ESLint library installed for a file."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable
from fnmatch import fnmatchcase
from functools import partial
from pathlib import Path, PurePath
from typing import Final

from ..cache import MruCache
from ..constants import DEFINITION_FILE_SUFFIX, LIBRARY_CACHE_SIZE, NODE_EXECUTABLE, RESOLUTION_TIMEOUT_SECONDS
from ..models import LintReport
from .library import EslintLibrary, LibraryLoadError, LintOptions
from .models import RunConfiguration, RunResult
from .resolution import GlobalPathResolver, install_failure_message, resolve_eslint_module

LOGGER = logging.getLogger(__name__)

_JS_DOCUMENT: Final[re.Pattern[str]] = re.compile(r"\.(jsx?|mjs)$", re.IGNORECASE)

LibraryLoader = Callable[[], EslintLibrary | None]


def is_js_document(file_path: str) -> bool:
    return _JS_DOCUMENT.search(file_path) is not None


def _posix(path: str) -> str:
    return PurePath(path).as_posix()


def matches_exclusion_pattern(file_path: str, pattern: str, cwd: str | None) -> bool:
    """Return ``True`` when ``file_path`` matches the glob ``pattern``.

    The path relative to ``cwd`` is tried first, then the path as given.
    Wildcards match dotfiles.
    """

    if cwd:
        try:
            relative = os.path.relpath(file_path, cwd)
        except ValueError:
            relative = file_path
        if fnmatchcase(_posix(relative), _posix(pattern)):
            return True
        if relative == file_path:
            return False
    return fnmatchcase(_posix(file_path), _posix(pattern))


class EslintRunner:
    """Run the ESLint install that applies to each file.

    Two caches avoid repeated resolution: a bounded most-recently-used cache
    from file path to a loader, and an unbounded map from resolved module path
    to the loaded library (``None`` for installs that failed to load).
    """

    def __init__(
        self,
        trace: Callable[[str], None] | None = None,
        *,
        node_executable: str = NODE_EXECUTABLE,
        resolution_timeout: float | None = RESOLUTION_TIMEOUT_SECONDS,
        lint_timeout: float | None = None,
        cache_size: int = LIBRARY_CACHE_SIZE,
    ) -> None:
        self._trace = trace or LOGGER.debug
        self._node_executable = node_executable
        self._resolution_timeout = resolution_timeout
        self._lint_timeout = lint_timeout
        self._eslint_path_to_library: dict[str, EslintLibrary | None] = {}
        self._document_to_library: MruCache[str, LibraryLoader] = MruCache(cache_size)
        self._global_paths = GlobalPathResolver(timeout=resolution_timeout)

    def run_eslint(self, file_path: str, configuration: RunConfiguration) -> RunResult:
        """Lint ``file_path`` with the ESLint install resolved for it.

        Args:
            file_path: Absolute path of the file to lint.
            configuration: Options of this run.

        Returns:
            RunResult: Report plus non-fatal warnings. An empty report is
            returned for excluded files, disabled JS files and missing installs.

        Raises:
            LibraryExecutionError: If ESLint crashes while linting.
        """

        self._trace_method("run_eslint", "start")
        warnings: list[str] = []
        if not self._document_to_library.has(file_path):
            self._load_library(file_path, configuration, warnings)
        self._trace_method("run_eslint", "Loaded eslint library")

        loader = self._document_to_library.get(file_path)
        if loader is None:
            return RunResult.empty()

        library = loader()
        if library is None:
            warnings.append(install_failure_message(file_path, configuration.package_manager))
            return RunResult(lint_result=LintReport.empty(), warnings=tuple(warnings))

        self._trace_method("run_eslint", f"About to validate {file_path}")
        try:
            return self._do_run(file_path, library, configuration, warnings)
        except LibraryLoadError as exc:
            self._trace_method("run_eslint", f"failed to load '{library.module_path}': {exc}")
            self._mark_failed(library)
            warnings.append(install_failure_message(file_path, configuration.package_manager))
            return RunResult(lint_result=LintReport.empty(), warnings=tuple(warnings))

    def _trace_method(self, method: str, message: str) -> None:
        self._trace(f"({method}) {message}")

    def _load_library(self, file_path: str, configuration: RunConfiguration, warnings: list[str]) -> None:
        self._trace_method("load_library", f"trying to load {file_path}")
        directory = os.path.dirname(file_path)

        node_path: str | None = None
        if configuration.node_path:
            if Path(configuration.node_path).exists():
                node_path = configuration.node_path
            else:
                warnings.append(
                    f"The setting 'eslint.nodePath' refers to '{configuration.node_path}', "
                    "but this path does not exist. The setting will be ignored.",
                )

        if node_path:
            eslint_path = self._resolve_eslint(node_path, node_path)
        else:
            eslint_path = self._resolve_eslint(None, directory)
        if not eslint_path:
            global_path = self._global_paths.resolve(configuration.package_manager)
            eslint_path = self._resolve_eslint(global_path, directory)

        self._trace_method("load_library", f"Resolved eslint to {eslint_path}")
        self._document_to_library.set(file_path, partial(self._library_for_path, eslint_path))

    def _resolve_eslint(self, node_path: str | None, cwd: str) -> str:
        try:
            return resolve_eslint_module(
                node_path,
                cwd,
                node_executable=self._node_executable,
                timeout=self._resolution_timeout,
            )
        except OSError as exc:
            self._trace_method("resolve_eslint", f"resolution failed: {exc}")
            return ""

    def _library_for_path(self, eslint_path: str) -> EslintLibrary | None:
        if eslint_path not in self._eslint_path_to_library:
            try:
                library: EslintLibrary | None = EslintLibrary.load(eslint_path, node_executable=self._node_executable)
            except LibraryLoadError as exc:
                self._trace_method("load_library", f"failed to load '{eslint_path}': {exc}")
                library = None
            self._eslint_path_to_library[eslint_path] = library
        return self._eslint_path_to_library[eslint_path]

    def _mark_failed(self, library: EslintLibrary) -> None:
        for eslint_path, cached in self._eslint_path_to_library.items():
            if cached is library:
                self._eslint_path_to_library[eslint_path] = None

    def _do_run(
        self,
        file_path: str,
        library: EslintLibrary,
        configuration: RunConfiguration,
        warnings: list[str],
    ) -> RunResult:
        self._trace_method("do_run", f"starting validation for {file_path}")
        cwd = configuration.workspace_folder_path

        if self._file_is_excluded(configuration, file_path, cwd):
            self._trace_method("do_run", f"No linting: file {file_path} is excluded")
            return RunResult.empty()

        if is_js_document(file_path) and not configuration.js_enable:
            self._trace_method("do_run", "No linting: a JS document, but js linting is disabled")
            return RunResult.empty()

        options = LintOptions(
            filename=file_path,
            fix=False,
            allow_inline_config=configuration.allow_inline_config,
            report_unused_disable_directives=configuration.report_unused_disable_directives,
            config_file=configuration.config_file,
            use_eslintrc=configuration.use_eslintrc,
        )
        self._trace_method("do_run", f"Linting: start linting {file_path} in {cwd or os.getcwd()}")
        output = library.execute(options, cwd=cwd, timeout=self._lint_timeout)
        self._trace_method("do_run", "Linting: ended linting")

        warnings.extend(output.warnings)
        return RunResult(
            lint_result=output.report,
            warnings=tuple(warnings),
            workspace_folder_path=configuration.workspace_folder_path,
            config_file_path=configuration.config_file,
        )

    @staticmethod
    def _file_is_excluded(configuration: RunConfiguration, file_path: str, cwd: str | None) -> bool:
        if configuration.ignore_definition_files and file_path.endswith(DEFINITION_FILE_SUFFIX):
            return True
        return any(matches_exclusion_pattern(file_path, pattern, cwd) for pattern in configuration.exclude)


__all__ = ["EslintRunner", "is_js_document", "matches_exclusion_pattern"]
