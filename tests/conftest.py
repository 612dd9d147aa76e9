# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from eslint_overlay.config import ConfigurationManager, parse_config
from eslint_overlay.models import (
    CodeFixAction,
    CombinedCodeActions,
    Diagnostic,
    LintMessage,
    LintReport,
    LintResult,
)
from eslint_overlay.plugin import EslintPlugin
from eslint_overlay.runner import RunConfiguration, RunResult
from eslint_overlay.text import SourceText


class FakeHost:
    """In-memory language service, service host and project."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.files: dict[str, str] = {}
        self.diagnostics: dict[str, list[Diagnostic]] = {}
        self.code_fixes: list[CodeFixAction] = []
        self.combined_calls: list[object] = []
        self.refreshes = 0

    def add_file(self, name: str, text: str) -> str:
        path = str(self.root / name)
        self.files[path] = text
        return path

    def get_script_snapshot(self, file_name: str) -> str | None:
        return self.files.get(file_name)

    def get_source_file(self, file_name: str) -> SourceText | None:
        text = self.files.get(file_name)
        return SourceText(file_name, text) if text is not None else None

    def get_current_directory(self) -> str:
        return str(self.root)

    def refresh_diagnostics(self) -> None:
        self.refreshes += 1

    def get_semantic_diagnostics(self, file_name: str) -> list[Diagnostic]:
        return self.diagnostics.get(file_name, [])

    def get_code_fixes_at_position(self, file_name, start, end, error_codes, format_options=None, preferences=None):
        return list(self.code_fixes)

    def get_combined_code_fix(self, scope, fix_id, format_options=None, preferences=None) -> CombinedCodeActions:
        self.combined_calls.append(fix_id)
        return CombinedCodeActions(commands=("host",))

    def get_supported_code_fixes(self) -> list[str]:
        return ["2304"]


class FakeRunner:
    """Runner double returning a prepared result or raising an error."""

    def __init__(self) -> None:
        self.result = RunResult.empty()
        self.error: Exception | None = None
        self.calls: list[tuple[str, RunConfiguration]] = []

    def run_eslint(self, file_path: str, configuration: RunConfiguration) -> RunResult:
        self.calls.append((file_path, configuration))
        if self.error is not None:
            raise self.error
        return self.result


class FakeWatchHandle:
    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


class FakeWatcherHost:
    def __init__(self) -> None:
        self.callbacks: dict[str, Callable[[str], None]] = {}
        self.handles: list[FakeWatchHandle] = []

    def watch_file(self, path: str, callback: Callable[[str], None]) -> FakeWatchHandle:
        self.callbacks[path] = callback
        handle = FakeWatchHandle()
        self.handles.append(handle)
        return handle


def lint_message(
    rule_id: str | None,
    line: int,
    column: int,
    end_line: int | None = None,
    end_column: int | None = None,
    *,
    fix: Any = None,
    severity: int = 2,
    message: str = "problem",
) -> LintMessage:
    payload: dict[str, Any] = {
        "ruleId": rule_id,
        "message": message,
        "severity": severity,
        "line": line,
        "column": column,
        "endLine": end_line,
        "endColumn": end_column,
        "fix": fix,
    }
    return LintMessage.model_validate(payload)


def lint_report(file_path: str, messages: Sequence[LintMessage]) -> LintReport:
    return LintReport(results=(LintResult(file_path=file_path, messages=tuple(messages)),))


@pytest.fixture
def host(tmp_path: Path) -> FakeHost:
    return FakeHost(tmp_path)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def watcher_host() -> FakeWatcherHost:
    return FakeWatcherHost()


@pytest.fixture
def make_plugin(
    host: FakeHost,
    fake_runner: FakeRunner,
    watcher_host: FakeWatcherHost,
) -> Callable[..., EslintPlugin]:
    def factory(config: Mapping[str, Any] | None = None) -> EslintPlugin:
        manager = ConfigurationManager(parse_config(config))
        return EslintPlugin(host, host, manager, runner=fake_runner, file_watcher_host=watcher_host)

    return factory


@pytest.fixture
def make_message() -> Callable[..., LintMessage]:
    return lint_message


@pytest.fixture
def make_report() -> Callable[[str, Sequence[LintMessage]], LintReport]:
    return lint_report
