# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for ESLint resolution caching, exclusion and failure handling."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from eslint_overlay.runner import (
    EslintLibrary,
    EslintRunner,
    LibraryExecutionError,
    PackageManager,
    RunConfiguration,
    is_js_document,
    matches_exclusion_pattern,
)


def _install_eslint(root: Path) -> str:
    package_root = root / "node_modules" / "eslint"
    (package_root / "lib").mkdir(parents=True)
    (package_root / "package.json").write_text(json.dumps({"name": "eslint", "version": "8.57.0"}), encoding="utf-8")
    module = package_root / "lib" / "api.js"
    module.write_text("module.exports = {};\n", encoding="utf-8")
    return str(module)


class BridgeRecorder:
    """Stand-in for the Node bridge reporting one problem per linted file."""

    def __init__(self) -> None:
        self.calls: list[dict[str, object]] = []
        self.warnings: list[str] = []
        self.error: str | None = None
        self.load_error: str | None = None

    def __call__(self, args, **kwargs):
        options = json.loads(args[4])
        self.calls.append({"options": options, "cwd": kwargs.get("cwd")})
        if self.load_error is not None:
            envelope = {"warnings": self.warnings, "loadError": self.load_error}
        elif self.error is not None:
            envelope = {"warnings": self.warnings, "error": self.error}
        else:
            message = {"ruleId": "semi", "severity": 2, "message": "Missing semicolon.", "line": 1, "column": 1}
            result = {"filePath": options["filename"], "messages": [message], "errorCount": 1, "warningCount": 0}
            envelope = {"warnings": self.warnings, "report": {"results": [result], "errorCount": 1}}
        return subprocess.CompletedProcess(args, 0, stdout=json.dumps(envelope), stderr="")


@pytest.fixture
def bridge(monkeypatch) -> BridgeRecorder:
    recorder = BridgeRecorder()
    monkeypatch.setattr("eslint_overlay.runner.library.run_command", recorder)
    return recorder


@pytest.fixture
def resolution(monkeypatch):
    """Patch module resolution; map ``(node_path, cwd)`` pairs to resolved modules."""

    state: dict[str, object] = {"modules": {}, "global_path": None, "calls": [], "managers": []}

    def fake_resolve(node_path, cwd, *, node_executable, timeout):
        state["calls"].append((node_path, cwd))
        return state["modules"].get((node_path, cwd), "")

    class FakeGlobalPaths:
        def __init__(self, *, timeout=None) -> None:
            self.timeout = timeout

        def resolve(self, manager=None):
            state["managers"].append(manager)
            return state["global_path"]

    monkeypatch.setattr("eslint_overlay.runner.runner.resolve_eslint_module", fake_resolve)
    monkeypatch.setattr("eslint_overlay.runner.runner.GlobalPathResolver", FakeGlobalPaths)
    return state


def _project(tmp_path: Path) -> tuple[str, str]:
    source_dir = tmp_path / "src"
    source_dir.mkdir()
    file_path = source_dir / "app.ts"
    file_path.write_text("let a = 1\n", encoding="utf-8")
    return str(source_dir), str(file_path)


def test_local_install_is_used(tmp_path: Path, resolution, bridge: BridgeRecorder) -> None:
    directory, file_path = _project(tmp_path)
    resolution["modules"][(None, directory)] = _install_eslint(tmp_path)
    traces: list[str] = []
    runner = EslintRunner(traces.append)
    configuration = RunConfiguration(workspace_folder_path=str(tmp_path), config_file=".eslintrc.json")

    result = runner.run_eslint(file_path, configuration)

    assert result.warnings == ()
    assert result.workspace_folder_path == str(tmp_path)
    assert result.config_file_path == ".eslintrc.json"
    assert result.lint_result.results[0].file_path == file_path
    assert bridge.calls == [
        {"options": {"filename": file_path, "fix": False, "configFile": ".eslintrc.json"}, "cwd": str(tmp_path)},
    ]
    assert traces[0] == "(run_eslint) start"


def test_resolution_is_cached_per_file(tmp_path: Path, resolution, bridge: BridgeRecorder, monkeypatch) -> None:
    directory, file_path = _project(tmp_path)
    other = str(Path(directory) / "other.ts")
    resolution["modules"][(None, directory)] = _install_eslint(tmp_path)
    loads: list[str] = []
    original_load = EslintLibrary.load

    def counting_load(cls, module_path, **kwargs):
        loads.append(module_path)
        return original_load(module_path, **kwargs)

    monkeypatch.setattr(EslintLibrary, "load", classmethod(counting_load))
    runner = EslintRunner()
    configuration = RunConfiguration(workspace_folder_path=str(tmp_path))

    runner.run_eslint(file_path, configuration)
    runner.run_eslint(file_path, configuration)
    runner.run_eslint(other, configuration)

    assert resolution["calls"] == [(None, directory), (None, directory)]
    assert len(loads) == 1
    assert len(bridge.calls) == 3


def test_excluded_file_by_absolute_path(tmp_path: Path, resolution, bridge: BridgeRecorder) -> None:
    directory, file_path = _project(tmp_path)
    resolution["modules"][(None, directory)] = _install_eslint(tmp_path)
    configuration = RunConfiguration(workspace_folder_path=str(tmp_path), exclude=(file_path,))

    result = EslintRunner().run_eslint(file_path, configuration)

    assert result.lint_result.results == ()
    assert result.lint_result.error_count == 0
    assert result.lint_result.warning_count == 0
    assert bridge.calls == []


def test_excluded_file_by_relative_pattern(tmp_path: Path, resolution, bridge: BridgeRecorder) -> None:
    directory, file_path = _project(tmp_path)
    resolution["modules"][(None, directory)] = _install_eslint(tmp_path)
    configuration = RunConfiguration(workspace_folder_path=str(tmp_path), exclude=("src/*.ts",))

    result = EslintRunner().run_eslint(file_path, configuration)

    assert result.lint_result.results == ()
    assert bridge.calls == []


def test_js_documents_need_js_enable(tmp_path: Path, resolution, bridge: BridgeRecorder) -> None:
    directory, _ = _project(tmp_path)
    script = str(Path(directory) / "legacy.js")
    Path(script).write_text("var a = 1\n", encoding="utf-8")
    resolution["modules"][(None, directory)] = _install_eslint(tmp_path)
    runner = EslintRunner()

    disabled = runner.run_eslint(script, RunConfiguration(workspace_folder_path=str(tmp_path)))
    enabled = runner.run_eslint(script, RunConfiguration(workspace_folder_path=str(tmp_path), js_enable=True))

    assert disabled.lint_result.results == ()
    assert enabled.lint_result.error_count == 1
    assert len(bridge.calls) == 1


@pytest.mark.parametrize(
    ("manager", "local", "global_command"),
    [
        (None, "npm install eslint", "npm install -g eslint"),
        (PackageManager.PNPM, "pnpm install eslint", "pnpm install -g eslint"),
        (PackageManager.YARN, "yarn add eslint", "yarn global add eslint"),
    ],
)
def test_missing_install_reports_install_commands(
    tmp_path: Path,
    resolution,
    bridge: BridgeRecorder,
    manager: PackageManager | None,
    local: str,
    global_command: str,
) -> None:
    _, file_path = _project(tmp_path)

    result = EslintRunner().run_eslint(file_path, RunConfiguration(package_manager=manager))

    assert result.lint_result.results == ()
    (warning,) = result.warnings
    assert f"Failed to load the ESLint library for '{file_path}'" in warning
    assert f"'{local}'" in warning
    assert f"'{global_command}'" in warning
    assert resolution["managers"] == [manager]
    assert bridge.calls == []


def test_failed_load_is_not_retried(tmp_path: Path, resolution, bridge: BridgeRecorder) -> None:
    directory, file_path = _project(tmp_path)
    resolution["modules"][(None, directory)] = str(tmp_path / "vanished" / "eslint.js")
    runner = EslintRunner()

    first = runner.run_eslint(file_path, RunConfiguration())
    second = runner.run_eslint(file_path, RunConfiguration())

    assert len(first.warnings) == 1
    assert len(second.warnings) == 1
    assert resolution["calls"] == [(None, directory)]


def test_library_that_fails_to_require_is_not_retried(tmp_path: Path, resolution, bridge: BridgeRecorder) -> None:
    directory, file_path = _project(tmp_path)
    resolution["modules"][(None, directory)] = _install_eslint(tmp_path)
    bridge.load_error = "Error: Cannot find module 'espree'"
    runner = EslintRunner()

    results = [runner.run_eslint(file_path, RunConfiguration()) for _ in range(3)]

    assert len(bridge.calls) == 1
    for result in results:
        assert result.lint_result.results == ()
        (warning,) = result.warnings
        assert "npm install eslint" in warning
    assert resolution["calls"] == [(None, directory)]

def test_invalid_node_path_falls_back_to_global_install(
    tmp_path: Path,
    resolution,
    bridge: BridgeRecorder,
) -> None:
    directory, file_path = _project(tmp_path)
    global_root = tmp_path / "global"
    global_modules = str(global_root / "node_modules")
    resolution["global_path"] = global_modules
    resolution["modules"][(global_modules, directory)] = _install_eslint(global_root)
    missing = str(tmp_path / "no-such-dir")

    result = EslintRunner().run_eslint(file_path, RunConfiguration(node_path=missing))

    assert result.warnings == (
        f"The setting 'eslint.nodePath' refers to '{missing}', but this path does not exist. "
        "The setting will be ignored.",
    )
    assert result.lint_result.error_count == 1
    assert resolution["calls"] == [(None, directory), (global_modules, directory)]


def test_existing_node_path_is_searched_first(tmp_path: Path, resolution, bridge: BridgeRecorder) -> None:
    _, file_path = _project(tmp_path)
    node_path = tmp_path / "custom"
    node_path.mkdir()
    resolution["modules"][(str(node_path), str(node_path))] = _install_eslint(node_path)

    result = EslintRunner().run_eslint(file_path, RunConfiguration(node_path=str(node_path)))

    assert result.warnings == ()
    assert resolution["calls"] == [(str(node_path), str(node_path))]


def test_bridge_warnings_are_returned(tmp_path: Path, resolution, bridge: BridgeRecorder) -> None:
    directory, file_path = _project(tmp_path)
    resolution["modules"][(None, directory)] = _install_eslint(tmp_path)
    bridge.warnings = ["ESLintRCWarning: deprecated config"]

    result = EslintRunner().run_eslint(file_path, RunConfiguration())

    assert result.warnings == ("ESLintRCWarning: deprecated config",)


def test_lint_crash_propagates(tmp_path: Path, resolution, bridge: BridgeRecorder) -> None:
    directory, file_path = _project(tmp_path)
    resolution["modules"][(None, directory)] = _install_eslint(tmp_path)
    bridge.error = "Error: Failed to load plugin"

    with pytest.raises(LibraryExecutionError, match="Failed to load plugin"):
        EslintRunner().run_eslint(file_path, RunConfiguration())


def test_missing_node_counts_as_failed_resolution(tmp_path: Path, monkeypatch, bridge: BridgeRecorder) -> None:
    _, file_path = _project(tmp_path)

    def fake_resolve(node_path, cwd, *, node_executable, timeout):
        raise FileNotFoundError("Executable 'node' was not found on PATH")

    class NoGlobalPaths:
        def __init__(self, *, timeout=None) -> None:
            pass

        def resolve(self, manager=None):
            return None

    monkeypatch.setattr("eslint_overlay.runner.runner.resolve_eslint_module", fake_resolve)
    monkeypatch.setattr("eslint_overlay.runner.runner.GlobalPathResolver", NoGlobalPaths)

    result = EslintRunner().run_eslint(file_path, RunConfiguration())

    assert len(result.warnings) == 1
    assert "npm install eslint" in result.warnings[0]


def test_exclusion_matching(tmp_path: Path) -> None:
    file_path = str(tmp_path / "src" / ".eslintrc.js")

    assert matches_exclusion_pattern(file_path, "src/*.js", str(tmp_path))
    assert matches_exclusion_pattern(file_path, "*.js", str(tmp_path))
    assert matches_exclusion_pattern(file_path, file_path, str(tmp_path))
    assert matches_exclusion_pattern(file_path, f"{tmp_path.as_posix()}/src/*", None)
    assert not matches_exclusion_pattern(file_path, "lib/*.js", str(tmp_path))


@pytest.mark.parametrize(
    ("file_path", "expected"),
    [("a.js", True), ("a.JSX", True), ("a.mjs", True), ("a.ts", False), ("a.json", False), ("a.cjs", False)],
)
def test_is_js_document(file_path: str, expected: bool) -> None:
    assert is_js_document(file_path) is expected


def test_exclusion_wildcards_cross_directories(tmp_path: Path) -> None:
    nested = str(tmp_path / "src" / "deep" / "x.ts")

    assert matches_exclusion_pattern(nested, "src/*.ts", str(tmp_path))
    assert matches_exclusion_pattern(nested, "src/**/*.ts", str(tmp_path))
    assert not matches_exclusion_pattern(nested, "lib/*.ts", str(tmp_path))
