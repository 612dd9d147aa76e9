# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Load a resolved ESLint install and run it through a Node bridge process."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..constants import ESLINT_PACKAGE_NAME, NODE_EXECUTABLE
from ..models import LintReport
from ..process_utils import run_command

# The bridge requires the resolved module, runs it on one file and prints a
# single JSON envelope as its last line: ``loadError`` when the module cannot be
# required, ``error`` when linting fails, ``report`` otherwise. ``console.warn``
# is captured so ESLint's own warnings are returned to the caller. Flat-config
# engines reject the eslintrc-only options, so those are left out or moved into
# ``overrideConfig``.
BRIDGE_SCRIPT: Final[str] = r"""
const options = JSON.parse(process.argv[2]);
const warnings = [];
const originalWarn = console.warn;
console.warn = (...args) => {
  warnings.push(args.map((arg) => String(arg)).join(" "));
};
const defined = (object) =>
  Object.fromEntries(Object.entries(object).filter(([, value]) => value !== undefined));
const describe = (error) => String((error && error.stack) || error);
const finish = (envelope) => {
  console.warn = originalWarn;
  process.stdout.write("\n" + JSON.stringify(Object.assign({ warnings }, envelope)) + "\n");
};
const fail = (error) => {
  finish({ error: describe(error) });
  process.exitCode = 1;
};
const summarize = (results) => ({
  results,
  errorCount: results.reduce((total, result) => total + (result.errorCount || 0), 0),
  warningCount: results.reduce((total, result) => total + (result.warningCount || 0), 0),
});
let library;
try {
  library = require(process.argv[1]);
} catch (error) {
  finish({ loadError: describe(error) });
  process.exitCode = 1;
}
if (library !== undefined) {
  try {
    if (typeof library.CLIEngine === "function") {
      const engine = new library.CLIEngine(defined({
        fix: false,
        allowInlineConfig: options.allowInlineConfig,
        reportUnusedDisableDirectives: options.reportUnusedDisableDirectives,
        configFile: options.configFile,
        useEslintrc: options.useEslintrc,
      }));
      finish({ report: engine.executeOnFiles([options.filename]) });
    } else if (library.ESLint.configType === "flat") {
      const linterOptions = defined({
        reportUnusedDisableDirectives: options.reportUnusedDisableDirectives === undefined
          ? undefined
          : (options.reportUnusedDisableDirectives ? "warn" : "off"),
      });
      const engine = new library.ESLint(defined({
        fix: false,
        allowInlineConfig: options.allowInlineConfig,
        overrideConfigFile: options.configFile,
        overrideConfig: Object.keys(linterOptions).length ? { linterOptions } : undefined,
      }));
      engine.lintFiles([options.filename]).then((results) => finish({ report: summarize(results) }), fail);
    } else {
      const engine = new library.ESLint(defined({
        fix: false,
        allowInlineConfig: options.allowInlineConfig,
        reportUnusedDisableDirectives: options.reportUnusedDisableDirectives ? "warn" : undefined,
        overrideConfigFile: options.configFile,
        useEslintrc: options.useEslintrc,
      }));
      engine.lintFiles([options.filename]).then((results) => finish({ report: summarize(results) }), fail);
    }
  } catch (error) {
    fail(error);
  }
}
"""


class LibraryLoadError(RuntimeError):
    """Raised when a resolved path does not point at a usable ESLint install."""


class LibraryExecutionError(RuntimeError):
    """Raised when ESLint crashes or its output cannot be understood."""


class LintOptions(BaseModel):
    """Options handed to ESLint for a single file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    filename: str
    fix: bool = False
    allow_inline_config: bool | None = Field(default=None, alias="allowInlineConfig")
    report_unused_disable_directives: bool | None = Field(default=None, alias="reportUnusedDisableDirectives")
    config_file: str | None = Field(default=None, alias="configFile")
    use_eslintrc: bool | None = Field(default=None, alias="useEslintrc")

    def to_payload(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class BridgeEnvelope(BaseModel):
    """JSON document printed by the bridge script."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    report: LintReport | None = None
    warnings: tuple[str, ...] = ()
    error: str | None = None
    load_error: str | None = Field(default=None, alias="loadError")


@dataclass(frozen=True, slots=True)
class BridgeOutput:
    """Report and captured warnings of one bridge run."""

    report: LintReport
    warnings: tuple[str, ...]


def parse_bridge_output(stdout: str, stderr: str, returncode: int) -> BridgeOutput:
    """Decode the envelope printed by :data:`BRIDGE_SCRIPT`.

    Args:
        stdout: Captured standard output; the envelope is its last non-empty line.
        stderr: Captured standard error, used for error reporting only.
        returncode: Exit status of the Node process.

    Returns:
        BridgeOutput: Parsed report and warnings.

    Raises:
        LibraryLoadError: If the ESLint module could not be required.
        LibraryExecutionError: If ESLint failed or no valid envelope was printed.
    """

    lines = [line for line in (stdout or "").splitlines() if line.strip()]
    if not lines:
        detail = (stderr or "").strip() or "<no output>"
        raise LibraryExecutionError(f"ESLint bridge exited with status {returncode}: {detail}")
    try:
        envelope = BridgeEnvelope.model_validate_json(lines[-1])
    except ValidationError as exc:
        raise LibraryExecutionError(f"ESLint bridge produced unreadable output: {exc}") from exc
    if envelope.load_error is not None:
        raise LibraryLoadError(envelope.load_error)
    if envelope.error is not None:
        raise LibraryExecutionError(envelope.error)
    if envelope.report is None:
        raise LibraryExecutionError("ESLint bridge did not return a report")
    return BridgeOutput(report=envelope.report, warnings=envelope.warnings)


@dataclass(frozen=True, slots=True)
class EslintLibrary:
    """A located ESLint install that can lint files through Node.

    Attributes:
        module_path: Entry module returned by ``require.resolve('eslint')``.
        package_root: Directory holding the ``eslint`` ``package.json``.
        version: Version declared by the package, when present.
        node_executable: Node binary used to run the bridge.
    """

    module_path: Path
    package_root: Path
    version: str | None = None
    node_executable: str = NODE_EXECUTABLE

    @classmethod
    def load(cls, module_path: str, *, node_executable: str = NODE_EXECUTABLE) -> EslintLibrary:
        """Validate ``module_path`` and locate the ``eslint`` package owning it.

        Raises:
            LibraryLoadError: If the path is empty, missing, or not part of an
                ``eslint`` package.
        """

        if not module_path:
            raise LibraryLoadError("ESLint module path is empty")
        path = Path(module_path)
        if not path.is_file():
            raise LibraryLoadError(f"ESLint module '{module_path}' does not exist")
        for candidate in path.parents:
            manifest = candidate / "package.json"
            if not manifest.is_file():
                continue
            try:
                data = json.loads(manifest.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise LibraryLoadError(f"Unable to read '{manifest}': {exc}") from exc
            if isinstance(data, dict) and data.get("name") == ESLINT_PACKAGE_NAME:
                version = data.get("version")
                return cls(
                    module_path=path,
                    package_root=candidate,
                    version=version if isinstance(version, str) else None,
                    node_executable=node_executable,
                )
        raise LibraryLoadError(f"'{module_path}' is not part of an {ESLINT_PACKAGE_NAME} package")

    def execute(
        self,
        options: LintOptions,
        *,
        cwd: str | None = None,
        timeout: float | None = None,
    ) -> BridgeOutput:
        """Lint ``options.filename`` and return the report.

        Args:
            options: ESLint options for the file.
            cwd: Working directory of the Node process.
            timeout: Optional limit in seconds; ``None`` waits indefinitely.

        Returns:
            BridgeOutput: Report and warnings printed by ESLint.

        Raises:
            LibraryLoadError: If Node cannot require the ESLint module.
            LibraryExecutionError: If Node cannot be started or ESLint fails.
        """

        try:
            completed = run_command(
                [self.node_executable, "-e", BRIDGE_SCRIPT, str(self.module_path), options.to_payload()],
                cwd=cwd,
                check=False,
                timeout=timeout,
            )
        except OSError as exc:
            raise LibraryExecutionError(f"Unable to start '{self.node_executable}': {exc}") from exc
        return parse_bridge_output(completed.stdout or "", completed.stderr or "", completed.returncode)


__all__ = [
    "BRIDGE_SCRIPT",
    "BridgeEnvelope",
    "BridgeOutput",
    "EslintLibrary",
    "LibraryExecutionError",
    "LibraryLoadError",
    "LintOptions",
    "parse_bridge_output",
]
