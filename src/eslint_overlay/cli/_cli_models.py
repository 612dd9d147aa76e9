# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared option declarations for the eslint-overlay commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..models import JsonValue

FILE_ARGUMENT = Annotated[
    Path,
    typer.Argument(exists=True, dir_okay=False, resolve_path=True, help="File to lint."),
]
WORKSPACE_OPTION = Annotated[
    Path | None,
    typer.Option("--workspace", "-w", help="Project root (defaults to the current directory)."),
]
CONFIG_OPTION = Annotated[
    str | None,
    typer.Option("--config", "-c", help="ESLint configuration file passed to the linter."),
]
JS_OPTION = Annotated[
    bool,
    typer.Option("--js/--no-js", help="Lint JavaScript documents (.js, .jsx, .mjs)."),
]
EXCLUDE_OPTION = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-x", help="Glob pattern of files to skip (repeatable)."),
]
PACKAGE_MANAGER_OPTION = Annotated[
    str | None,
    typer.Option("--package-manager", help="Package manager used to locate a global ESLint (npm, pnpm, yarn)."),
]
NODE_PATH_OPTION = Annotated[
    str | None,
    typer.Option("--node-path", help="Directory searched for the eslint module before the global install."),
]
STRICT_SEVERITY_OPTION = Annotated[
    bool,
    typer.Option("--strict-severity", help="Report ESLint errors as errors instead of warnings."),
]
RULE_OPTION = Annotated[
    str | None,
    typer.Option("--rule", "-r", help="Only apply the fixes of this rule."),
]
WRITE_OPTION = Annotated[
    bool,
    typer.Option("--write", help="Rewrite FILE instead of printing the fixed text."),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log resolution and runner traces to stderr."),
]


def normalize_cli_values(values: Sequence[str] | None) -> tuple[str, ...]:
    """Return stripped, non-empty CLI values preserving order."""

    if not values:
        return ()
    return tuple(stripped for stripped in (value.strip() for value in values) if stripped)


@dataclass(slots=True)
class OverlayCLIOptions:
    """Options shared by every eslint-overlay command."""

    file: Path
    workspace: Path
    config_file: str | None
    js_enable: bool
    exclude: tuple[str, ...]
    package_manager: str | None
    node_path: str | None
    strict_severity: bool
    verbose: bool

    def plugin_config(self) -> dict[str, JsonValue]:
        """Return the plugin options object described by the CLI flags."""

        config: dict[str, JsonValue] = {
            "jsEnable": self.js_enable,
            "exclude": list(self.exclude),
            "alwaysShowRuleFailuresAsWarnings": not self.strict_severity,
        }
        if self.config_file:
            config["configFile"] = self.config_file
        if self.package_manager:
            config["packageManager"] = self.package_manager
        if self.node_path:
            config["nodePath"] = self.node_path
        return config


def build_options(
    file: Path,
    *,
    workspace: Path | None,
    config_file: str | None,
    js_enable: bool,
    exclude: Sequence[str] | None,
    package_manager: str | None,
    node_path: str | None,
    strict_severity: bool,
    verbose: bool,
) -> OverlayCLIOptions:
    """Construct :class:`OverlayCLIOptions` from Typer parameters."""

    return OverlayCLIOptions(
        file=file,
        workspace=(workspace or Path.cwd()).resolve(),
        config_file=config_file,
        js_enable=js_enable,
        exclude=normalize_cli_values(exclude),
        package_manager=package_manager,
        node_path=node_path,
        strict_severity=strict_severity,
        verbose=verbose,
    )


__all__ = [
    "CONFIG_OPTION",
    "EXCLUDE_OPTION",
    "FILE_ARGUMENT",
    "JS_OPTION",
    "NODE_PATH_OPTION",
    "OverlayCLIOptions",
    "PACKAGE_MANAGER_OPTION",
    "RULE_OPTION",
    "STRICT_SEVERITY_OPTION",
    "VERBOSE_OPTION",
    "WORKSPACE_OPTION",
    "WRITE_OPTION",
    "build_options",
    "normalize_cli_values",
]
