# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line front end running the overlay against files on disk."""

from __future__ import annotations

import typer
from rich import box
from rich.table import Table

from ..constants import ESLINT_ERROR_CODE, FIX_ALL_FIX_NAME
from ..entry import PluginCreateInfo, init
from ..host import WorkspaceHost
from ..interfaces import LanguageService
from ..logging import configure_logging, get_console, info, ok
from ..models import CombinedCodeFixScope, Diagnostic, DiagnosticCategory, FileTextChanges, TextChange
from ..registry import EslintFixId
from ..text import SourceText, apply_text_changes
from ._cli_models import (
    CONFIG_OPTION,
    EXCLUDE_OPTION,
    FILE_ARGUMENT,
    JS_OPTION,
    NODE_PATH_OPTION,
    PACKAGE_MANAGER_OPTION,
    RULE_OPTION,
    STRICT_SEVERITY_OPTION,
    VERBOSE_OPTION,
    WORKSPACE_OPTION,
    WRITE_OPTION,
    OverlayCLIOptions,
    build_options,
)

app = typer.Typer(
    name="eslint-overlay",
    help="ESLint diagnostics and quick fixes for individual files.",
    no_args_is_help=True,
    add_completion=False,
)

_CATEGORY_STYLES = {
    DiagnosticCategory.ERROR: "red",
    DiagnosticCategory.WARNING: "yellow",
    DiagnosticCategory.SUGGESTION: "cyan",
    DiagnosticCategory.MESSAGE: "white",
}


def _create_service(options: OverlayCLIOptions) -> tuple[WorkspaceHost, LanguageService]:
    if options.verbose:
        configure_logging(verbose=True)
    host = WorkspaceHost(options.workspace)
    module = init()
    service = module.create(
        PluginCreateInfo(
            language_service=host,
            language_service_host=host,
            project=host,
            config=options.plugin_config(),
        ),
    )
    return host, service


def _render_diagnostics(source: SourceText | None, diagnostics: list[Diagnostic]) -> None:
    table = Table(title=str(source.file_name) if source else None, box=box.SIMPLE, expand=True)
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Severity", style="bold")
    table.add_column("Message", overflow="fold")
    for diagnostic in diagnostics:
        line, column = "-", "-"
        if source is not None and diagnostic.start is not None:
            index = source.line_of_position(diagnostic.start)
            line = str(index + 1)
            column = str(max(diagnostic.start - source.line_start(index), 0) + 1)
        style = _CATEGORY_STYLES.get(diagnostic.category, "white")
        table.add_row(line, column, f"[{style}]{diagnostic.category.name.lower()}[/]", diagnostic.message_text)
    get_console().print(table)


def _fix_all_changes(
    service: LanguageService,
    file_name: str,
    diagnostics: list[Diagnostic],
) -> tuple[FileTextChanges, ...]:
    """Return the edits of the fix-all-auto-fixable action offered for ``file_name``."""

    for diagnostic in diagnostics:
        if diagnostic.code != ESLINT_ERROR_CODE or diagnostic.start is None:
            continue
        start = diagnostic.start
        end = start + (diagnostic.length or 0)
        fixes = service.get_code_fixes_at_position(file_name, start, end, [ESLINT_ERROR_CODE])
        for fix in fixes:
            if fix.fix_name == FIX_ALL_FIX_NAME:
                return fix.changes
    return ()


def _changes_for_file(file_name: str, changes: tuple[FileTextChanges, ...]) -> list[TextChange]:
    return [
        change
        for file_changes in changes
        if file_changes.file_name == file_name
        for change in file_changes.text_changes
    ]


@app.command("diagnostics")
def diagnostics_command(
    file: FILE_ARGUMENT,
    workspace: WORKSPACE_OPTION = None,
    config_file: CONFIG_OPTION = None,
    js_enable: JS_OPTION = False,
    exclude: EXCLUDE_OPTION = None,
    package_manager: PACKAGE_MANAGER_OPTION = None,
    node_path: NODE_PATH_OPTION = None,
    strict_severity: STRICT_SEVERITY_OPTION = False,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Print the ESLint diagnostics of FILE; exit 1 when any is an error."""

    options = build_options(
        file,
        workspace=workspace,
        config_file=config_file,
        js_enable=js_enable,
        exclude=exclude,
        package_manager=package_manager,
        node_path=node_path,
        strict_severity=strict_severity,
        verbose=verbose,
    )
    host, service = _create_service(options)
    file_name = str(options.file)
    diagnostics = list(service.get_semantic_diagnostics(file_name))
    if not diagnostics:
        ok(f"No problems in {file_name}")
        raise typer.Exit(code=0)

    _render_diagnostics(host.get_source_file(file_name), diagnostics)
    has_errors = any(diagnostic.category is DiagnosticCategory.ERROR for diagnostic in diagnostics)
    raise typer.Exit(code=1 if has_errors else 0)


@app.command("fix")
def fix_command(
    file: FILE_ARGUMENT,
    rule: RULE_OPTION = None,
    write: WRITE_OPTION = False,
    workspace: WORKSPACE_OPTION = None,
    config_file: CONFIG_OPTION = None,
    js_enable: JS_OPTION = False,
    exclude: EXCLUDE_OPTION = None,
    package_manager: PACKAGE_MANAGER_OPTION = None,
    node_path: NODE_PATH_OPTION = None,
    strict_severity: STRICT_SEVERITY_OPTION = False,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Apply the auto-fixable ESLint fixes of FILE, or those of one rule."""

    options = build_options(
        file,
        workspace=workspace,
        config_file=config_file,
        js_enable=js_enable,
        exclude=exclude,
        package_manager=package_manager,
        node_path=node_path,
        strict_severity=strict_severity,
        verbose=verbose,
    )
    host, service = _create_service(options)
    file_name = str(options.file)
    diagnostics = list(service.get_semantic_diagnostics(file_name))

    if rule:
        scope = CombinedCodeFixScope(file_name=file_name)
        combined = service.get_combined_code_fix(scope, EslintFixId.from_rule(rule))
        changes = _changes_for_file(file_name, combined.changes)
    else:
        changes = _changes_for_file(file_name, _fix_all_changes(service, file_name, diagnostics))

    text = host.get_script_snapshot(file_name) or ""
    if not changes:
        info("No auto-fixable problems found", stderr=not write)
        if not write:
            typer.echo(text, nl=False)
        raise typer.Exit(code=0)

    fixed = apply_text_changes(text, changes)
    if write:
        options.file.write_bytes(fixed.encode("utf-8"))
        host.forget(file_name)
        ok(f"Applied {len(changes)} edit(s) to {file_name}")
    else:
        typer.echo(fixed, nl=False)
    raise typer.Exit(code=0)


__all__ = ["app"]
