# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Overlay ESLint diagnostics and quick fixes on top of a host language service.

Each diagnostics request re-lints the file, maps the findings onto the current
snapshot and rebuilds the file's :class:`ProblemMap`. Code-fix requests look
problems up by the exact span their diagnostic was published with and build
single, rule-scoped and file-wide fixes from it.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Final

from .config import ConfigurationManager, OverlayConfig
from .constants import (
    DEFAULT_CONFIG_FILENAMES,
    DEFINITION_FILE_SUFFIX,
    DISABLE_NEXT_LINE_DIRECTIVE,
    ESLINT_ERROR_CODE,
    ESLINT_ERROR_LEVEL,
    ESLINT_ERROR_SOURCE,
    FIX_ALL_DESCRIPTION,
    FIX_ALL_FIX_NAME,
)
from .failures import filter_problems_for_file, get_non_overlapping_replacements
from .interfaces import FileWatcherHost, FormatOptions, LanguageService, LanguageServiceHost, Project, UserPreferences
from .logging import PluginLogger
from .models import (
    CodeFixAction,
    CombinedCodeActions,
    CombinedCodeFixScope,
    Diagnostic,
    DiagnosticCategory,
    FileTextChanges,
    LintFix,
    LintMessage,
    Problem,
    TextChange,
    TextSpan,
)
from .registry import EslintFixId, ProblemMap
from .runner import EslintRunner, RunResult
from .text import SourceText
from .watcher import ConfigFileWatcher

IS_ESLINT_LANGUAGE_SERVICE_MARKER: Final[str] = "__is_eslint_language_service__"
_LEADING_SPACE: Final[re.Pattern[str]] = re.compile(r"^([ \t]+)")

DiagnosticsDelegate = Callable[[str], Sequence[Diagnostic]]
CodeFixesDelegate = Callable[..., Sequence[CodeFixAction]]
CombinedFixDelegate = Callable[..., CombinedCodeActions]


def _text_changes(replacements: Sequence[LintFix]) -> tuple[TextChange, ...]:
    return tuple(TextChange.from_fix(replacement) for replacement in replacements)


class EslintPlugin:
    """Compute ESLint diagnostics and fixes for the files of one project."""

    def __init__(
        self,
        language_service_host: LanguageServiceHost,
        project: Project,
        configuration_manager: ConfigurationManager,
        *,
        logger: PluginLogger | None = None,
        runner: EslintRunner | None = None,
        file_watcher_host: FileWatcherHost | None = None,
    ) -> None:
        self._host = language_service_host
        self._project = project
        self._configuration_manager = configuration_manager
        self._logger = logger or PluginLogger.for_plugin()
        self._code_fix_actions: dict[str, ProblemMap] = {}
        self._logger.info("loaded")

        self._runner = runner or EslintRunner(self._logger.debug)
        self._config_file_watcher = ConfigFileWatcher(file_watcher_host, self._on_config_file_changed)
        configuration_manager.on_updated_config(self._on_configuration_updated)

    @property
    def config(self) -> OverlayConfig:
        return self._configuration_manager.config

    def problems_for(self, file_name: str) -> ProblemMap | None:
        return self._code_fix_actions.get(file_name)

    def decorate(self, language_service: LanguageService) -> LanguageService:
        """Wrap ``language_service`` so it reports ESLint results.

        Decorating an already decorated service returns it unchanged.
        """

        if getattr(language_service, IS_ESLINT_LANGUAGE_SERVICE_MARKER, False) is True:
            return language_service
        return EslintLanguageService(language_service, self)

    def _on_config_file_changed(self) -> None:
        self._logger.info("ESLint file changed")
        self._project.refresh_diagnostics()

    def _on_configuration_updated(self) -> None:
        self._logger.info("plugin configuration changed")
        self._project.refresh_diagnostics()

    # Diagnostics -------------------------------------------------------

    def get_semantic_diagnostics(self, delegate: DiagnosticsDelegate, file_name: str) -> list[Diagnostic]:
        """Return the host diagnostics of ``file_name`` followed by ESLint's.

        Any failure inside the overlay is logged and the host diagnostics are
        returned unmodified.
        """

        diagnostics = list(delegate(file_name))
        config = self.config
        if diagnostics and config.suppress_while_type_errors_present:
            return diagnostics

        try:
            return self._compute_diagnostics(file_name, diagnostics, config)
        except Exception as exc:  # pylint: disable=broad-except -- lint failures must not break host diagnostics
            self._logger.exception(f"eslint-language service error: {exc}")
            return diagnostics

    def _compute_diagnostics(
        self,
        file_name: str,
        host_diagnostics: list[Diagnostic],
        config: OverlayConfig,
    ) -> list[Diagnostic]:
        self._logger.info(f"Computing eslint semantic diagnostics for '{file_name}'")
        self._code_fix_actions.pop(file_name, None)

        if config.ignore_definition_files and file_name.endswith(DEFINITION_FILE_SUFFIX):
            return host_diagnostics

        configuration = config.to_run_configuration(workspace_folder_path=self._project.get_current_directory())
        try:
            result = self._runner.run_eslint(file_name, configuration)
        except Exception as exc:  # pylint: disable=broad-except -- protect against eslint crashes
            self._logger.exception(f"eslint error {exc}")
            return host_diagnostics
        if result.config_file_path:
            self._config_file_watcher.ensure_watching(self._absolute(result.config_file_path))

        source = self._source_file(file_name)
        if source is None:
            self._logger.info(f"No snapshot available for '{file_name}'")
            return host_diagnostics

        warning_diagnostics: list[Diagnostic] = []
        if result.warnings:
            if self._has_lint_config(result):
                # A config file exists, so the user likely wanted to lint and
                # should learn that linting is degraded.
                warning_diagnostics = [self._make_warning(warning, file_name) for warning in result.warnings]
            else:
                for warning in result.warnings:
                    self._logger.info(warning)

        diagnostics = [*warning_diagnostics, *host_diagnostics]
        for failure in filter_problems_for_file(file_name, result.lint_result):
            failure = source.localize_fix(failure)
            span = source.text_span_for(failure)
            diagnostics.append(self._make_diagnostic(failure, span, file_name))
            self._record_code_action(failure, span, file_name)
        return diagnostics

    def _absolute(self, path: str) -> str:
        candidate = Path(path)
        if candidate.is_absolute():
            return str(candidate)
        return str(Path(self._project.get_current_directory()) / candidate)

    def _has_lint_config(self, result: RunResult) -> bool:
        if result.config_file_path and Path(self._absolute(result.config_file_path)).is_file():
            return True
        directory = Path(result.workspace_folder_path or self._project.get_current_directory())
        return any((directory / name).is_file() for name in DEFAULT_CONFIG_FILENAMES)

    def _source_file(self, file_name: str) -> SourceText | None:
        source = self._project.get_source_file(file_name)
        if source is not None:
            return source
        snapshot = self._host.get_script_snapshot(file_name)
        if snapshot is None:
            return None
        return SourceText(file_name, snapshot)

    def _record_code_action(self, failure: LintMessage, span: TextSpan, file_name: str) -> None:
        problems = self._code_fix_actions.setdefault(file_name, ProblemMap())
        problems.set(span.start, span.end, Problem.from_failure(failure))

    def _make_warning(self, warning: str, file_name: str) -> Diagnostic:
        return Diagnostic(
            file_name=file_name,
            start=0,
            length=0,
            message_text=warning,
            category=DiagnosticCategory.WARNING,
            code=ESLINT_ERROR_CODE,
            source=ESLINT_ERROR_SOURCE,
        )

    def _make_diagnostic(self, failure: LintMessage, span: TextSpan, file_name: str) -> Diagnostic:
        message = f"{failure.message} ({failure.rule_id})" if failure.rule_id is not None else failure.message
        return Diagnostic(
            file_name=file_name,
            start=span.start,
            length=span.length,
            message_text=message,
            category=self._diagnostic_category(failure),
            code=ESLINT_ERROR_CODE,
            source=ESLINT_ERROR_SOURCE,
        )

    def _diagnostic_category(self, failure: LintMessage) -> DiagnosticCategory:
        if self.config.show_rule_failures_as_warnings:
            return DiagnosticCategory.WARNING
        if failure.severity == ESLINT_ERROR_LEVEL:
            return DiagnosticCategory.ERROR
        return DiagnosticCategory.WARNING

    # Code fixes --------------------------------------------------------

    def get_code_fixes_at_position(
        self,
        delegate: CodeFixesDelegate,
        file_name: str,
        start: int,
        end: int,
        error_codes: Sequence[int],
        format_options: FormatOptions | None = None,
        preferences: UserPreferences | None = None,
    ) -> list[CodeFixAction]:
        """Return the host fixes at ``[start, end)`` followed by ESLint fixes."""

        fixes = list(delegate(file_name, start, end, error_codes, format_options, preferences))
        if self.config.suppress_while_type_errors_present and fixes:
            return fixes

        self._logger.debug(f"getCodeFixes {error_codes[0] if error_codes else '<none>'}")
        try:
            return [*fixes, *self._eslint_code_fixes(file_name, start, end)]
        except Exception as exc:  # pylint: disable=broad-except -- keep host fixes available
            self._logger.exception(f"eslint code fix error: {exc}")
            return fixes

    def _eslint_code_fixes(self, file_name: str, start: int, end: int) -> list[CodeFixAction]:
        problems = self._code_fix_actions.get(file_name)
        if problems is None:
            return []
        problem = problems.get(start, end)
        if problem is None or not problem.failure.rule_id:
            return []

        rule_id = problem.failure.rule_id
        fixes: list[CodeFixAction] = []
        if problem.fixable:
            quick_fix = self._rule_failure_quick_fix(problem.failure, file_name)
            fix_all = self._rule_failure_fix_all_quick_fix(rule_id, problems, file_name)
            if fix_all is not None:
                quick_fix = quick_fix.model_copy(
                    update={"fix_id": fix_all.fix_id, "fix_all_description": fix_all.description},
                )
            fixes.append(quick_fix)
            if fix_all is not None:
                fixes.append(fix_all)
            fixes.append(self._fix_all_auto_fixable_quick_fix(problems, file_name))

        disable = self._disable_rule_quick_fix(problem.failure, file_name)
        if disable is not None:
            fixes.append(disable)
        return fixes

    def get_combined_code_fix(
        self,
        delegate: CombinedFixDelegate,
        scope: CombinedCodeFixScope,
        fix_id: object,
        format_options: FormatOptions | None = None,
        preferences: UserPreferences | None = None,
    ) -> CombinedCodeActions:
        """Return the edits of every fixable problem of the rule named by ``fix_id``.

        Identifiers without the ``eslint:`` prefix are handed to the host.
        """

        rule_name = EslintFixId.to_rule_name(fix_id)
        if not rule_name:
            return delegate(scope, fix_id, format_options, preferences)

        problems = self._code_fix_actions.get(scope.file_name)
        if problems is not None:
            fix_all = self._rule_failure_fix_all_quick_fix(rule_name, problems, scope.file_name, minimum=1)
            if fix_all is not None:
                return CombinedCodeActions(changes=fix_all.changes)
        return CombinedCodeActions()

    def _rule_failure_quick_fix(self, failure: LintMessage, file_name: str) -> CodeFixAction:
        return CodeFixAction(
            description=f"Fix: {failure.message}",
            fix_name=EslintFixId.from_failure(failure),
            changes=(FileTextChanges(file_name=file_name, text_changes=_text_changes(failure.replacements)),),
        )

    def _rule_failure_fix_all_quick_fix(
        self,
        rule_name: str,
        problems: ProblemMap,
        file_name: str,
        *,
        minimum: int = 2,
    ) -> CodeFixAction | None:
        """Build the action fixing every fixable problem of ``rule_name``.

        Returns ``None`` when fewer than ``minimum`` problems qualify; a
        rule-scoped action is pointless for a single instance.
        """

        failures = [problem.failure for problem in problems.fixable_for_rule(rule_name)]
        if not failures or len(failures) < minimum:
            return None
        replacements = get_non_overlapping_replacements(failures)
        return CodeFixAction(
            description=f"Fix all '{rule_name}'",
            fix_name=f"{FIX_ALL_FIX_NAME}:{rule_name}",
            changes=(FileTextChanges(file_name=file_name, text_changes=_text_changes(replacements)),),
            fix_id=EslintFixId.from_rule(rule_name),
        )

    def _fix_all_auto_fixable_quick_fix(self, problems: ProblemMap, file_name: str) -> CodeFixAction:
        replacements = get_non_overlapping_replacements([problem.failure for problem in problems.fixable()])
        return CodeFixAction(
            description=FIX_ALL_DESCRIPTION,
            fix_name=FIX_ALL_FIX_NAME,
            changes=(FileTextChanges(file_name=file_name, text_changes=_text_changes(replacements)),),
        )

    def _disable_rule_quick_fix(self, failure: LintMessage, file_name: str) -> CodeFixAction | None:
        source = self._source_file(file_name)
        if source is None:
            return None
        line = min(max((failure.line or 1) - 1, 0), source.line_count - 1)
        line_start = source.line_start(line)

        prefix = ""
        snapshot = self._host.get_script_snapshot(file_name)
        if snapshot is not None:
            line_end = source.line_starts[line + 1] if line < source.line_count - 1 else source.end
            leading_space = _LEADING_SPACE.match(snapshot[line_start:line_end])
            if leading_space:
                prefix = leading_space.group(1)

        return CodeFixAction(
            description=f"Disable rule '{failure.rule_id}'",
            fix_name=f"eslint:disable:{failure.rule_id}",
            changes=(
                FileTextChanges(
                    file_name=file_name,
                    text_changes=(
                        TextChange(
                            span=TextSpan(start=line_start, end=line_start),
                            new_text=f"{prefix}{DISABLE_NEXT_LINE_DIRECTIVE} {failure.rule_id}\n",
                        ),
                    ),
                ),
            ),
        )


class EslintLanguageService:
    """Language service decorator adding ESLint results to the wrapped service.

    Only diagnostics, code fixes, combined fixes and the supported fix codes
    are overridden; every other attribute is looked up on the wrapped service.
    """

    __is_eslint_language_service__ = True

    def __init__(self, delegate: LanguageService, plugin: EslintPlugin) -> None:
        self._delegate = delegate
        self._plugin = plugin

    @property
    def delegate(self) -> LanguageService:
        return self._delegate

    def __getattr__(self, name: str) -> object:
        return getattr(self._delegate, name)

    def get_semantic_diagnostics(self, file_name: str) -> list[Diagnostic]:
        return self._plugin.get_semantic_diagnostics(self._delegate.get_semantic_diagnostics, file_name)

    def get_code_fixes_at_position(
        self,
        file_name: str,
        start: int,
        end: int,
        error_codes: Sequence[int],
        format_options: FormatOptions | None = None,
        preferences: UserPreferences | None = None,
    ) -> list[CodeFixAction]:
        return self._plugin.get_code_fixes_at_position(
            self._delegate.get_code_fixes_at_position,
            file_name,
            start,
            end,
            error_codes,
            format_options,
            preferences,
        )

    def get_combined_code_fix(
        self,
        scope: CombinedCodeFixScope,
        fix_id: object,
        format_options: FormatOptions | None = None,
        preferences: UserPreferences | None = None,
    ) -> CombinedCodeActions:
        return self._plugin.get_combined_code_fix(
            self._delegate.get_combined_code_fix,
            scope,
            fix_id,
            format_options,
            preferences,
        )

    def get_supported_code_fixes(self) -> list[str]:
        return [*self._delegate.get_supported_code_fixes(), str(ESLINT_ERROR_CODE)]


__all__ = ["EslintLanguageService", "EslintPlugin", "IS_ESLINT_LANGUAGE_SERVICE_MARKER"]
