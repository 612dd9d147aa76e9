# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Plugin configuration supplied by the host and its change notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import JsonValue
from .runner.models import PackageManager, RunConfiguration

LOGGER = logging.getLogger(__name__)

ConfigListener = Callable[[], None]


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class OverlayConfig(BaseModel):
    """Options recognised in the plugin configuration object.

    Keys use the host's camelCase spelling; snake_case names are accepted too.
    ``always_show_rule_failures_as_warnings`` left unset behaves as ``True``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    suppress_while_type_errors_present: bool = Field(default=False, alias="suppressWhileTypeErrorsPresent")
    ignore_definition_files: bool = Field(default=True, alias="ignoreDefinitionFiles")
    js_enable: bool = Field(default=False, alias="jsEnable")
    exclude: tuple[str, ...] = ()
    package_manager: PackageManager | None = Field(default=None, alias="packageManager")
    always_show_rule_failures_as_warnings: bool | None = Field(
        default=None,
        alias="alwaysShowRuleFailuresAsWarnings",
    )
    config_file: str | None = Field(default=None, alias="configFile")
    node_path: str | None = Field(default=None, alias="nodePath")
    use_eslintrc: bool | None = Field(default=None, alias="useEslintrc")
    allow_inline_config: bool | None = Field(default=None, alias="allowInlineConfig")
    report_unused_disable_directives: bool | None = Field(default=None, alias="reportUnusedDisableDirectives")

    @field_validator("exclude", mode="before")
    @classmethod
    def _coerce_exclude(cls, value: object) -> object:
        """Accept a single pattern or a list of patterns."""

        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        if isinstance(value, Sequence):
            return tuple(value)
        return value

    @field_validator("package_manager", mode="before")
    @classmethod
    def _coerce_package_manager(cls, value: str | PackageManager | None) -> PackageManager | None:
        """Match package manager names case-insensitively; unknown names mean unset."""

        if isinstance(value, PackageManager):
            return value
        return PackageManager.from_str(value if isinstance(value, str) else None)

    @property
    def show_rule_failures_as_warnings(self) -> bool:
        return self.always_show_rule_failures_as_warnings is None or self.always_show_rule_failures_as_warnings

    def to_run_configuration(self, *, workspace_folder_path: str | None = None) -> RunConfiguration:
        """Return the runner options described by this configuration."""

        return RunConfiguration(
            allow_inline_config=self.allow_inline_config,
            report_unused_disable_directives=self.report_unused_disable_directives,
            js_enable=self.js_enable,
            config_file=self.config_file,
            use_eslintrc=self.use_eslintrc,
            ignore_definition_files=self.ignore_definition_files,
            exclude=self.exclude,
            node_path=self.node_path,
            package_manager=self.package_manager,
            workspace_folder_path=workspace_folder_path,
        )


def parse_config(raw: Mapping[str, JsonValue] | None) -> OverlayConfig:
    """Validate a raw configuration object.

    Raises:
        ConfigError: If a recognised key carries a value of the wrong type.
    """

    try:
        return OverlayConfig.model_validate(dict(raw or {}))
    except ValidationError as exc:
        raise ConfigError(f"invalid eslint plugin configuration: {exc}") from exc


class ConfigurationManager:
    """Hold the active configuration and notify listeners when it changes."""

    def __init__(self, config: OverlayConfig | None = None) -> None:
        self._config = config or OverlayConfig()
        self._listeners: list[ConfigListener] = []

    @property
    def config(self) -> OverlayConfig:
        return self._config

    def update_from_plugin_config(self, raw: Mapping[str, JsonValue] | None) -> OverlayConfig:
        """Replace the configuration with ``raw`` and notify listeners.

        Invalid input is logged and the previous configuration stays active.

        Returns:
            OverlayConfig: Configuration active after the update.
        """

        try:
            config = parse_config(raw)
        except ConfigError as exc:
            LOGGER.error("%s", exc)
            return self._config
        self._config = config
        for listener in list(self._listeners):
            listener()
        return self._config

    def on_updated_config(self, listener: ConfigListener) -> None:
        self._listeners.append(listener)


__all__ = ["ConfigError", "ConfigurationManager", "OverlayConfig", "parse_config"]
