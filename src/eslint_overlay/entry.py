# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Plugin entry point consumed by language-service hosts."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .config import ConfigurationManager
from .interfaces import FileWatcherHost, LanguageService, LanguageServiceHost, Project
from .logging import PluginLogger
from .models import JsonValue
from .plugin import EslintPlugin
from .runner import EslintRunner


@dataclass(slots=True)
class PluginCreateInfo:
    """Collaborators a host hands to :meth:`PluginModule.create`."""

    language_service: LanguageService
    language_service_host: LanguageServiceHost
    project: Project
    config: Mapping[str, JsonValue] = field(default_factory=dict)
    file_watcher_host: FileWatcherHost | None = None


class PluginModule:
    """Plugin factory shared by every project of one host process.

    The configuration manager outlives individual ``create`` calls so that
    ``on_configuration_changed`` reaches every decorated service.
    """

    def __init__(self, runner: EslintRunner | None = None) -> None:
        self._configuration_manager = ConfigurationManager()
        self._runner = runner

    @property
    def configuration_manager(self) -> ConfigurationManager:
        return self._configuration_manager

    def create(self, info: PluginCreateInfo) -> LanguageService:
        """Return ``info.language_service`` decorated with ESLint results."""

        logger = PluginLogger.for_plugin()
        self._configuration_manager.update_from_plugin_config(info.config)
        plugin = EslintPlugin(
            info.language_service_host,
            info.project,
            self._configuration_manager,
            logger=logger,
            runner=self._runner,
            file_watcher_host=info.file_watcher_host,
        )
        return plugin.decorate(info.language_service)

    def on_configuration_changed(self, config: Mapping[str, JsonValue] | None) -> None:
        self._configuration_manager.update_from_plugin_config(config)


def init(runner: EslintRunner | None = None) -> PluginModule:
    """Return a fresh plugin module, optionally sharing ``runner`` across projects."""

    return PluginModule(runner=runner)


__all__ = ["PluginCreateInfo", "PluginModule", "init"]
