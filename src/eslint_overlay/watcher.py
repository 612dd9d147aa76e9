# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Watch ESLint configuration files and refresh diagnostics when they change."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .interfaces import FileWatcherHost, WatchHandle

LOGGER = logging.getLogger(__name__)


class ConfigFileWatcher:
    """Register one host watch per configuration file path."""

    def __init__(self, host: FileWatcherHost | None, on_change: Callable[[], None]) -> None:
        self._host = host
        self._on_change = on_change
        self._watched: dict[str, WatchHandle] = {}

    def ensure_watching(self, path: str) -> None:
        """Start watching ``path`` unless it is already watched."""

        if path in self._watched:
            return
        if self._host is None:
            LOGGER.debug("no file watcher available, not watching %s", path)
            return
        self._watched[path] = self._host.watch_file(path, self._changed)

    def _changed(self, path: str) -> None:
        LOGGER.info("eslint configuration changed: %s", path)
        self._on_change()

    @property
    def watched_paths(self) -> tuple[str, ...]:
        return tuple(self._watched)


__all__ = ["ConfigFileWatcher"]
