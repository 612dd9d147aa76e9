# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Logging helpers for the plugin and user-facing console output."""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import Final

from rich.console import Console
from rich.text import Text

PLUGIN_PREFIX: Final[str] = "[eslint]"
PACKAGE_LOGGER_NAME: Final[str] = "eslint_overlay"


class PluginLogger:
    """Route plugin messages to a stdlib logger with an ``[eslint]`` prefix.

    Hosts usually collect the output of every plugin in a single log, so each
    message carries the prefix to stay identifiable.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(PACKAGE_LOGGER_NAME)

    @classmethod
    def for_plugin(cls, name: str | None = None) -> PluginLogger:
        """Return a logger for the plugin, optionally scoped to ``name``."""

        logger_name = f"{PACKAGE_LOGGER_NAME}.{name}" if name else PACKAGE_LOGGER_NAME
        return cls(logging.getLogger(logger_name))

    def info(self, message: str) -> None:
        self._logger.info("%s %s", PLUGIN_PREFIX, message)

    def debug(self, message: str) -> None:
        self._logger.debug("%s %s", PLUGIN_PREFIX, message)

    def exception(self, message: str) -> None:
        """Log ``message`` together with the active exception's traceback."""

        self._logger.exception("%s %s", PLUGIN_PREFIX, message)


def configure_logging(*, verbose: bool) -> None:
    """Stream package log records to stderr.

    Args:
        verbose: ``True`` to include runner traces (``DEBUG``), otherwise only
            ``INFO`` and above are shown.
    """

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not getattr(logger, "_eslint_overlay_configured", False):
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        setattr(logger, "_eslint_overlay_configured", True)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


@lru_cache(maxsize=2)
def get_console(*, stderr: bool = False) -> Console:
    """Return the shared Rich console for stdout or stderr."""

    return Console(stderr=stderr, soft_wrap=True)


def _print_line(msg: str, *, style: str, use_emoji: bool, prefix: str, stderr: bool = False) -> None:
    text = Text(f"{prefix if use_emoji else ''}{msg}")
    text.stylize(style)
    get_console(stderr=stderr).print(text)


def info(msg: str, *, use_emoji: bool = True, stderr: bool = False) -> None:
    """Emit an informational message."""

    _print_line(msg, style="cyan", use_emoji=use_emoji, prefix="ℹ️ ", stderr=stderr)


def ok(msg: str, *, use_emoji: bool = True) -> None:
    """Emit a success message."""

    _print_line(msg, style="green", use_emoji=use_emoji, prefix="✅ ")


def warn(msg: str, *, use_emoji: bool = True) -> None:
    """Emit a warning message."""

    _print_line(msg, style="yellow", use_emoji=use_emoji, prefix="⚠️ ")


def fail(msg: str, *, use_emoji: bool = True) -> None:
    """Emit an error message."""

    _print_line(msg, style="red", use_emoji=use_emoji, prefix="❌ ")


__all__ = [
    "PLUGIN_PREFIX",
    "PluginLogger",
    "configure_logging",
    "fail",
    "get_console",
    "info",
    "ok",
    "warn",
]
