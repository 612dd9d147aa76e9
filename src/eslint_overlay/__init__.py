# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""ESLint diagnostics and quick fixes layered over a host language service."""

from __future__ import annotations

from importlib import metadata

from .entry import PluginCreateInfo, PluginModule, init

__all__ = ["PluginCreateInfo", "PluginModule", "__version__", "init"]

try:
    __version__ = metadata.version("eslint-overlay")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
