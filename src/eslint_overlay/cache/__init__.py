# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Provide cache utilities used by the ESLint runner."""

from __future__ import annotations

from .mru import MruCache

__all__ = ["MruCache"]
