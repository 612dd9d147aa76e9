# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Allow ``python -m eslint_overlay.cli``."""

from __future__ import annotations

from .app import app

if __name__ == "__main__":
    app()
