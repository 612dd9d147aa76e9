# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""ESLint resolution and execution."""

from __future__ import annotations

from .library import EslintLibrary, LibraryExecutionError, LibraryLoadError, LintOptions
from .models import PackageManager, RunConfiguration, RunResult
from .resolution import GlobalPathResolver, install_failure_message
from .runner import EslintRunner, is_js_document, matches_exclusion_pattern

__all__ = [
    "EslintLibrary",
    "EslintRunner",
    "GlobalPathResolver",
    "LibraryExecutionError",
    "LibraryLoadError",
    "LintOptions",
    "PackageManager",
    "RunConfiguration",
    "RunResult",
    "install_failure_message",
    "is_js_document",
    "matches_exclusion_pattern",
]
