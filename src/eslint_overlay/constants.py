# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Constants shared by the ESLint overlay, runner and command line."""

from __future__ import annotations

from typing import Final

ESLINT_ERROR_CODE: Final[int] = 1
ESLINT_ERROR_SOURCE: Final[str] = "eslint"

FIX_ID_PREFIX: Final[str] = "eslint:"
FIX_ALL_FIX_NAME: Final[str] = "eslint:fix-all"
FIX_ALL_DESCRIPTION: Final[str] = "Fix all auto-fixable eslint failures"
DISABLE_NEXT_LINE_DIRECTIVE: Final[str] = "// eslint-disable-next-line"

ESLINT_ERROR_LEVEL: Final[int] = 2
ESLINT_WARNING_LEVEL: Final[int] = 1

LIBRARY_CACHE_SIZE: Final[int] = 100
RESOLUTION_TIMEOUT_SECONDS: Final[float] = 15.0

ESLINT_PACKAGE_NAME: Final[str] = "eslint"
NODE_EXECUTABLE: Final[str] = "node"
NODE_PATH_ENV: Final[str] = "NODE_PATH"

DEFINITION_FILE_SUFFIX: Final[str] = ".d.ts"

# Looked up in the project directory when deciding whether runner warnings
# should be shown to the user.
DEFAULT_CONFIG_FILENAMES: Final[tuple[str, ...]] = (
    "eslint.config.js",
    "eslint.config.mjs",
    "eslint.config.cjs",
    ".eslintrc",
    ".eslintrc.js",
    ".eslintrc.cjs",
    ".eslintrc.json",
    ".eslintrc.yaml",
    ".eslintrc.yml",
    "eslint.json",
)

__all__ = [
    "DEFAULT_CONFIG_FILENAMES",
    "DEFINITION_FILE_SUFFIX",
    "DISABLE_NEXT_LINE_DIRECTIVE",
    "ESLINT_ERROR_CODE",
    "ESLINT_ERROR_LEVEL",
    "ESLINT_ERROR_SOURCE",
    "ESLINT_PACKAGE_NAME",
    "ESLINT_WARNING_LEVEL",
    "FIX_ALL_DESCRIPTION",
    "FIX_ALL_FIX_NAME",
    "FIX_ID_PREFIX",
    "LIBRARY_CACHE_SIZE",
    "NODE_EXECUTABLE",
    "NODE_PATH_ENV",
    "RESOLUTION_TIMEOUT_SECONDS",
]
