# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate ESLint installs through Node module resolution and package managers."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from ..constants import ESLINT_PACKAGE_NAME, NODE_EXECUTABLE, NODE_PATH_ENV, RESOLUTION_TIMEOUT_SECONDS
from ..process_utils import SubprocessExecutionError, run_command
from .models import PackageManager

LOGGER = logging.getLogger(__name__)

RESOLVE_SCRIPT: Final[str] = f"console.log(require.resolve('{ESLINT_PACKAGE_NAME}'));"
WINDOWS_OS_NAME: Final[str] = "nt"

_LOCAL_INSTALL_COMMANDS: Final[dict[PackageManager, str]] = {
    PackageManager.NPM: "npm install eslint",
    PackageManager.PNPM: "pnpm install eslint",
    PackageManager.YARN: "yarn add eslint",
}
_GLOBAL_INSTALL_COMMANDS: Final[dict[PackageManager, str]] = {
    PackageManager.NPM: "npm install -g eslint",
    PackageManager.PNPM: "pnpm install -g eslint",
    PackageManager.YARN: "yarn global add eslint",
}


def build_resolution_env(node_path: str | None, base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return a copy of the environment with ``node_path`` prepended to ``NODE_PATH``."""

    env = dict(os.environ if base is None else base)
    if node_path:
        existing = env.get(NODE_PATH_ENV)
        env[NODE_PATH_ENV] = f"{node_path}{os.pathsep}{existing}" if existing else node_path
    return env


def resolve_eslint_module(
    node_path: str | None,
    cwd: str | None,
    *,
    node_executable: str = NODE_EXECUTABLE,
    timeout: float | None = RESOLUTION_TIMEOUT_SECONDS,
) -> str:
    """Ask Node where ``require('eslint')`` would load from.

    Args:
        node_path: Extra module search directory, or ``None``.
        cwd: Directory resolution starts from; ignored when it does not exist.
        node_executable: Node binary to spawn.
        timeout: Limit in seconds for the resolution process.

    Returns:
        str: Absolute path of the ESLint entry module, or ``""`` when Node could
        not resolve it (including timeouts).

    Raises:
        OSError: If the Node executable cannot be started.
    """

    working_dir = cwd if cwd and Path(cwd).is_dir() else None
    completed = run_command(
        [node_executable, "-e", RESOLVE_SCRIPT],
        cwd=working_dir,
        env=build_resolution_env(node_path),
        check=False,
        timeout=timeout,
    )
    if completed.returncode != 0:
        LOGGER.debug("eslint resolution from %s failed: %s", working_dir, (completed.stderr or "").strip())
        return ""
    return (completed.stdout or "").strip()


class GlobalPathResolver:
    """Determine and remember the global module directory of each package manager.

    Failed lookups are remembered as ``None`` so a missing package manager is
    only probed once.
    """

    def __init__(self, *, timeout: float | None = RESOLUTION_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout
        self._paths: dict[PackageManager, str | None] = {}

    def resolve(self, manager: PackageManager | None = None) -> str | None:
        """Return the global ``node_modules`` directory for ``manager`` (npm by default)."""

        manager = manager or PackageManager.NPM
        if manager not in self._paths:
            self._paths[manager] = self._lookup(manager)
        return self._paths[manager]

    def _lookup(self, manager: PackageManager) -> str | None:
        try:
            if manager is PackageManager.NPM:
                return self._npm_global_path()
            if manager is PackageManager.YARN:
                return self._yarn_global_path()
            return self._capture(["pnpm", "root", "-g"]) or None
        except (OSError, SubprocessExecutionError) as exc:
            LOGGER.debug("unable to resolve the global %s path: %s", manager.value, exc)
            return None

    def _npm_global_path(self) -> str | None:
        prefix = self._capture(["npm", "config", "get", "prefix"])
        if not prefix:
            return None
        if os.name == WINDOWS_OS_NAME:
            return str(Path(prefix) / "node_modules")
        return str(Path(prefix) / "lib" / "node_modules")

    def _yarn_global_path(self) -> str | None:
        directory = self._capture(["yarn", "global", "dir"])
        if not directory:
            return None
        return str(Path(directory) / "node_modules")

    def _capture(self, args: list[str]) -> str:
        completed = run_command(args, check=True, timeout=self._timeout)
        return (completed.stdout or "").strip()


def install_failure_message(file_path: str, manager: PackageManager | None) -> str:
    """Return the warning shown when no ESLint install can be loaded for ``file_path``."""

    manager = manager or PackageManager.NPM
    return "\n".join(
        [
            f"Failed to load the ESLint library for '{file_path}'",
            f"To use ESLint, please install eslint using '{_LOCAL_INSTALL_COMMANDS[manager]}' "
            f"or globally using '{_GLOBAL_INSTALL_COMMANDS[manager]}'.",
            "Be sure to restart your editor after installing eslint.",
        ],
    )


__all__ = [
    "GlobalPathResolver",
    "RESOLVE_SCRIPT",
    "build_resolution_env",
    "install_failure_message",
    "resolve_eslint_module",
]
