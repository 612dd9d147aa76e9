# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the Node tool chain (node, npm, yarn, pnpm) as captured subprocesses."""

from __future__ import annotations

import shutil

# Bandit: node, npm, yarn and pnpm are invoked with argument lists and never
# through a shell.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Final

TIMEOUT_RETURNCODE: Final[int] = 124


class SubprocessExecutionError(RuntimeError):
    """Raised when a checked command exits with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str | None) -> None:
        super().__init__(f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


def _resolve_executable(args: Sequence[str]) -> list[str]:
    if not args:
        raise ValueError("subprocess command requires at least one argument")
    head, *rest = args
    if Path(head).is_absolute():
        return [head, *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def _as_text(value: str | bytes | None) -> str:
    if isinstance(value, bytes):
        return value.decode(errors="ignore")
    return value or ""


def run_command(
    args: Sequence[str],
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run ``args`` with captured text output and no standard input.

    A timeout does not raise :class:`subprocess.TimeoutExpired`; the process is
    reported with return code ``124`` and a note appended to its stderr.

    Raises:
        FileNotFoundError: If the executable cannot be located on ``PATH``.
        SubprocessExecutionError: If ``check`` is true and the command fails.
    """

    command = _resolve_executable(args)
    try:
        completed = subprocess.run(  # nosec B603
            command,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        note = f"Command timed out after {timeout:.1f}s" if timeout is not None else "Command timed out"
        stderr = _as_text(exc.stderr)
        completed = subprocess.CompletedProcess(
            args=command,
            returncode=TIMEOUT_RETURNCODE,
            stdout=_as_text(exc.stdout),
            stderr=f"{stderr}\n{note}" if stderr else note,
        )

    if check and completed.returncode != 0:
        raise SubprocessExecutionError(command, completed.returncode, completed.stderr)
    return completed


__all__ = ["TIMEOUT_RETURNCODE", "SubprocessExecutionError", "run_command"]
