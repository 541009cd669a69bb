# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the compiler as a shell-free child process."""

from __future__ import annotations

import logging
import shutil

# Bandit: subprocess usage is intentional; arguments are a resolved list and ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

LOGGER = logging.getLogger(__name__)

# Exit status reported for a compiler run cut short by its timeout, as coreutils ``timeout`` does.
TIMEOUT_RETURNCODE: Final[int] = 124


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value


def resolve_executable(args: Sequence[str]) -> list[str]:
    """Return ``args`` with the executable replaced by its absolute path.

    Raises:
        ValueError: If ``args`` is empty.
        FileNotFoundError: If the executable is not on ``PATH``.
    """

    if not args:
        raise ValueError("a command needs at least the executable")

    executable, *rest = args
    if Path(executable).is_absolute():
        return [executable, *rest]
    resolved = shutil.which(executable)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{executable}' was not found on PATH")
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> CompletedProcess[str]:
    """Run ``args`` and capture its output as text.

    A non-zero exit is returned, not raised; the caller decides how to report
    it. When ``timeout`` elapses the child is killed and the result carries
    :data:`TIMEOUT_RETURNCODE` with whatever output was produced so far.

    Args:
        args: Executable and arguments.
        cwd: Working directory for the child process.
        timeout: Seconds to wait before giving up on the child.

    Returns:
        CompletedProcess: Exit status plus captured stdout and stderr.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    command = resolve_executable(args)
    LOGGER.debug("running %s in %s", command, cwd or Path.cwd())
    try:
        return subprocess.run(  # nosec B603 - resolved argument list, no shell
            command,
            cwd=cwd,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        LOGGER.debug("%s timed out after %ss", command[0], timeout)
        notice = f"{Path(command[0]).name} timed out after {timeout:g}s"
        stderr = _as_text(exc.stderr)
        return CompletedProcess(
            args=command,
            returncode=TIMEOUT_RETURNCODE,
            stdout=_as_text(exc.stdout),
            stderr=f"{stderr}\n{notice}" if stderr else notice,
        )


__all__ = ["TIMEOUT_RETURNCODE", "resolve_executable", "run_command"]
