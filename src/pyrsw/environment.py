# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pre-flight checks for the external toolchain."""

from __future__ import annotations

import shutil
import sys
from dataclasses import dataclass

from .constants import WASM_PACK_INSTALL_URL
from .logging import fail, info


@dataclass(slots=True)
class ToolStatus:
    """Availability of an executable on ``PATH``."""

    name: str
    path: str | None

    @property
    def available(self) -> bool:
        """Return ``True`` when the executable was found."""

        return self.path is not None


def is_windows() -> bool:
    """Return ``True`` when running on Windows."""

    return sys.platform.startswith("win")


def wasm_pack_command() -> str:
    """Return the platform specific ``wasm-pack`` executable name."""

    return "wasm-pack.exe" if is_windows() else "wasm-pack"


def check_tool_status(executable: str) -> ToolStatus:
    """Return the :class:`ToolStatus` of ``executable`` on ``PATH``."""

    return ToolStatus(name=executable, path=shutil.which(executable))


def check_environment(cli: str | None = None, *, use_emoji: bool = True) -> bool:
    """Warn when the compiler executable ``cli`` is missing.

    The pipeline keeps running either way; a missing compiler surfaces again
    when the build invokes it.

    Args:
        cli: Compiler executable expected on ``PATH``; defaults to
            :func:`wasm_pack_command`.
        use_emoji: Whether emitted messages may include emoji glyphs.

    Returns:
        bool: ``True`` when ``cli`` is available.
    """

    cli = cli or wasm_pack_command()
    status = check_tool_status(cli)
    if status.available:
        return True
    fail(
        f"[rsw::error] Cannot find {cli} in your PATH. Please make sure {cli} is installed",
        use_emoji=use_emoji,
    )
    info(f"[rsw::INFO] {cli} install: {WASM_PACK_INSTALL_URL}", use_emoji=use_emoji)
    return False


__all__ = [
    "ToolStatus",
    "check_environment",
    "check_tool_status",
    "is_windows",
    "wasm_pack_command",
]
