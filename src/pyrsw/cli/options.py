# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reusable Typer option declarations.

Defaults are supplied by the command signatures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root."),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Configuration file (defaults to rsw.toml or pyproject.toml)."),
]
FORCE_OPTION = Annotated[
    bool,
    typer.Option("--force", help="Compile every crate regardless of freshness."),
]
OUT_DIR_OPTION = Annotated[
    str,
    typer.Option("--out-dir", help="Compiler output directory inside the crate."),
]
REFERENCE_OPTION = Annotated[
    Path | None,
    typer.Option("--reference", help="Reference artefact (defaults to <out-dir>/package.json)."),
]
CLI_OPTION = Annotated[
    str | None,
    typer.Option("--cli", help="Compiler executable to look for."),
]
HTML_OPTION = Annotated[
    bool,
    typer.Option("--html", help="Emit HTML markup instead of terminal colours."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]

__all__ = [
    "CLI_OPTION",
    "CONFIG_OPTION",
    "EMOJI_OPTION",
    "FORCE_OPTION",
    "HTML_OPTION",
    "OUT_DIR_OPTION",
    "REFERENCE_OPTION",
    "ROOT_OPTION",
]
