# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the pyrsw commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

from ..builder import build_all
from ..config import ConfigError, RswConfig, load_config
from ..constants import CARGO_MANIFEST_NAME, CRATE_SOURCE_DIR_NAME, DEFAULT_OUT_DIR, PACKAGE_MANIFEST_NAME
from ..diagnostics import format_diagnostics
from ..environment import check_environment
from ..freshness import check_freshness
from ..relocate import relocate
from .options import (
    CLI_OPTION,
    CONFIG_OPTION,
    EMOJI_OPTION,
    FORCE_OPTION,
    HTML_OPTION,
    OUT_DIR_OPTION,
    REFERENCE_OPTION,
    ROOT_OPTION,
)
from .shared import CLIError, build_cli_logger

app = typer.Typer(
    help="Freshness checks and package relocation for wasm-pack crates.",
    no_args_is_help=True,
    add_completion=False,
)


@app.command("check")
def check_command(
    crate_dir: Annotated[Path, typer.Argument(help="Crate directory containing Cargo.toml.")],
    out_dir: OUT_DIR_OPTION = DEFAULT_OUT_DIR,
    reference: REFERENCE_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Report whether the crate's build output is still fresh."""

    logger = build_cli_logger(emoji=emoji)
    reference_path = reference or crate_dir / out_dir / PACKAGE_MANIFEST_NAME
    verdict = check_freshness(
        crate_dir / CRATE_SOURCE_DIR_NAME,
        crate_dir / CARGO_MANIFEST_NAME,
        reference_path,
    )
    if verdict.needs_rebuild:
        logger.warn(f"{crate_dir.name}: {verdict.value}")
        raise typer.Exit(code=1)
    logger.ok(f"{crate_dir.name}: {verdict.value}")


@app.command("relocate")
def relocate_command(
    output_dir: Annotated[Path, typer.Argument(help="wasm-pack output directory.")],
    dest_dir: Annotated[str, typer.Argument(help="Destination directory inside the web project.")],
    root: ROOT_OPTION = Path("."),
    emoji: EMOJI_OPTION = True,
) -> None:
    """Copy a wasm-pack package into the project and patch its loader."""

    logger = build_cli_logger(emoji=emoji)
    try:
        result = relocate(output_dir, dest_dir, base_dir=root.resolve())
    except ValueError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=2) from exc
    if result is None:
        logger.warn(f"Nothing to relocate from {output_dir}")
        return
    logger.ok(f"Relocated {result.manifest.name} to {result.destination}")


def _load_build_config(project_root: Path, config_path: Path | None) -> RswConfig:
    """Return the configuration for ``build``, raising :class:`CLIError` when unusable."""

    try:
        config = load_config(project_root, config_path=config_path)
    except ConfigError as exc:
        raise CLIError(str(exc), exit_code=2) from exc
    if not config.crates:
        raise CLIError("No crates configured", exit_code=2)
    return config


@app.command("build")
def build_command(
    root: ROOT_OPTION = Path("."),
    config_path: CONFIG_OPTION = None,
    force: FORCE_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Rebuild stale crates and relocate their packages."""

    logger = build_cli_logger(emoji=emoji)
    project_root = root.resolve()
    try:
        config = _load_build_config(project_root, config_path)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    outcomes = build_all(config, project_root=project_root, force=force, use_emoji=emoji)
    failed = [outcome for outcome in outcomes if not outcome.ok]
    for outcome in failed:
        if outcome.compile is not None and outcome.compile.error is not None:
            logger.echo(outcome.compile.error.console)
    if failed:
        raise typer.Exit(code=1)
    logger.ok(f"{len(outcomes)} crate(s) up to date")


@app.command("doctor")
def doctor_command(
    cli: CLI_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Check that the compiler toolchain is installed."""

    logger = build_cli_logger(emoji=emoji)
    if not check_environment(cli, use_emoji=emoji):
        raise typer.Exit(code=1)
    logger.ok("Toolchain found")


@app.command("format")
def format_command(
    source: Annotated[Path | None, typer.Argument(help="File with compiler output; stdin when omitted.")] = None,
    html: HTML_OPTION = False,
) -> None:
    """Tag compiler output for terminal or HTML display."""

    text = source.read_text(encoding="utf-8") if source is not None else sys.stdin.read()
    typer.echo(format_diagnostics(text, as_html=html))


__all__ = ["app"]
