# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build loop tying freshness checks, compilation and relocation together."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .config import CrateOptions, RswConfig, get_crate_name
from .constants import PLUGIN_LABEL
from .diagnostics import format_diagnostics
from .environment import check_environment
from .freshness import FreshnessVerdict, check_freshness, dispatch_verdict
from .logging import fail, info
from .process import TIMEOUT_RETURNCODE, run_command
from .relocate import RelocationResult, relocate

LOGGER = logging.getLogger(__name__)


class ErrorPayload(BaseModel):
    """Compile failure payload shaped for the browser error overlay."""

    model_config = ConfigDict(frozen=True)

    plugin: str = PLUGIN_LABEL
    id: str
    message: str
    console: str


@dataclass(slots=True)
class CompileResult:
    """Outcome of a single compiler invocation."""

    crate: str
    returncode: int
    output: str = ""
    error: ErrorPayload | None = None

    @property
    def ok(self) -> bool:
        """Return ``True`` when the compiler exited successfully."""

        return self.returncode == 0

    @property
    def timed_out(self) -> bool:
        """Return ``True`` when the compiler was stopped by its timeout."""

        return self.returncode == TIMEOUT_RETURNCODE


@dataclass(slots=True)
class BuildOutcome:
    """Summary of a crate passing through the build loop."""

    crate: str
    verdict: FreshnessVerdict
    compile: CompileResult | None = None
    relocation: RelocationResult | None = None
    notes: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return ``True`` unless the compiler ran and failed."""

        return self.compile is None or self.compile.ok


def wasm_pack_args(crate: CrateOptions, *, cli: str) -> list[str]:
    """Return the ``wasm-pack build`` command line for ``crate``."""

    args = [
        cli,
        "build",
        "--target",
        crate.target,
        "--out-dir",
        crate.out_dir,
        "--release" if crate.mode == "release" else "--dev",
    ]
    if crate.out_name:
        args.extend(["--out-name", crate.out_name])
    if crate.scope:
        args.extend(["--scope", crate.scope])
    return args


def _failure(crate: str, returncode: int, output: str) -> CompileResult:
    payload = ErrorPayload(
        id=crate,
        message=format_diagnostics(output, as_html=True),
        console=format_diagnostics(output),
    )
    return CompileResult(crate=crate, returncode=returncode, output=output, error=payload)


def compile_crate(
    crate: CrateOptions,
    *,
    root: Path,
    cli: str,
    timeout: float | None = None,
) -> CompileResult:
    """Run the compiler for ``crate`` inside its crate directory.

    Args:
        crate: Crate to compile.
        root: Directory holding the crates.
        cli: Compiler executable.
        timeout: Seconds the compiler may run; ``None`` waits indefinitely.

    Returns:
        CompileResult: Exit status and captured output; failures carry an
        :class:`ErrorPayload` with formatted diagnostics.
    """

    name = get_crate_name(crate)
    args = wasm_pack_args(crate, cli=cli)
    LOGGER.debug("compiling %s: %s", name, " ".join(args))
    try:
        completed = run_command(args, cwd=crate.crate_dir(root), timeout=timeout)
    except FileNotFoundError as exc:
        return _failure(name, 127, str(exc))

    output = "\n".join(part for part in (completed.stdout, completed.stderr) if part)
    if completed.returncode != 0:
        return _failure(name, completed.returncode, output)
    return CompileResult(crate=name, returncode=0, output=output)


def build_crate(
    crate: CrateOptions,
    *,
    root: Path,
    libs_dir: str,
    cli: str,
    base_dir: Path | None = None,
    force: bool = False,
    timeout: float | None = None,
) -> BuildOutcome:
    """Rebuild ``crate`` when stale and relocate its package.

    Args:
        crate: Crate to process.
        root: Directory holding the crates.
        libs_dir: Relocation root inside the web project.
        cli: Compiler executable.
        base_dir: Anchor for the relocation destination.
        force: Skip the freshness check and always compile.
        timeout: Seconds the compiler may run.

    Returns:
        BuildOutcome: Verdict, compiler result and relocation summary.
    """

    name = get_crate_name(crate)
    if force:
        verdict = FreshnessVerdict.REBUILD
    else:
        verdict = check_freshness(crate.source_dir(root), crate.cargo_toml(root), crate.reference_artifact(root))
    LOGGER.debug("%s freshness verdict: %s", name, verdict.value)
    outcome = BuildOutcome(crate=name, verdict=verdict)

    def _rebuild() -> bool:
        outcome.compile = compile_crate(crate, root=root, cli=cli, timeout=timeout)
        return outcome.compile.ok

    def _reuse() -> bool:
        outcome.notes.append("reused existing build output")
        return True

    if not dispatch_verdict(verdict, _rebuild, _reuse):
        return outcome

    outcome.relocation = relocate(
        crate.output_dir(root),
        crate.relocation_target(libs_dir),
        base_dir=base_dir,
    )
    if outcome.relocation is None:
        outcome.notes.append("no build output to relocate")
    return outcome


def build_all(
    config: RswConfig,
    *,
    project_root: Path,
    force: bool = False,
    use_emoji: bool = True,
) -> list[BuildOutcome]:
    """Process every configured crate in order.

    Args:
        config: Loaded configuration.
        project_root: Anchor for relocation destinations.
        force: Compile every crate regardless of freshness.
        use_emoji: Whether emitted messages may include emoji glyphs.

    Returns:
        list[BuildOutcome]: One outcome per crate, in configuration order.
    """

    check_environment(config.cli, use_emoji=use_emoji)
    outcomes: list[BuildOutcome] = []
    for crate in config.crates:
        info(f"[rsw::crate] {crate.name}", use_emoji=use_emoji)
        outcome = build_crate(
            crate,
            root=config.root,
            libs_dir=config.libs_dir,
            cli=config.cli,
            base_dir=project_root,
            force=force,
            timeout=config.timeout,
        )
        if outcome.compile is not None and outcome.compile.timed_out and config.timeout is not None:
            fail(f"{PLUGIN_LABEL} {outcome.crate} timed out after {config.timeout:g}s", use_emoji=use_emoji)
        elif outcome.compile is not None and outcome.compile.error is not None:
            fail(f"{PLUGIN_LABEL} {outcome.crate} failed to compile", use_emoji=use_emoji)
        outcomes.append(outcome)
    return outcomes


__all__ = [
    "BuildOutcome",
    "CompileResult",
    "ErrorPayload",
    "build_all",
    "build_crate",
    "compile_crate",
    "wasm_pack_args",
]
