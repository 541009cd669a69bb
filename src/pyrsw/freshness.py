# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Modification-time based freshness checks for compiled crate artefacts.

A crate's previous build output is reusable when neither its build descriptor
nor anything beneath its source directory has been modified after a reference
artefact was written. Timestamps are compared as ``st_mtime_ns`` integers and
staleness requires a *strictly* newer entry. Content is never read or hashed.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import TypeVar

LOGGER = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")


class FreshnessVerdict(str, Enum):
    """Outcome of a freshness check."""

    REBUILD = "rebuild"
    REUSE = "reuse"
    REBUILD_MISSING = "rebuild-missing"

    @property
    def needs_rebuild(self) -> bool:
        """Return ``True`` when the verdict requires invoking the compiler."""

        return self is not FreshnessVerdict.REUSE


class WalkResult(str, Enum):
    """Tri-state result propagated through the recursive source walk."""

    STALE = "stale"
    CLEAN = "clean"
    ERROR = "error"


def _mtime_ns(path: Path) -> int:
    return path.stat().st_mtime_ns


def walk_source_tree(directory: Path, reference_mtime_ns: int) -> WalkResult:
    """Walk ``directory`` depth first looking for entries newer than the reference.

    Directories are compared by their own modification time first and only
    recursed into when they are not newer themselves. The first stale entry
    ends the walk at every level of the recursion.

    Args:
        directory: Directory whose descendants are inspected.
        reference_mtime_ns: Baseline modification time in nanoseconds.

    Returns:
        WalkResult: ``STALE`` when a newer entry exists, ``ERROR`` when the
        tree could not be inspected, ``CLEAN`` otherwise.
    """

    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        LOGGER.debug("cannot list %s: %s", directory, exc)
        return WalkResult.ERROR

    for entry in entries:
        try:
            stat = entry.stat()
            is_dir = entry.is_dir()
            is_file = entry.is_file()
            is_link = entry.is_symlink()
        except OSError as exc:
            LOGGER.debug("cannot stat %s: %s", entry.path, exc)
            return WalkResult.ERROR

        if not (is_dir or is_file):
            continue
        if stat.st_mtime_ns > reference_mtime_ns:
            LOGGER.debug("stale entry %s", entry.path)
            return WalkResult.STALE
        # Symlinked directories count by mtime only; recursing could loop.
        if is_dir and not is_link:
            nested = walk_source_tree(Path(entry.path), reference_mtime_ns)
            if nested is not WalkResult.CLEAN:
                return nested
    return WalkResult.CLEAN


def check_freshness(
    source_dir: Path,
    manifest_path: Path,
    reference_path: Path,
) -> FreshnessVerdict:
    """Decide whether the artefact behind ``reference_path`` must be rebuilt.

    Args:
        source_dir: Root of the crate source tree.
        manifest_path: Crate build descriptor (``Cargo.toml``), checked before the walk.
        reference_path: Artefact whose modification time is the freshness baseline.

    Returns:
        FreshnessVerdict: ``REBUILD_MISSING`` when the reference or manifest
        cannot be inspected, ``REBUILD`` when anything is newer than the
        reference, ``REUSE`` otherwise.
    """

    try:
        reference_mtime = _mtime_ns(reference_path)
        manifest_mtime = _mtime_ns(manifest_path)
    except OSError as exc:
        LOGGER.debug("freshness baseline unavailable: %s", exc)
        return FreshnessVerdict.REBUILD_MISSING

    if manifest_mtime > reference_mtime:
        LOGGER.debug("manifest %s is newer than %s", manifest_path, reference_path)
        return FreshnessVerdict.REBUILD

    result = walk_source_tree(source_dir, reference_mtime)
    if result is WalkResult.CLEAN:
        return FreshnessVerdict.REUSE
    return FreshnessVerdict.REBUILD


def dispatch_verdict(
    verdict: FreshnessVerdict,
    on_rebuild: Callable[[], ResultT],
    on_reuse: Callable[[], ResultT],
) -> ResultT:
    """Invoke exactly one of ``on_rebuild`` or ``on_reuse`` for ``verdict``.

    Args:
        verdict: Result of :func:`check_freshness`.
        on_rebuild: Callback executed when a rebuild is required.
        on_reuse: Callback executed when the existing artefact is reusable.

    Returns:
        ResultT: Whatever the invoked callback returns.
    """

    if verdict.needs_rebuild:
        return on_rebuild()
    return on_reuse()


def check_and_dispatch(
    source_dir: Path,
    manifest_path: Path,
    reference_path: Path,
    *,
    on_rebuild: Callable[[], ResultT],
    on_reuse: Callable[[], ResultT],
) -> ResultT:
    """Run :func:`check_freshness` and route the verdict to a callback."""

    verdict = check_freshness(source_dir, manifest_path, reference_path)
    return dispatch_verdict(verdict, on_rebuild, on_reuse)


__all__ = [
    "FreshnessVerdict",
    "WalkResult",
    "check_and_dispatch",
    "check_freshness",
    "dispatch_verdict",
    "walk_source_tree",
]
