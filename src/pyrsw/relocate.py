# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Relocate ``wasm-pack`` output into the web project."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .constants import HOUSEKEEPING_FILES
from .logging import build_notice, package_notice
from .manifest import PackageManifest, read_package_manifest
from .patcher import patch_loader

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RelocationResult:
    """Capture what a relocation wrote into its destination."""

    manifest: PackageManifest
    destination: Path
    patched: Path | None = None
    copied: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def register_copied(self, path: Path) -> None:
        """Record that ``path`` was written to the destination verbatim."""

        self.copied.append(path)

    def register_skipped(self, name: str) -> None:
        """Record that housekeeping file ``name`` was left behind."""

        self.skipped.append(name)


def normalize_destination(dest_dir: Path | str, *, base_dir: Path | None = None) -> Path:
    """Return ``dest_dir`` with one leading separator stripped and anchored at ``base_dir``.

    Args:
        dest_dir: Destination requested by the caller, e.g. ``/libs/demo``.
        base_dir: Directory relative destinations resolve against. Defaults to
            the current working directory.

    Returns:
        Path: Destination directory to write into.
    """

    raw = str(dest_dir)
    if raw.startswith("/"):
        raw = raw[1:]
    base = Path.cwd() if base_dir is None else base_dir
    return base / raw


def remove_path(path: Path) -> None:
    """Remove ``path`` from the filesystem, propagating failures.

    Args:
        path: File or directory scheduled for deletion.
    """

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


def overlaps(destination: Path, output_dir: Path) -> bool:
    """Return ``True`` when ``destination`` is, contains or lies inside ``output_dir``."""

    target = destination.resolve()
    source = output_dir.resolve()
    return target == source or target in source.parents or source in target.parents


def relocate(
    output_dir: Path,
    dest_dir: Path | str,
    *,
    base_dir: Path | None = None,
) -> RelocationResult | None:
    """Copy ``output_dir`` into ``dest_dir`` and patch the entry loader.

    The destination is always replaced wholesale. Housekeeping files are never
    copied, and the manifest's entry module is routed through
    :func:`pyrsw.patcher.patch_loader` so the ``.wasm`` asset is fetched from
    the page origin.

    Args:
        output_dir: ``wasm-pack`` output directory holding ``package.json``.
        dest_dir: Destination inside the web project.
        base_dir: Anchor for relative destinations; defaults to the current
            working directory.

    Returns:
        RelocationResult | None: Summary of the written files, or ``None``
        when there was nothing to relocate.

    Raises:
        ValueError: If the destination overlaps ``output_dir``; clearing it
            would delete the package being relocated.
        OSError: If removing, creating, copying or writing files fails.
    """

    if not output_dir.exists():
        LOGGER.debug("nothing to relocate, %s does not exist", output_dir)
        return None

    destination = normalize_destination(dest_dir, base_dir=base_dir)
    if overlaps(destination, output_dir):
        msg = f"Destination {destination} overlaps build output {output_dir}"
        raise ValueError(msg)
    if destination.exists() or destination.is_symlink():
        remove_path(destination)
    destination.mkdir(parents=True, exist_ok=True)

    manifest = read_package_manifest(output_dir)
    if manifest is None:
        return None

    result = RelocationResult(manifest=manifest, destination=destination)
    for source in sorted(output_dir.iterdir()):
        name = source.name
        target = destination / name
        if name in HOUSEKEEPING_FILES:
            result.register_skipped(name)
            continue
        if name == manifest.module:
            code = source.read_text(encoding="utf-8")
            build_notice(manifest.binary_asset, manifest.binary_asset)
            target.write_text(
                patch_loader(code, manifest.binary_asset, manifest.binary_asset),
                encoding="utf-8",
            )
            package_notice(manifest.name)
            result.patched = target
            continue
        if source.is_dir():
            shutil.copytree(source, target)
        else:
            shutil.copy(source, target)
        result.register_copied(target)
    return result


__all__ = ["RelocationResult", "normalize_destination", "overlaps", "relocate", "remove_path"]
