# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read the ``package.json`` descriptor emitted by ``wasm-pack``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from .constants import BINARY_ASSET_SUFFIX, MODULE_SUFFIX, PACKAGE_MANIFEST_NAME

LOGGER = logging.getLogger(__name__)


class _PackageDescriptor(BaseModel):
    """Subset of ``package.json`` fields consumed during relocation."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    module: str


@dataclass(frozen=True, slots=True)
class PackageManifest:
    """Parsed output-package descriptor."""

    name: str
    module: str
    binary_asset: str


def derive_binary_asset(module: str) -> str:
    """Return the binary asset filename generated alongside loader ``module``.

    Args:
        module: Entry loader filename such as ``demo.js``.

    Returns:
        str: ``module`` with its ``.js`` suffix swapped for ``_bg.wasm``.
    """

    if module.endswith(MODULE_SUFFIX):
        module = module[: -len(MODULE_SUFFIX)]
    return f"{module}{BINARY_ASSET_SUFFIX}"


def read_package_manifest(output_dir: Path) -> PackageManifest | None:
    """Return the package manifest stored in ``output_dir``.

    A missing directory, a missing descriptor, or one that cannot be decoded
    or parsed all mean there is no usable build output yet; ``None`` is
    returned rather than raising.

    Args:
        output_dir: Compiler output directory containing ``package.json``.

    Returns:
        PackageManifest | None: Parsed manifest or ``None`` when unavailable.
    """

    descriptor_path = output_dir / PACKAGE_MANIFEST_NAME
    try:
        payload = descriptor_path.read_bytes()
    except OSError as exc:
        LOGGER.debug("no package descriptor at %s: %s", descriptor_path, exc)
        return None
    try:
        descriptor = _PackageDescriptor.model_validate_json(payload)
    except (ValidationError, UnicodeDecodeError) as exc:
        LOGGER.debug("invalid package descriptor at %s: %s", descriptor_path, exc)
        return None
    return PackageManifest(
        name=descriptor.name,
        module=descriptor.module,
        binary_asset=derive_binary_asset(descriptor.module),
    )


__all__ = ["PackageManifest", "derive_binary_asset", "read_package_manifest"]
