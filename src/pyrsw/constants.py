# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across pyrsw modules."""

from __future__ import annotations

from typing import Final

PACKAGE_MANIFEST_NAME: Final[str] = "package.json"
CARGO_MANIFEST_NAME: Final[str] = "Cargo.toml"
CRATE_SOURCE_DIR_NAME: Final[str] = "src"

MODULE_SUFFIX: Final[str] = ".js"
BINARY_ASSET_SUFFIX: Final[str] = "_bg.wasm"

# Never copied into a relocation target.
HOUSEKEEPING_FILES: Final[frozenset[str]] = frozenset({".gitignore", "package-lock.json"})

DEFAULT_OUT_DIR: Final[str] = "pkg"
DEFAULT_LIBS_DIR: Final[str] = "libs"

CONFIG_FILE_NAME: Final[str] = "rsw.toml"
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"

PLUGIN_LABEL: Final[str] = "[vite::rsw]"
WASM_PACK_INSTALL_URL: Final[str] = "https://github.com/rustwasm/wasm-pack"

__all__ = [
    "BINARY_ASSET_SUFFIX",
    "CARGO_MANIFEST_NAME",
    "CONFIG_FILE_NAME",
    "CRATE_SOURCE_DIR_NAME",
    "DEFAULT_LIBS_DIR",
    "DEFAULT_OUT_DIR",
    "HOUSEKEEPING_FILES",
    "MODULE_SUFFIX",
    "PACKAGE_MANIFEST_NAME",
    "PLUGIN_LABEL",
    "PYPROJECT_FILE_NAME",
    "WASM_PACK_INSTALL_URL",
]
