# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for pyrsw."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    CARGO_MANIFEST_NAME,
    CONFIG_FILE_NAME,
    CRATE_SOURCE_DIR_NAME,
    DEFAULT_LIBS_DIR,
    DEFAULT_OUT_DIR,
    PACKAGE_MANIFEST_NAME,
    PYPROJECT_FILE_NAME,
)
from .environment import wasm_pack_command

LOGGER = logging.getLogger(__name__)

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "pyrsw"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class CrateOptions(BaseModel):
    """Build options for a single crate."""

    model_config = ConfigDict(validate_assignment=True)

    name: str
    out_dir: str = DEFAULT_OUT_DIR
    out_name: str | None = None
    scope: str | None = None
    target: Literal["web", "bundler", "nodejs", "no-modules"] = "web"
    mode: Literal["dev", "release"] = "dev"

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("crate name must not be empty")
        return stripped

    @property
    def package_name(self) -> str:
        """Return the npm package name ``wasm-pack`` publishes for the crate."""

        if self.scope and not self.name.startswith("@"):
            return f"@{self.scope}/{self.name}"
        return self.name

    def crate_dir(self, root: Path) -> Path:
        """Return the crate directory beneath ``root``."""

        return root / self.name

    def source_dir(self, root: Path) -> Path:
        """Return the crate's Rust source directory."""

        return self.crate_dir(root) / CRATE_SOURCE_DIR_NAME

    def cargo_toml(self, root: Path) -> Path:
        """Return the crate's ``Cargo.toml`` path."""

        return self.crate_dir(root) / CARGO_MANIFEST_NAME

    def output_dir(self, root: Path) -> Path:
        """Return the directory ``wasm-pack`` writes the package into."""

        return self.crate_dir(root) / self.out_dir

    def reference_artifact(self, root: Path) -> Path:
        """Return the file whose mtime marks the last successful build."""

        return self.output_dir(root) / PACKAGE_MANIFEST_NAME

    def relocation_target(self, libs_dir: str) -> str:
        """Return the destination the built package is relocated into."""

        return f"{libs_dir.rstrip('/')}/{self.package_name}"


class RswConfig(BaseModel):
    """Primary configuration container."""

    model_config = ConfigDict(validate_assignment=True)

    root: Path = Field(default_factory=Path)
    cli: str = Field(default_factory=wasm_pack_command)
    libs_dir: str = DEFAULT_LIBS_DIR
    timeout: float | None = Field(default=None, gt=0)
    crates: list[CrateOptions] = Field(default_factory=list)

    @field_validator("crates", mode="before")
    @classmethod
    def _coerce_crates(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [{"name": entry} if isinstance(entry, str) else entry for entry in value]


def get_crate_name(crate: str | CrateOptions) -> str:
    """Return the crate name for either a bare string or :class:`CrateOptions`."""

    return crate.name if isinstance(crate, CrateOptions) else crate


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def _pyproject_section(data: Mapping[str, Any]) -> dict[str, Any]:
    tool_section = data.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if not isinstance(section, Mapping):
        return {}
    return dict(section)


def resolve_config_path(project_root: Path) -> Path | None:
    """Return the configuration file governing ``project_root``, if any.

    ``rsw.toml`` takes precedence over a ``[tool.pyrsw]`` table in
    ``pyproject.toml``.
    """

    candidate = project_root / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    pyproject = project_root / PYPROJECT_FILE_NAME
    if pyproject.is_file():
        return pyproject
    return None


def load_config(project_root: Path, *, config_path: Path | None = None) -> RswConfig:
    """Load the configuration for ``project_root``.

    Args:
        project_root: Directory containing ``rsw.toml`` or ``pyproject.toml``.
        config_path: Explicit configuration file overriding discovery.

    Returns:
        RswConfig: Validated configuration; defaults when no file is found.
        A relative ``root`` is anchored at ``project_root``.

    Raises:
        ConfigError: If the document cannot be parsed or fails validation.
    """

    path = config_path or resolve_config_path(project_root)
    payload: dict[str, Any] = {}
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Configuration file {path} does not exist")
        data = _read_toml(path)
        payload = _pyproject_section(data) if path.name == PYPROJECT_FILE_NAME else data
        LOGGER.debug("configuration loaded from %s", path)

    try:
        config = RswConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path or project_root}: {exc}") from exc

    if not config.root.is_absolute():
        config.root = project_root / config.root
    return config


__all__ = [
    "ConfigError",
    "CrateOptions",
    "RswConfig",
    "get_crate_name",
    "load_config",
    "resolve_config_path",
]
