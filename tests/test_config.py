# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for configuration models and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from pyrsw.config import ConfigError, CrateOptions, RswConfig, get_crate_name, load_config
from pyrsw.environment import wasm_pack_command


def test_defaults() -> None:
    config = RswConfig()
    assert config.cli == wasm_pack_command()
    assert config.libs_dir == "libs"
    assert config.crates == []


def test_crates_accept_names_and_tables() -> None:
    config = RswConfig.model_validate(
        {"crates": ["alpha", {"name": "beta", "mode": "release", "out_dir": "dist"}]},
    )
    assert [crate.name for crate in config.crates] == ["alpha", "beta"]
    assert config.crates[0].mode == "dev"
    assert config.crates[1].mode == "release"
    assert config.crates[1].out_dir == "dist"


def test_crate_paths() -> None:
    crate = CrateOptions(name="demo")
    root = Path("/work/crates")
    assert crate.source_dir(root) == Path("/work/crates/demo/src")
    assert crate.cargo_toml(root) == Path("/work/crates/demo/Cargo.toml")
    assert crate.output_dir(root) == Path("/work/crates/demo/pkg")
    assert crate.reference_artifact(root) == Path("/work/crates/demo/pkg/package.json")
    assert crate.relocation_target("libs/") == "libs/demo"


def test_scoped_package_name() -> None:
    crate = CrateOptions(name="demo", scope="acme")
    assert crate.package_name == "@acme/demo"
    assert crate.relocation_target("libs") == "libs/@acme/demo"


def test_blank_crate_name_is_rejected() -> None:
    with pytest.raises(ValueError):
        CrateOptions(name="  ")


def test_get_crate_name() -> None:
    assert get_crate_name("demo") == "demo"
    assert get_crate_name(CrateOptions(name="other")) == "other"


def test_load_defaults_without_files(tmp_path: Path) -> None:
    config = load_config(tmp_path)
    assert config.crates == []
    assert config.root == tmp_path


def test_load_rsw_toml(tmp_path: Path) -> None:
    (tmp_path / "rsw.toml").write_text(
        'root = "crates"\nlibs_dir = "web/libs"\ncrates = ["demo", { name = "calc", target = "bundler" }]\n',
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.root == tmp_path / "crates"
    assert config.libs_dir == "web/libs"
    assert [crate.name for crate in config.crates] == ["demo", "calc"]
    assert config.crates[1].target == "bundler"


def test_load_pyproject_section(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "site"\n\n[tool.pyrsw]\ncli = "wasm-pack-nightly"\ncrates = ["demo"]\n',
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.cli == "wasm-pack-nightly"
    assert [crate.name for crate in config.crates] == ["demo"]


def test_rsw_toml_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[tool.pyrsw]\ncrates = ["ignored"]\n', encoding="utf-8")
    (tmp_path / "rsw.toml").write_text('crates = ["used"]\n', encoding="utf-8")

    assert [crate.name for crate in load_config(tmp_path).crates] == ["used"]


def test_invalid_toml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "rsw.toml").write_text("crates = [", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_values_raise_config_error(tmp_path: Path) -> None:
    (tmp_path / "rsw.toml").write_text('crates = [{ name = "demo", mode = "fast" }]\n', encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_config(tmp_path)


def test_explicit_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        load_config(tmp_path, config_path=tmp_path / "nope.toml")


def test_timeout_must_be_positive(tmp_path: Path) -> None:
    (tmp_path / "rsw.toml").write_text('timeout = 0\ncrates = ["demo"]\n', encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_timeout_is_loaded(tmp_path: Path) -> None:
    (tmp_path / "rsw.toml").write_text('timeout = 90\ncrates = ["demo"]\n', encoding="utf-8")
    assert load_config(tmp_path).timeout == 90.0
