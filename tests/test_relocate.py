# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for relocating wasm-pack output into the web project."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from pyrsw.relocate import normalize_destination, relocate


def test_demo_scenario(tmp_path: Path) -> None:
    output = tmp_path / "crate" / "pkg"
    output.mkdir(parents=True)
    (output / "package.json").write_text(json.dumps({"name": "demo", "module": "demo.js"}), encoding="utf-8")
    (output / "demo.js").write_text("new URL('demo_bg.wasm', import.meta.url)", encoding="utf-8")

    result = relocate(output, "pkg/demo", base_dir=tmp_path)

    loader = tmp_path / "pkg" / "demo" / "demo.js"
    assert result is not None
    assert result.patched == loader
    text = loader.read_text(encoding="utf-8")
    assert "new URL('demo_bg.wasm', location.origin)" in text
    assert "import.meta.url" not in text


def test_copies_files_byte_for_byte(tmp_path: Path, make_output_dir: Callable[..., Path]) -> None:
    output = make_output_dir()

    result = relocate(output, "libs/demo", base_dir=tmp_path)

    destination = tmp_path / "libs" / "demo"
    assert result is not None
    assert result.destination == destination
    assert (destination / "demo_bg.wasm").read_bytes() == (output / "demo_bg.wasm").read_bytes()
    assert (destination / "package.json").read_bytes() == (output / "package.json").read_bytes()
    assert sorted(path.name for path in result.copied) == ["demo.d.ts", "demo_bg.wasm", "package.json"]


def test_housekeeping_files_are_never_copied(tmp_path: Path, make_output_dir: Callable[..., Path]) -> None:
    output = make_output_dir()

    result = relocate(output, "libs/demo", base_dir=tmp_path)

    destination = tmp_path / "libs" / "demo"
    assert not (destination / ".gitignore").exists()
    assert not (destination / "package-lock.json").exists()
    assert result is not None
    assert sorted(result.skipped) == [".gitignore", "package-lock.json"]


def test_relocation_is_a_clean_overwrite(tmp_path: Path, make_output_dir: Callable[..., Path]) -> None:
    first = make_output_dir(extra_files={"stale.txt": "old"}, location=tmp_path / "first")
    second = make_output_dir(extra_files={"fresh.txt": "new"}, location=tmp_path / "second")

    relocate(first, "libs/demo", base_dir=tmp_path)
    relocate(second, "libs/demo", base_dir=tmp_path)

    destination = tmp_path / "libs" / "demo"
    expected = sorted(path.name for path in second.iterdir() if path.name not in {".gitignore", "package-lock.json"})
    assert sorted(path.name for path in destination.iterdir()) == expected
    assert not (destination / "stale.txt").exists()


def test_subdirectories_are_copied(tmp_path: Path, make_output_dir: Callable[..., Path]) -> None:
    output = make_output_dir()
    snippets = output / "snippets" / "demo-123"
    snippets.mkdir(parents=True)
    (snippets / "inline0.js").write_text("export function f() {}\n", encoding="utf-8")

    relocate(output, "libs/demo", base_dir=tmp_path)

    assert (tmp_path / "libs" / "demo" / "snippets" / "demo-123" / "inline0.js").is_file()


def test_missing_output_dir_is_a_no_op(tmp_path: Path) -> None:
    assert relocate(tmp_path / "missing", "libs/demo", base_dir=tmp_path) is None
    assert not (tmp_path / "libs").exists()


def test_missing_manifest_aborts(tmp_path: Path) -> None:
    output = tmp_path / "pkg"
    output.mkdir()
    (output / "demo.js").write_text("", encoding="utf-8")

    assert relocate(output, "libs/demo", base_dir=tmp_path) is None
    assert list((tmp_path / "libs" / "demo").iterdir()) == []


def test_relocation_emits_notices(
    tmp_path: Path,
    make_output_dir: Callable[..., Path],
    capsys: pytest.CaptureFixture[str],
) -> None:
    relocate(make_output_dir(), "libs/demo", base_dir=tmp_path)

    captured = capsys.readouterr().out
    assert "[rsw::build] demo_bg.wasm ~> demo_bg.wasm" in captured
    assert "↳ demo" in captured


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("/libs/demo", Path("libs/demo")),
        ("libs/demo", Path("libs/demo")),
        ("//libs/demo", Path("/libs/demo")),
    ],
)
def test_normalize_destination_strips_one_leading_separator(tmp_path: Path, raw: str, expected: Path) -> None:
    assert normalize_destination(raw, base_dir=tmp_path) == tmp_path / expected


def test_undecodable_manifest_aborts(tmp_path: Path, make_output_dir: Callable[..., Path]) -> None:
    output = make_output_dir()
    (output / "package.json").write_bytes(b"\xff\xfe{}")

    assert relocate(output, "libs/demo", base_dir=tmp_path) is None
    assert list((tmp_path / "libs" / "demo").iterdir()) == []


@pytest.mark.parametrize("dest", ["crate/pkg", "/crate", "crate/pkg/nested"])
def test_destination_overlapping_output_is_rejected(
    tmp_path: Path,
    make_output_dir: Callable[..., Path],
    dest: str,
) -> None:
    output = make_output_dir()

    with pytest.raises(ValueError, match="overlaps"):
        relocate(output, dest, base_dir=tmp_path)

    assert (output / "demo.js").is_file()
    assert (output / "package.json").is_file()


def test_copy_failure_propagates(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    make_output_dir: Callable[..., Path],
) -> None:
    def _denied(_source: Path, _target: Path) -> None:
        raise PermissionError("read-only destination")

    monkeypatch.setattr("pyrsw.relocate.shutil.copy", _denied)

    with pytest.raises(PermissionError):
        relocate(make_output_dir(), "libs/demo", base_dir=tmp_path)


def test_removal_failure_propagates(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    make_output_dir: Callable[..., Path],
) -> None:
    existing = tmp_path / "libs" / "demo"
    existing.mkdir(parents=True)
    (existing / "old.js").write_text("", encoding="utf-8")

    def _busy(_path: Path) -> None:
        raise OSError("directory busy")

    monkeypatch.setattr("pyrsw.relocate.shutil.rmtree", _busy)

    with pytest.raises(OSError, match="busy"):
        relocate(make_output_dir(), "libs/demo", base_dir=tmp_path)
    assert (existing / "old.js").is_file()
