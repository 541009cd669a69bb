# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from pathlib import Path

import pytest

BASE_TIME_NS = 1_700_000_000 * 1_000_000_000
REFERENCE_TIME_NS = BASE_TIME_NS + 100 * 1_000_000_000

LOADER_SOURCE = """\
let wasm;
async function init(input) {
    if (typeof input === 'undefined') {
        input = import.meta.url.replace(/\\.js$/, '_bg.wasm');
    }
    if (typeof input === 'undefined') {
        input = new URL('demo_bg.wasm', import.meta.url);
    }
    const { instance, module } = await load(await input, imports);
    return finalizeInit(instance, module);
}
export default init;
"""


def set_mtime(path: Path, mtime_ns: int) -> None:
    """Stamp ``path`` with ``mtime_ns`` for both access and modification time."""

    os.utime(path, ns=(mtime_ns, mtime_ns))


@pytest.fixture
def crate_dir(tmp_path: Path) -> Path:
    """Return a crate whose sources all predate its ``pkg/package.json``."""

    crate = tmp_path / "demo"
    (crate / "src" / "nested").mkdir(parents=True)
    (crate / "Cargo.toml").write_text('[package]\nname = "demo"\n', encoding="utf-8")
    (crate / "src" / "lib.rs").write_text("pub fn add() {}\n", encoding="utf-8")
    (crate / "src" / "nested" / "mod.rs").write_text("pub mod inner;\n", encoding="utf-8")
    (crate / "pkg").mkdir()
    (crate / "pkg" / "package.json").write_text("{}", encoding="utf-8")

    for path in (
        crate / "Cargo.toml",
        crate / "src" / "lib.rs",
        crate / "src" / "nested" / "mod.rs",
        crate / "src" / "nested",
        crate / "src",
    ):
        set_mtime(path, BASE_TIME_NS)
    set_mtime(crate / "pkg" / "package.json", REFERENCE_TIME_NS)
    return crate


@pytest.fixture
def make_output_dir(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing a ``wasm-pack`` style output directory."""

    def _make(
        name: str = "demo",
        *,
        location: Path | None = None,
        loader: str = LOADER_SOURCE,
        extra_files: dict[str, str] | None = None,
    ) -> Path:
        output = location or tmp_path / "crate" / "pkg"
        output.mkdir(parents=True, exist_ok=True)
        (output / "package.json").write_text(
            json.dumps({"name": name, "module": f"{name}.js", "version": "0.1.0"}),
            encoding="utf-8",
        )
        (output / f"{name}.js").write_text(loader, encoding="utf-8")
        (output / f"{name}_bg.wasm").write_bytes(b"\x00asm\x01\x00\x00\x00")
        (output / f"{name}.d.ts").write_text("export default function init(): void;\n", encoding="utf-8")
        (output / ".gitignore").write_text("*\n", encoding="utf-8")
        (output / "package-lock.json").write_text("{}", encoding="utf-8")
        for filename, content in (extra_files or {}).items():
            (output / filename).write_text(content, encoding="utf-8")
        return output

    return _make
