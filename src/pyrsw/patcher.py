# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rewrite the binary-asset load path inside a generated wasm loader.

``wasm-pack`` emits loaders that locate their ``.wasm`` file relative to the
loader's own URL. Bundlers serve assets from a public path instead, so the two
expressions below are rewritten into an explicit ``fetch`` and an
origin-relative URL. The patterns track the loader text produced by
``wasm-pack``; a new ``wasm-pack`` release may require updating them.

The self-URL expression is matched together with its trailing ``;``, so the
replacement ``fetch(...)`` call keeps it and the statement stays terminated.
"""

from __future__ import annotations

from typing import Final

SELF_URL_FETCH_EXPR: Final[str] = r"import.meta.url.replace(/\.js$/, '_bg.wasm');"
DIRECT_FETCH_TEMPLATE: Final[str] = "fetch('{asset}');"
MODULE_RELATIVE_URL_TEMPLATE: Final[str] = "new URL('{asset}', import.meta.url)"
ORIGIN_RELATIVE_URL_TEMPLATE: Final[str] = "new URL('{asset}', location.origin)"


def patch_loader(code: str, old_asset: str, new_asset: str) -> str:
    """Return ``code`` with both asset load expressions rewritten.

    Args:
        code: Loader module source text.
        old_asset: Asset path currently referenced relative to the module URL.
        new_asset: Asset path the patched loader should request.

    Returns:
        str: Patched source. Text containing neither pattern is returned unchanged.
    """

    code = code.replace(SELF_URL_FETCH_EXPR, DIRECT_FETCH_TEMPLATE.format(asset=new_asset))
    return code.replace(
        MODULE_RELATIVE_URL_TEMPLATE.format(asset=old_asset),
        ORIGIN_RELATIVE_URL_TEMPLATE.format(asset=new_asset),
    )


def is_patched(code: str, asset: str) -> bool:
    """Return ``True`` when neither original load expression for ``asset`` remains."""

    return SELF_URL_FETCH_EXPR not in code and MODULE_RELATIVE_URL_TEMPLATE.format(asset=asset) not in code


__all__ = [
    "DIRECT_FETCH_TEMPLATE",
    "MODULE_RELATIVE_URL_TEMPLATE",
    "ORIGIN_RELATIVE_URL_TEMPLATE",
    "SELF_URL_FETCH_EXPR",
    "is_patched",
    "patch_loader",
]
