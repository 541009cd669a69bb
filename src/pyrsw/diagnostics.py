# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tag compiler output lines for terminal or HTML display."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Final

from rich.color import ColorSystem
from rich.style import Style


class DiagnosticTag(str, Enum):
    """Semantic classes attached to matched diagnostic fragments."""

    LINE = "rsw-line"
    SUCCESS = "rsw-green"
    WARNING = "rsw-warn"
    ERROR = "rsw-error"
    HELP = "rsw-help"


TERMINAL_STYLES: Final[dict[DiagnosticTag, str]] = {
    DiagnosticTag.LINE: "blue",
    DiagnosticTag.SUCCESS: "bold green",
    DiagnosticTag.WARNING: "bold yellow",
    DiagnosticTag.ERROR: "bold red",
    DiagnosticTag.HELP: "bold cyan",
}


@dataclass(frozen=True, slots=True)
class DiagnosticRule:
    """Pattern whose first match on a line is wrapped with ``tag``."""

    pattern: re.Pattern[str]
    tag: DiagnosticTag


# Applied in order; later rules may wrap text already wrapped by earlier ones.
DIAGNOSTIC_RULES: Final[tuple[DiagnosticRule, ...]] = (
    DiagnosticRule(re.compile(r"^\s+-->|\s+=(\snote)?|[\s\d]+\|"), DiagnosticTag.LINE),
    DiagnosticRule(re.compile(r"^\s+Compiling"), DiagnosticTag.SUCCESS),
    DiagnosticRule(re.compile(r"^warning"), DiagnosticTag.WARNING),
    DiagnosticRule(re.compile(r"^error"), DiagnosticTag.ERROR),
    DiagnosticRule(re.compile(r"^help"), DiagnosticTag.HELP),
)


def html_wrap(fragment: str, tag: DiagnosticTag) -> str:
    """Return ``fragment`` wrapped in a ``<code>`` element carrying ``tag``."""

    return f'<code class="{tag.value}">{fragment}</code>'


def terminal_wrap(fragment: str, tag: DiagnosticTag) -> str:
    """Return ``fragment`` wrapped in the ANSI sequence styled for ``tag``."""

    style = Style.parse(TERMINAL_STYLES[tag])
    return style.render(fragment, color_system=ColorSystem.STANDARD)


def format_line(line: str, wrap: Callable[[str, DiagnosticTag], str]) -> str:
    """Apply every rule in :data:`DIAGNOSTIC_RULES` to a single ``line``."""

    for rule in DIAGNOSTIC_RULES:
        line = rule.pattern.sub(lambda match, tag=rule.tag: wrap(match.group(0), tag), line, count=1)
    return line


def format_diagnostics(text: str, *, as_html: bool = False) -> str:
    """Tag each line of compiler output ``text``.

    Args:
        text: Multi-line stdout/stderr captured from the compiler.
        as_html: When ``True`` wrap matches in markup, otherwise in terminal colours.

    Returns:
        str: Annotated text with the original line structure preserved.
    """

    wrap = html_wrap if as_html else terminal_wrap
    return "\n".join(format_line(line, wrap) for line in text.split("\n"))


__all__ = [
    "DIAGNOSTIC_RULES",
    "DiagnosticRule",
    "DiagnosticTag",
    "TERMINAL_STYLES",
    "format_diagnostics",
    "format_line",
    "html_wrap",
    "terminal_wrap",
]
