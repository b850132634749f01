"""Render expected/actual comparisons as text."""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from rich.pretty import pretty_repr

from phrasal.config import get_settings
from phrasal.constants import MISSING


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DiffOptions:
    expected_label: str = "Expected"
    actual_label: str = "Received"
    context_lines: int = field(default_factory=lambda: get_settings().diff_context_lines)
    max_width: int = field(default_factory=lambda: get_settings().diff_max_width)


class DiffRenderer(Protocol):
    """Callable that renders a comparison, or returns ``None`` for no diff."""

    def __call__(self, expected: Any, actual: Any, options: DiffOptions) -> str | None: ...


def render_unified_diff(expected: Any, actual: Any, options: DiffOptions | None = None) -> str | None:
    """Line diff of the pretty-printed values with a change-count header.

    Removed lines (``-``) come from the expected value and added lines
    (``+``) from the received one.
    """
    options = options or DiffOptions()
    expected_lines = pretty_repr(expected, max_width=options.max_width).splitlines()
    actual_lines = pretty_repr(actual, max_width=options.max_width).splitlines()
    if expected_lines == actual_lines:
        return None

    body = [
        line
        for line in difflib.unified_diff(expected_lines, actual_lines, n=options.context_lines, lineterm="")
        if not line.startswith(("---", "+++"))
    ]
    removed = sum(1 for line in body if line.startswith("-"))
    added = sum(1 for line in body if line.startswith("+"))
    header = [
        f"- {options.expected_label}  - {removed}",
        f"+ {options.actual_label}  + {added}",
        "",
    ]
    return "\n".join(header + body)


def should_generate_diff(expected: Any, actual: Any) -> bool:
    """Whether a diff between ``expected`` and ``actual`` would be meaningful."""
    if expected is MISSING or actual is MISSING:
        return False
    if expected is actual:
        return False
    try:
        if expected == actual and type(expected) is type(actual):
            return False
    except Exception:
        # cyclic values raise RecursionError here
        logger.debug("Could not compare diff values", exc_info=True)
    return True


def generate_diff(
    expected: Any,
    actual: Any,
    renderer: DiffRenderer | None = None,
    options: DiffOptions | None = None,
) -> str | None:
    """Render a diff, or ``None`` when disabled, unnecessary or unrenderable."""
    if not get_settings().diff_enabled:
        return None
    renderer = renderer or render_unified_diff
    try:
        if not should_generate_diff(expected, actual):
            return None
        return renderer(expected, actual, options or DiffOptions())
    except Exception:
        logger.debug("Diff renderer %r failed", renderer, exc_info=True)
        return None
