"""Rich rendering of assertion failures."""

from __future__ import annotations

import sys

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from phrasal.errors import AssertionFailedError


_KIND_COLORS: dict[str, str] = {
    "match": "yellow",
    "validation": "red",
    "logic": "red",
    "negated": "magenta",
    "fail": "red",
}


def _diff_text(diff: str) -> Text:
    text = Text()
    for line in diff.splitlines():
        if line.startswith("-"):
            style = "green"
        elif line.startswith("+"):
            style = "red"
        elif line.startswith("@@"):
            style = "dim"
        else:
            style = ""
        text.append(line + "\n", style=style)
    return text


def render_failure(error: AssertionFailedError) -> Panel:
    """Build a panel showing the failure message and its diff, if any."""
    color = _KIND_COLORS.get(error.kind, "red")
    parts: list[Text | str] = [escape(error.message)]
    if error.diff:
        parts.append("")
        parts.append(_diff_text(error.diff))
    title = type(error).__name__
    if error.assertion_id:
        title = f"{title} ({escape(error.assertion_id)})"
    return Panel(
        Group(*parts),
        title=title,
        title_align="left",
        border_style=color,
        expand=True,
        padding=(1, 1),
    )


def print_failure(error: AssertionFailedError, console: Console | None = None) -> None:
    (console or Console(file=sys.__stdout__)).print(render_failure(error))
