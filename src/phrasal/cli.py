"""Command-line interface for inspecting the assertion catalog."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from phrasal.assertions.assertion import Assertion
from phrasal.assertions.builtin import ALL_ASSERTIONS
from phrasal.engine import find_duplicate_ids
from phrasal.version import __version__


def _catalog(category: str | None) -> list[Assertion]:
    assertions = ALL_ASSERTIONS
    if category:
        assertions = tuple(a for a in assertions if a.metadata.get("category") == category)
    return list(assertions)


@click.group()
@click.version_option(__version__, prog_name="phrasal")
def main() -> None:
    """Phrasal - natural-language assertions."""


@main.command("list")
@click.option("--category", "-c", default=None, help="Only show assertions in this category")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of a table")
def list_assertions(category: str | None, as_json: bool) -> None:
    """List the built-in assertions."""
    assertions = _catalog(category)
    if as_json:
        rows = [
            {
                "id": a.id,
                "phrase": a.describe(),
                "kind": "schema" if a.validator is not None else "function",
                "async": a.is_async,
                "category": a.metadata.get("category"),
            }
            for a in assertions
        ]
        click.echo(json.dumps(rows, indent=2))
        return

    table = Table(title=f"{len(assertions)} assertions")
    table.add_column("id", style="cyan", no_wrap=True)
    table.add_column("phrase")
    table.add_column("kind")
    table.add_column("async", justify="center")
    for a in assertions:
        table.add_row(
            a.id,
            a.describe(),
            "schema" if a.validator is not None else "function",
            "yes" if a.is_async else "",
        )
    Console().print(table)


@main.command()
@click.option(
    "--covered",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File listing covered assertion ids, one per line",
)
def audit(covered: Path | None) -> None:
    """Check assertion ids for duplicates and, optionally, coverage."""
    problems = 0
    for assertion_id, group in find_duplicate_ids(ALL_ASSERTIONS).items():
        problems += 1
        click.echo(f"duplicate id {assertion_id}: " + ", ".join(str(a) for a in group))

    if covered is not None:
        seen = {line.strip() for line in covered.read_text().splitlines() if line.strip()}
        for a in ALL_ASSERTIONS:
            if a.id not in seen:
                problems += 1
                click.echo(f"uncovered: {a.id}")

    if problems:
        raise SystemExit(1)
    click.echo(f"OK: {len(ALL_ASSERTIONS)} assertions, all ids unique")
