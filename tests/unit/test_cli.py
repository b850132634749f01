import json

from click.testing import CliRunner

from phrasal.assertions.builtin import ALL_ASSERTIONS, ASYNC_ASSERTIONS
from phrasal.cli import main
from phrasal.version import __version__


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_list_json_covers_catalog():
    result = CliRunner().invoke(main, ["list", "--json"])
    assert result.exit_code == 0
    rows = json.loads(result.output)
    assert [row["id"] for row in rows] == [a.id for a in ALL_ASSERTIONS]
    assert {"id", "phrase", "kind", "async", "category"} <= set(rows[0])


def test_list_filters_by_category():
    result = CliRunner().invoke(main, ["list", "--json", "--category", "async"])
    rows = json.loads(result.output)
    assert len(rows) == len(ASYNC_ASSERTIONS)
    assert all(row["async"] for row in rows)


def test_list_table():
    result = CliRunner().invoke(main, ["list"])
    assert result.exit_code == 0
    assert "assertions" in result.output


def test_audit_passes_for_builtins():
    result = CliRunner().invoke(main, ["audit"])
    assert result.exit_code == 0, result.output
    assert "all ids unique" in result.output


def test_audit_reports_uncovered_ids(tmp_path):
    covered = tmp_path / "covered.txt"
    covered.write_text(ALL_ASSERTIONS[0].id + "\n")

    result = CliRunner().invoke(main, ["audit", "--covered", str(covered)])
    assert result.exit_code == 1
    assert "uncovered: " + ALL_ASSERTIONS[1].id in result.output
    assert "uncovered: " + ALL_ASSERTIONS[0].id not in result.output
