import pytest
from rich.console import Console

from phrasal import ValidationFailure, expect
from phrasal.errors import FailAssertionError
from phrasal.reports import print_failure, render_failure


def _capture(error):
    console = Console(record=True, width=100)
    print_failure(error, console)
    return console.export_text()


def test_failure_panel_shows_message_and_diff():
    with pytest.raises(ValidationFailure) as exc_info:
        expect(42, "to be a string")

    output = _capture(exc_info.value)
    assert "ValidationFailure" in output
    assert "to-be-a-string-2s1p" in output
    assert "- Expected  - 1" in output
    assert "+42" in output


def test_failure_without_diff():
    output = _capture(FailAssertionError("[not markup]"))
    assert "FailAssertionError" in output
    assert "[not markup]" in output


def test_render_failure_returns_panel():
    panel = render_failure(FailAssertionError("stop"))
    assert panel.title.startswith("FailAssertionError")
