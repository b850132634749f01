import pytest
from pydantic import ValidationError

from phrasal.config import PhrasalSettings, get_settings, reset_settings
from phrasal.validators import Schema


def test_defaults():
    settings = get_settings()
    assert settings.diff_enabled is True
    assert settings.diff_context_lines == 3
    assert settings.max_candidates_in_message == 3
    assert settings.strict_validation is True


def test_settings_are_cached_until_reset(monkeypatch):
    first = get_settings()
    assert get_settings() is first

    monkeypatch.setenv("PHRASAL_DIFF_CONTEXT_LINES", "5")
    assert get_settings().diff_context_lines == 3

    reset_settings()
    assert get_settings().diff_context_lines == 5


def test_unknown_fields_are_rejected():
    with pytest.raises(ValidationError):
        PhrasalSettings(unknown_option=True)


def test_strictness_is_configurable(monkeypatch):
    monkeypatch.setenv("PHRASAL_STRICT_VALIDATION", "false")
    reset_settings()
    assert Schema(int).validate("1").success
    assert not Schema(int, strict=True).validate("1").success
