import pytest

from phrasal.config import PhrasalSettings, reset_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from PHRASAL_* variables in the environment."""
    for name in PhrasalSettings.model_fields:
        monkeypatch.delenv(f"PHRASAL_{name.upper()}", raising=False)
    reset_settings()
    yield
    reset_settings()
