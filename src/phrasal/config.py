"""Engine settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PhrasalSettings(BaseSettings):
    """Configuration for failure reporting and validation.

    Loads from environment variables with the ``PHRASAL_`` prefix, e.g.
    ``PHRASAL_DIFF_ENABLED=false``.

    Attributes
    ----------
    diff_enabled
        Render expected/actual diffs on failures.
    diff_context_lines
        Unchanged lines shown around each change in a diff.
    diff_max_width
        Width used when pretty-printing values for a diff.
    max_candidates_in_message
        How many near-miss assertions a ``MatchFailure`` lists.
    strict_validation
        Default strictness for ``Schema`` validators that do not set it.
    """

    diff_enabled: bool = True
    diff_context_lines: int = Field(default=3, ge=0)
    diff_max_width: int = Field(default=80, ge=20)
    max_candidates_in_message: int = Field(default=3, ge=0)
    strict_validation: bool = True

    model_config = SettingsConfigDict(
        extra="forbid",
        env_prefix="PHRASAL_",
    )


@lru_cache(maxsize=1)
def get_settings() -> PhrasalSettings:
    """Return the process-wide settings, reading the environment once."""
    return PhrasalSettings()


def reset_settings() -> None:
    """Drop cached settings so the next access re-reads the environment."""
    get_settings.cache_clear()
