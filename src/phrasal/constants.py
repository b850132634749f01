"""Shared constants for phrase parsing and failure reporting."""

from enum import Enum
from typing import Final, Literal


NEGATION_PREFIX: Final = "not "
CONJUNCTION: Final = "and"

# Assertion id attached to failures raised by ``fail()``.
FAIL_ID: Final = "FAIL"


class _Missing(Enum):
    """Marker for a value that was never provided (distinct from ``None``)."""

    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing.MISSING
Missing = Literal[_Missing.MISSING]
