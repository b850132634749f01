"""Negated phrases: ``"not to be a string"``."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from phrasal.constants import NEGATION_PREFIX
from phrasal.errors import AssertionFailedError, NegatedAssertionError


if TYPE_CHECKING:
    from phrasal.assertions.assertion import Assertion


def detect_negation(phrase: Any) -> tuple[Any, bool]:
    """Return ``(phrase without marker, negated)``; non-strings are never negated."""
    if isinstance(phrase, str) and phrase.startswith(NEGATION_PREFIX):
        return phrase[len(NEGATION_PREFIX) :], True
    return phrase, False


def strip_negation(args: Sequence[Any]) -> tuple[tuple[Any, ...], bool]:
    """Strip the marker from the phrase at argument 1, if present."""
    if len(args) < 2:
        return tuple(args), False
    phrase, negated = detect_negation(args[1])
    return (args[0], phrase, *args[2:]), negated


def resolve_negation(
    failure: AssertionFailedError | None,
    assertion: Assertion,
    subject: Any,
    negated: bool,
) -> AssertionFailedError | None:
    """Flip ``failure`` for negated calls.

    A negated check that failed passes. A negated check that passed fails
    with :class:`NegatedAssertionError`, which carries no diff.
    """
    if not negated:
        return failure
    if failure is not None:
        return None
    return NegatedAssertionError(
        f"Expected {subject!r} not {assertion.describe().replace('{unknown} ', '', 1)}",
        assertion_id=assertion.id,
    )
