"""Per-call assertion context and the outcome collector."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field


if TYPE_CHECKING:
    from phrasal.assertions.assertion import Assertion
    from phrasal.assertions.parts import Slot


@dataclass(frozen=True, slots=True)
class AssertionContext:
    """Execution context passed to function-backed implementations.

    Attributes
    ----------
    args : tuple
        The full argument list of the call, subject first, phrase already
        stripped of its negation marker.
    slots : tuple[Slot, ...]
        Slots of the matched assertion.
    assertion : Assertion
        The matched assertion.
    negated : bool
        Whether the caller used the ``"not "`` form.
    is_async : bool
        Whether the call came through ``expect_async``.
    """

    args: tuple[Any, ...]
    slots: tuple[Slot, ...]
    assertion: Assertion
    negated: bool = False
    is_async: bool = False


class AssertionOutcome(BaseModel):
    """Record of one executed assertion."""

    assertion_id: str
    phrase: str
    negated: bool = False
    passed: bool
    exact_match: bool = True
    kind: str | None = None
    message: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


OUTCOME_COLLECTOR: ContextVar[list[AssertionOutcome] | None] = ContextVar("outcome_collector", default=None)


@contextmanager
def collect_outcomes(outcomes: list[AssertionOutcome] | None = None) -> Iterator[list[AssertionOutcome]]:
    """Collect an :class:`AssertionOutcome` per assertion run inside the block.

    Parameters
    ----------
    outcomes : list[AssertionOutcome], optional
        List to append to; a fresh one is created when omitted.
    """
    sink = [] if outcomes is None else outcomes
    token = OUTCOME_COLLECTOR.set(sink)
    try:
        yield sink
    finally:
        OUTCOME_COLLECTOR.reset(token)


def record_outcome(outcome: AssertionOutcome) -> None:
    sink = OUTCOME_COLLECTOR.get()
    if sink is not None:
        sink.append(outcome)
