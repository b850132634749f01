"""Phrase dispatch and the assertion engine.

An :class:`Engine` holds an immutable, ordered tuple of assertions. A call
``engine.expect(subject, phrase, *args)`` goes through these steps:

1. Split the call on standalone ``"and"`` arguments into conjuncts that
   share the subject. If the split does not resolve, adjacent conjuncts are
   rejoined, and finally the call is tried unsplit.
2. For each conjunct, strip a ``"not "`` marker from the phrase and try
   candidate assertions in registration order; the first that parses wins.
3. Only once every conjunct has resolved, execute them in order, flip the
   result for negated conjuncts, and raise the first failure.
"""

from __future__ import annotations

import difflib
import heapq
import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from phrasal.assertions.assertion import Assertion, ParseFailure, ParseSuccess
from phrasal.assertions.execution import execute, execute_async
from phrasal.assertions.results import format_args
from phrasal.config import get_settings
from phrasal.constants import CONJUNCTION
from phrasal.context import AssertionContext, AssertionOutcome, record_outcome
from phrasal.errors import (
    AssertionFailedError,
    FailAssertionError,
    InvalidAssertionError,
    MatchFailure,
)
from phrasal.negation import resolve_negation, strip_negation
from phrasal.satisfy import ExpectIt


logger = logging.getLogger(__name__)


class PhraseIndex:
    """Map the phrase at argument 1 to candidate assertion positions.

    Assertions whose argument 1 is not a literal (their second slot is a
    validator) are always candidates. Candidates are yielded in
    registration order, so dispatch through the index picks the same
    assertion as a linear scan.
    """

    def __init__(self, assertions: Sequence[Assertion]) -> None:
        self._indexed: dict[str, list[int]] = {}
        self._unindexed: list[int] = []
        for position, assertion in enumerate(assertions):
            phrases = dict.fromkeys(assertion.index_phrases())
            if not phrases:
                self._unindexed.append(position)
            for phrase in phrases:
                self._indexed.setdefault(phrase, []).append(position)

    def candidates(self, args: Sequence[Any]) -> Iterator[int]:
        indexed: Sequence[int] = ()
        if len(args) >= 2 and isinstance(args[1], str):
            indexed = self._indexed.get(args[1], ())
        return heapq.merge(indexed, self._unindexed)

    def phrases(self) -> list[str]:
        return list(self._indexed)


@dataclass(frozen=True, slots=True)
class Resolution:
    """A conjunct bound to the assertion that will run it."""

    assertion: Assertion
    parsed: ParseSuccess
    args: tuple[Any, ...]
    negated: bool


@dataclass(frozen=True, slots=True)
class Miss:
    """A conjunct no assertion accepted."""

    args: tuple[Any, ...]
    attempts: tuple[tuple[Assertion, ParseFailure], ...]


def split_conjunctions(args: Sequence[Any]) -> list[tuple[tuple[Any, ...], ...]]:
    """Candidate ways to read ``args`` as conjuncts sharing ``args[0]``.

    Ordered from the full split to the unsplit call.

    Examples
    --------
    >>> split_conjunctions(("x", "to be a string", "and", "to be truthy"))
    [(('x', 'to be a string'), ('x', 'to be truthy')), (('x', 'to be a string', 'and', 'to be truthy'),)]
    """
    subject, rest = args[0], tuple(args[1:])
    marks = [i for i, arg in enumerate(rest) if i >= 1 and isinstance(arg, str) and arg == CONJUNCTION]
    unsplit = ((subject, *rest),)
    if not marks:
        return [unsplit]

    segments = []
    start = 0
    for mark in marks:
        segments.append(rest[start:mark])
        start = mark + 1
    segments.append(rest[start:])

    options = [segments]
    for i in range(len(segments) - 1):
        joined = (*segments[i], CONJUNCTION, *segments[i + 1])
        options.append([*segments[:i], joined, *segments[i + 2 :]])

    readings: list[tuple[tuple[Any, ...], ...]] = []
    for option in options:
        if all(option) and len(option) > 1:
            reading = tuple((subject, *segment) for segment in option)
            if reading not in readings:
                readings.append(reading)
    readings.append(unsplit)
    return readings


def find_duplicate_ids(assertions: Iterable[Assertion]) -> dict[str, list[Assertion]]:
    """Return assertions grouped by id, for ids shared by more than one."""
    groups: dict[str, list[Assertion]] = {}
    for assertion in assertions:
        groups.setdefault(assertion.id, []).append(assertion)
    return {key: group for key, group in groups.items() if len(group) > 1}


@dataclass(frozen=True)
class Engine:
    """An immutable set of assertions and the ``expect`` entry points.

    Parameters
    ----------
    assertions
        Assertions in dispatch order; the first one whose parts match wins.
    """

    assertions: tuple[Assertion, ...]
    _index: PhraseIndex = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        assertions = tuple(self.assertions)
        for assertion in assertions:
            if not isinstance(assertion, Assertion):
                raise InvalidAssertionError(f"Expected an Assertion, got {assertion!r}")
        object.__setattr__(self, "assertions", assertions)
        object.__setattr__(self, "_index", PhraseIndex(assertions))
        logger.debug("Engine created with %d assertions", len(assertions))

    def __len__(self) -> int:
        return len(self.assertions)

    def use(self, assertions: Iterable[Assertion]) -> Engine:
        """Return a new engine with ``assertions`` appended; this one is unchanged."""
        return Engine((*self.assertions, *assertions))

    def it(self, phrase: Any, *args: Any) -> ExpectIt:
        """Build an assertion to embed in a ``to satisfy`` pattern.

        Examples
        --------
        >>> from phrasal import expect, it
        >>> expect({"name": "ada", "age": 36}, "to satisfy", {"name": it("to be a string")})
        """
        return ExpectIt(self.expect, (phrase, *args))

    def fail(self, reason: str | None = None) -> None:
        """Fail unconditionally."""
        __tracebackhide__ = True
        raise FailAssertionError(reason)

    def expect(self, subject: Any, phrase: Any, *args: Any) -> None:
        """Assert that ``subject`` meets ``phrase``.

        Raises
        ------
        AssertionFailedError
            If no assertion matches, or the matched assertion fails.
        MisuseError
            If the matched assertion is async or broken.
        """
        __tracebackhide__ = True
        call = (subject, phrase, *args)
        misses: list[Miss] = []
        for reading in split_conjunctions(call):
            resolved = []
            for conjunct in reading:
                outcome = self._dispatch(conjunct)
                if isinstance(outcome, Miss):
                    misses.append(outcome)
                    break
                resolved.append(outcome)
            else:
                for resolution in resolved:
                    failure = execute(resolution.assertion, resolution.parsed.parsed_values, self._context(resolution))
                    self._settle(resolution, failure)
                return
        raise self._match_failure(call, misses)

    async def expect_async(self, subject: Any, phrase: Any, *args: Any) -> None:
        """Async form of :meth:`expect`; awaits implementations and async validators."""
        __tracebackhide__ = True
        call = (subject, phrase, *args)
        misses: list[Miss] = []
        for reading in split_conjunctions(call):
            resolved = []
            for conjunct in reading:
                outcome = await self._dispatch_async(conjunct)
                if isinstance(outcome, Miss):
                    misses.append(outcome)
                    break
                resolved.append(outcome)
            else:
                for resolution in resolved:
                    failure = await execute_async(
                        resolution.assertion,
                        resolution.parsed.parsed_values,
                        self._context(resolution, is_async=True),
                    )
                    self._settle(resolution, failure)
                return
        raise self._match_failure(call, misses)

    def _dispatch(self, conjunct: tuple[Any, ...]) -> Resolution | Miss:
        args, negated = strip_negation(conjunct)
        attempts = []
        for position in self._index.candidates(args):
            assertion = self.assertions[position]
            parsed = assertion.parse(args)
            if isinstance(parsed, ParseSuccess):
                logger.debug("Matched %s (exact=%s)", assertion.id, parsed.exact_match)
                return Resolution(assertion, parsed, args, negated)
            attempts.append((assertion, parsed))
        return Miss(args, tuple(attempts))

    async def _dispatch_async(self, conjunct: tuple[Any, ...]) -> Resolution | Miss:
        args, negated = strip_negation(conjunct)
        attempts = []
        for position in self._index.candidates(args):
            assertion = self.assertions[position]
            parsed = await assertion.parse_async(args)
            if isinstance(parsed, ParseSuccess):
                logger.debug("Matched %s (exact=%s)", assertion.id, parsed.exact_match)
                return Resolution(assertion, parsed, args, negated)
            attempts.append((assertion, parsed))
        return Miss(args, tuple(attempts))

    @staticmethod
    def _context(resolution: Resolution, *, is_async: bool = False) -> AssertionContext:
        return AssertionContext(
            args=resolution.args,
            slots=resolution.assertion.slots,
            assertion=resolution.assertion,
            negated=resolution.negated,
            is_async=is_async,
        )

    @staticmethod
    def _settle(resolution: Resolution, failure: AssertionFailedError | None) -> None:
        __tracebackhide__ = True
        assertion = resolution.assertion
        failure = resolve_negation(failure, assertion, resolution.args[0], resolution.negated)
        if failure is not None and failure.assertion_id is None:
            failure.assertion_id = assertion.id
        record_outcome(
            AssertionOutcome(
                assertion_id=assertion.id,
                phrase=assertion.describe(),
                negated=resolution.negated,
                passed=failure is None,
                exact_match=resolution.parsed.exact_match,
                kind=failure.kind if failure is not None else None,
                message=failure.message if failure is not None else None,
            )
        )
        if failure is not None:
            raise failure

    def _match_failure(self, call: tuple[Any, ...], misses: Sequence[Miss]) -> MatchFailure:
        limit = get_settings().max_candidates_in_message
        miss = misses[0] if misses else Miss(call, ())
        closest = sorted(miss.attempts, key=lambda pair: pair[1].progress, reverse=True)[:limit]
        reasons = tuple((str(assertion), failure.reason) for assertion, failure in closest)

        lines = [f"No assertion matched expect({format_args(call)})"]
        if reasons:
            lines.append("Closest candidates:")
            lines.extend(f"  - {assertion}: {reason}" for assertion, reason in reasons)
        if len(miss.args) >= 2 and isinstance(miss.args[1], str):
            suggestions = difflib.get_close_matches(miss.args[1], self._index.phrases(), n=limit)
            if suggestions:
                lines.append("Did you mean: " + ", ".join(repr(s) for s in suggestions) + "?")
        return MatchFailure("\n".join(lines), args_received=call, reasons=reasons)
