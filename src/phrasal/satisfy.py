"""Deep structural matching.

``satisfies(actual, expected)`` holds when every own key of ``expected`` is
also an own key of ``actual`` whose value satisfies the expected one,
recursively. Own keys are mapping keys, list/tuple indices, and the
instance ``__dict__`` of other objects. Leaves compare by identity or
``==``; a compiled regex as the expected leaf is searched in a string
actual.

An :class:`ExpectIt` (``engine.it("to be a string")``) in ``expected`` runs
that assertion against the actual value at its position.

Cyclic structures terminate: a pair of nodes already under comparison is
treated as matching. This is a conservative approximation, not a graph
isomorphism check.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

from phrasal.errors import AssertionFailedError, MatchFailure


class ExpectIt:
    """An assertion waiting for its subject.

    Built by :meth:`phrasal.Engine.it`. Calling it with a subject runs
    ``expect(subject, *args)`` on the engine that built it.
    """

    __slots__ = ("_expect", "args")

    def __init__(self, expect: Callable[..., None], args: tuple[Any, ...]) -> None:
        self._expect = expect
        self.args = args

    def __call__(self, subject: Any) -> None:
        __tracebackhide__ = True
        self._expect(subject, *self.args)

    def __repr__(self) -> str:
        return f"it({', '.join(repr(arg) for arg in self.args)})"


def satisfies(actual: Any, expected: Any) -> bool:
    """Whether ``actual`` contains at least the structure of ``expected``.

    Examples
    --------
    >>> satisfies({"a": 1, "b": 2}, {"a": 1})
    True
    >>> satisfies([1, 2, 3], [1, 2])
    True
    """
    return _match(actual, expected, exhaustive=False, seen=set())


def exhaustively_satisfies(actual: Any, expected: Any) -> bool:
    """Like :func:`satisfies`, but own-key counts must also agree at every level.

    Examples
    --------
    >>> exhaustively_satisfies({"a": 1, "b": 2}, {"a": 1})
    False
    """
    return _match(actual, expected, exhaustive=True, seen=set())


def _own_items(value: Any) -> dict[Any, Any] | None:
    if isinstance(value, Mapping):
        return dict(value.items())
    if isinstance(value, list | tuple):
        return dict(enumerate(value))
    if isinstance(value, str | bytes | int | float | complex | bool) or value is None:
        return None
    if isinstance(value, type) or callable(value):
        return None
    try:
        return dict(vars(value))
    except TypeError:
        return None


def _leaf_equal(actual: Any, expected: Any) -> bool:
    if isinstance(expected, ExpectIt):
        try:
            expected(actual)
        except MatchFailure:
            raise
        except AssertionFailedError:
            return False
        return True
    if actual is expected:
        return True
    if isinstance(expected, re.Pattern) and isinstance(actual, str):
        return expected.search(actual) is not None
    try:
        return bool(actual == expected)
    except (TypeError, ValueError):
        return False


def _match(actual: Any, expected: Any, *, exhaustive: bool, seen: set[tuple[int, int]]) -> bool:
    if actual is expected:
        return True
    expected_items = _own_items(expected)
    if expected_items is None:
        return _leaf_equal(actual, expected)

    actual_items = _own_items(actual)
    if actual_items is None:
        return False

    pair = (id(actual), id(expected))
    if pair in seen:
        return True
    seen.add(pair)

    if exhaustive and len(actual_items) != len(expected_items):
        return False
    for key, expected_value in expected_items.items():
        if key not in actual_items:
            return False
        if not _match(actual_items[key], expected_value, exhaustive=exhaustive, seen=seen):
            return False
    return True
