"""Assertion registration."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from phrasal.assertions.assertion import Assertion
from phrasal.assertions.parts import normalize_parts
from phrasal.errors import InvalidAssertionError
from phrasal.validators.base import Validator
from phrasal.validators.schema import Schema


logger = logging.getLogger(__name__)


def _normalize_impl(impl: Any) -> Validator | Callable[..., Any]:
    if isinstance(impl, Validator):
        return impl
    if isinstance(impl, type):
        return Schema(impl)
    if callable(impl):
        return impl
    raise InvalidAssertionError(f"Assertion implementation must be a Validator or callable, got {impl!r}")


def _check_signature(impl: Callable[..., Any], value_slots: int, phrase: str) -> None:
    try:
        signature = inspect.signature(impl)
    except (TypeError, ValueError):
        return
    try:
        signature.bind(object(), *([object()] * value_slots))
    except TypeError as exc:
        raise InvalidAssertionError(
            f"Implementation of {phrase} must accept (ctx, ...) plus {value_slots} value(s): {exc}"
        ) from exc


def _build(parts: Sequence[Any], impl: Any, metadata: Mapping[str, Any] | None, is_async: bool) -> Assertion:
    if isinstance(parts, str | bytes) or not isinstance(parts, Sequence):
        raise InvalidAssertionError(f"Assertion parts must be a list of parts, got {parts!r}")
    normalized_impl = _normalize_impl(impl)
    if not isinstance(normalized_impl, Validator):
        is_async = is_async or inspect.iscoroutinefunction(normalized_impl)
    assertion = Assertion(
        parts=normalize_parts(parts),
        impl=normalized_impl,
        metadata=metadata or {},
        is_async=is_async,
    )
    if not isinstance(normalized_impl, Validator):
        _check_signature(normalized_impl, assertion.value_slot_count, str(assertion))
    logger.debug("Created assertion %s (async=%s)", assertion.id, assertion.is_async)
    return assertion


def create_assertion(
    parts: Sequence[Any],
    impl: Any,
    metadata: Mapping[str, Any] | None = None,
) -> Assertion:
    """Create an assertion from phrase parts and an implementation.

    Parameters
    ----------
    parts
        Phrase parts: strings, lists of alternative strings, validators, or
        type annotations (converted to :class:`~phrasal.validators.Schema`).
        When the first part is a phrase, the subject slot is implicit.
    impl
        A validator (or type) checked against the subject, or a function
        called as ``impl(ctx, subject, *params)``. ``async def`` functions
        make the assertion async.
    metadata
        Arbitrary read-only metadata attached to the assertion.

    Returns
    -------
    Assertion

    Raises
    ------
    InvalidAssertionError
        If the parts or implementation are malformed.

    Examples
    --------
    >>> from phrasal import create_assertion, use
    >>> class Foo: ...
    >>> is_foo = create_assertion(["to be a Foo"], Foo)
    >>> use([is_foo]).expect(Foo(), "to be a Foo")
    """
    return _build(parts, impl, metadata, is_async=False)


def create_async_assertion(
    parts: Sequence[Any],
    impl: Any,
    metadata: Mapping[str, Any] | None = None,
) -> Assertion:
    """Like :func:`create_assertion`, but the assertion only runs under ``expect_async``."""
    return _build(parts, impl, metadata, is_async=True)
