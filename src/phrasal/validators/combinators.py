"""Validator combinators."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from pydantic import InstanceOf

from phrasal.validators.base import AsyncValidator, Issue, ValidationResult, Validator
from phrasal.validators.schema import Schema


class AnyOf(Validator):
    """Pass when at least one member passes; the first passing result wins."""

    def __init__(self, members: Sequence[Validator]) -> None:
        self.members = tuple(members)
        self.is_async = any(m.is_async for m in self.members)

    def validate(self, value: Any) -> ValidationResult:
        for member in self.members:
            result = member.validate(value)
            if result.success:
                return result
        return self._failure(value)

    async def validate_async(self, value: Any) -> ValidationResult:
        for member in self.members:
            result = await member.validate_async(value)
            if result.success:
                return result
        return self._failure(value)

    def _failure(self, value: Any) -> ValidationResult:
        names = tuple(m.describe() for m in self.members)
        return ValidationResult.fail(
            [Issue(kind="invalid_union", alternatives=names, message=f"Input should match one of: {', '.join(names)}")],
            value,
        )

    def describe(self) -> str:
        return " | ".join(m.describe() for m in self.members)


class AllOf(Validator):
    """Pass when every member passes; issues from all members are reported."""

    def __init__(self, members: Sequence[Validator]) -> None:
        self.members = tuple(members)
        self.is_async = any(m.is_async for m in self.members)

    def validate(self, value: Any) -> ValidationResult:
        return self._combine(value, [m.validate(value) for m in self.members])

    async def validate_async(self, value: Any) -> ValidationResult:
        return self._combine(value, [await m.validate_async(value) for m in self.members])

    def _combine(self, value: Any, results: list[ValidationResult]) -> ValidationResult:
        issues = [issue for result in results for issue in result.issues]
        if issues or not all(r.success for r in results):
            return ValidationResult.fail(issues, value)
        return ValidationResult.ok(value)

    def describe(self) -> str:
        return " & ".join(m.describe() for m in self.members)


class Nullable(Validator):
    def __init__(self, inner: Validator) -> None:
        self.inner = inner
        self.is_async = inner.is_async

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            return ValidationResult.ok(None)
        return self.inner.validate(value)

    async def validate_async(self, value: Any) -> ValidationResult:
        if value is None:
            return ValidationResult.ok(None)
        return await self.inner.validate_async(value)

    def describe(self) -> str:
        return f"{self.inner.describe()} | None"


class ListOf(Validator):
    """A list or tuple whose every item passes ``inner``."""

    def __init__(self, inner: Validator) -> None:
        self.inner = inner
        self.is_async = inner.is_async

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, list | tuple):
            return _not_a(value, "list")
        return self._collect(value, [self.inner.validate(item) for item in value])

    async def validate_async(self, value: Any) -> ValidationResult:
        if not isinstance(value, list | tuple):
            return _not_a(value, "list")
        return self._collect(value, [await self.inner.validate_async(item) for item in value])

    def _collect(self, value: Any, results: list[ValidationResult]) -> ValidationResult:
        issues = [issue.prefixed(index) for index, r in enumerate(results) for issue in r.issues]
        if issues:
            return ValidationResult.fail(issues, value)
        return ValidationResult.ok(value)

    def describe(self) -> str:
        return f"list[{self.inner.describe()}]"


class DictOf(Validator):
    """A mapping whose every value passes ``inner``."""

    def __init__(self, inner: Validator) -> None:
        self.inner = inner
        self.is_async = inner.is_async

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, Mapping):
            return _not_a(value, "dict")
        results = {key: self.inner.validate(item) for key, item in value.items()}
        return self._collect(value, results)

    async def validate_async(self, value: Any) -> ValidationResult:
        if not isinstance(value, Mapping):
            return _not_a(value, "dict")
        results = {key: await self.inner.validate_async(item) for key, item in value.items()}
        return self._collect(value, results)

    def _collect(self, value: Any, results: dict[Any, ValidationResult]) -> ValidationResult:
        issues = [issue.prefixed(key) for key, r in results.items() for issue in r.issues]
        if issues:
            return ValidationResult.fail(issues, value)
        return ValidationResult.ok(value)

    def describe(self) -> str:
        return f"dict[str, {self.inner.describe()}]"


class Check(Validator):
    """Validate with a predicate; ``TypeError``/``ValueError`` count as failure."""

    def __init__(self, predicate: Callable[[Any], bool], message: str, name: str | None = None) -> None:
        self.predicate = predicate
        self.message = message
        self.name = name or getattr(predicate, "__name__", "check")

    def validate(self, value: Any) -> ValidationResult:
        try:
            passed = self.predicate(value)
        except (TypeError, ValueError):
            passed = False
        if passed:
            return ValidationResult.ok(value)
        return ValidationResult.fail([Issue(kind="custom", message=self.message)], value)

    def describe(self) -> str:
        return self.name


class AsyncCheck(AsyncValidator):
    def __init__(self, predicate: Callable[[Any], Awaitable[bool]], message: str, name: str | None = None) -> None:
        self.predicate = predicate
        self.message = message
        self.name = name or getattr(predicate, "__name__", "async_check")

    async def validate_async(self, value: Any) -> ValidationResult:
        try:
            passed = await self.predicate(value)
        except (TypeError, ValueError):
            passed = False
        if passed:
            return ValidationResult.ok(value)
        return ValidationResult.fail([Issue(kind="custom", message=self.message)], value)

    def describe(self) -> str:
        return self.name


def _not_a(value: Any, expected: str) -> ValidationResult:
    return ValidationResult.fail(
        [Issue(kind="invalid_type", expected=expected, message=f"Input should be a valid {expected}")],
        value,
    )


def as_validator(obj: Any) -> Validator:
    """Return ``obj`` if it is a validator, otherwise wrap it in a :class:`Schema`."""
    if isinstance(obj, Validator):
        return obj
    return Schema(obj)


def any_of(*members: Any) -> Validator:
    return AnyOf([as_validator(m) for m in members])


def all_of(*members: Any) -> Validator:
    return AllOf([as_validator(m) for m in members])


def optional(inner: Any) -> Validator:
    return Nullable(as_validator(inner))


def list_of(inner: Any) -> Validator:
    return ListOf(as_validator(inner))


def dict_of(inner: Any) -> Validator:
    return DictOf(as_validator(inner))


def instance_of(cls: type) -> Validator:
    """Validate with ``isinstance`` only, never coercing."""
    return Schema(InstanceOf[cls], name=cls.__name__)  # type: ignore[valid-type]


def check(predicate: Callable[[Any], bool], message: str, name: str | None = None) -> Validator:
    if inspect.iscoroutinefunction(predicate):
        return AsyncCheck(predicate, message, name)
    return Check(predicate, message, name)


def async_check(predicate: Callable[[Any], Awaitable[bool]], message: str, name: str | None = None) -> Validator:
    return AsyncCheck(predicate, message, name)
