"""Synthesize an "expected" value from validator issues.

Given the subject and the issues a validator reported, build the closest
value that would have passed by patching a clone of the subject at each
issue's path. The pair (subject, patched clone) feeds the diff renderer.

Synthesis is best effort. A patch that cannot be applied is skipped, and
an unexpected internal error yields no diff at all; this module never
raises.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from phrasal.constants import MISSING
from phrasal.paths import delete_keys_at_path, get_value_at_path, set_value_at_path
from phrasal.validators.base import Issue


logger = logging.getLogger(__name__)

_PRIMITIVES = (str, bytes, int, float, complex, bool, type(None))


@dataclass(frozen=True, slots=True)
class DiffValues:
    """An (actual, expected) pair; either side may be ``MISSING``."""

    actual: Any = MISSING
    expected: Any = MISSING

    @property
    def available(self) -> bool:
        return self.actual is not MISSING and self.expected is not MISSING


NO_DIFF = DiffValues()


def extract_diff_values(issues: Sequence[Issue], subject: Any) -> DiffValues:
    """Return the subject and a patched clone that would satisfy ``issues``."""
    try:
        actual = deep_clone(subject)
        expected = deep_clone(subject)
        for issue in issues:
            patched = _apply(issue, expected)
            if patched is _SKIP:
                if issue.kind == "invalid_value":
                    return NO_DIFF
                continue
            expected = patched
        return DiffValues(actual=actual, expected=expected)
    except Exception:
        logger.debug("Diff synthesis failed", exc_info=True)
        return NO_DIFF


def deep_clone(value: Any) -> Any:
    """Clone ``value`` for diffing.

    ``copy.deepcopy`` is tried first. Values it cannot handle (locks,
    generators, open handles) are cloned member by member; uncloneable
    leaves are shared and exceptions are flattened to mappings.
    """
    try:
        return copy.deepcopy(value)
    except Exception:
        logger.debug("deepcopy failed for %s; cloning manually", type(value).__name__)
        return _clone(value, {})


def _clone(value: Any, memo: dict[int, Any]) -> Any:
    if isinstance(value, _PRIMITIVES):
        return value
    key = id(value)
    if key in memo:
        return memo[key]
    if isinstance(value, BaseException):
        data: dict[str, Any] = {"type": type(value).__name__, "args": value.args, "message": str(value)}
        memo[key] = data
        notes = getattr(value, "__notes__", None)
        if notes:
            data["__notes__"] = list(notes)
        for name, member in vars(value).items():
            if not name.startswith("__"):
                data[name] = _clone(member, memo)
        return data
    if isinstance(value, Mapping):
        out: dict[Any, Any] = {}
        memo[key] = out
        for k, v in value.items():
            out[k] = _clone(v, memo)
        return out
    if isinstance(value, list):
        items: list[Any] = []
        memo[key] = items
        items.extend(_clone(v, memo) for v in value)
        return items
    if isinstance(value, tuple):
        return tuple(_clone(v, memo) for v in value)
    if isinstance(value, set | frozenset):
        return type(value)(_clone(v, memo) for v in value)
    return value


class _Skip:
    pass


_SKIP = _Skip()


def _apply(issue: Issue, root: Any) -> Any:
    current = get_value_at_path(root, issue.path)
    try:
        match issue.kind:
            case "invalid_type":
                return set_value_at_path(root, issue.path, coerce_to_type(current, issue.expected))
            case "too_big":
                return set_value_at_path(root, issue.path, _shrink(current, issue.maximum))
            case "too_small":
                return set_value_at_path(root, issue.path, _grow(current, issue.minimum))
            case "invalid_value":
                if not issue.values:
                    return _SKIP
                return set_value_at_path(root, issue.path, issue.values[0])
            case "unrecognized_keys":
                return delete_keys_at_path(root, issue.path, issue.keys)
            case "invalid_union":
                placeholder = f"<value matching one of: {', '.join(issue.alternatives)}>"
                return set_value_at_path(root, issue.path, placeholder)
            case "missing_key":
                return set_value_at_path(root, issue.path, None)
            case "invalid_format":
                return set_value_at_path(root, issue.path, f"<string matching {issue.expected}>")
            case _:
                return _SKIP
    except (TypeError, ValueError, AttributeError, KeyError, IndexError):
        logger.debug("Skipping %s patch at %r", issue.kind, issue.path, exc_info=True)
        return _SKIP


def coerce_to_type(value: Any, expected: str | None) -> Any:
    """Return the nearest value of type ``expected`` (a type name)."""
    match expected:
        case "str":
            if isinstance(value, Mapping | list | tuple):
                return json.dumps(value, default=repr)
            return str(value)
        case "int":
            try:
                return int(value)
            except (TypeError, ValueError, OverflowError):
                return 0
        case "float":
            try:
                return float(value)
            except (TypeError, ValueError):
                return 0.0
        case "bool":
            return bool(value)
        case "list":
            return list(value) if isinstance(value, tuple | set | frozenset) else []
        case "tuple":
            return tuple(value) if isinstance(value, list) else ()
        case "dict":
            return {}
        case "None":
            return None
        case "bytes":
            return value.encode() if isinstance(value, str) else b""
        case None:
            return "<valid value>"
        case _:
            return f"<{expected}>"


def _shrink(value: Any, maximum: Any) -> Any:
    if isinstance(value, str | list | tuple) and isinstance(maximum, int):
        return value[:maximum]
    if maximum is None:
        raise ValueError("no maximum")
    return maximum


def _grow(value: Any, minimum: Any) -> Any:
    if isinstance(value, str) and isinstance(minimum, int):
        return value + "x" * max(minimum - len(value), 0)
    if isinstance(value, list | tuple) and isinstance(minimum, int):
        padded = list(value) + [None] * max(minimum - len(value), 0)
        return tuple(padded) if isinstance(value, tuple) else padded
    if minimum is None:
        raise ValueError("no minimum")
    return minimum
