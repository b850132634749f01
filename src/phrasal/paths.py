"""Path lookup and functional update over nested values.

Paths are tuples of keys and indices as found in validator issues. Updates
never mutate their input; every container along the path is copied.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from phrasal.constants import MISSING


Path = Sequence[str | int]


def child(value: Any, key: str | int) -> Any:
    """Return the member of ``value`` addressed by ``key``, or ``MISSING``."""
    if isinstance(value, Mapping):
        return value.get(key, MISSING)
    if isinstance(value, list | tuple):
        if isinstance(key, int) and -len(value) <= key < len(value):
            return value[key]
        return MISSING
    if isinstance(value, set | frozenset):
        if isinstance(key, int) and 0 <= key < len(value):
            for index, member in enumerate(value):
                if index == key:
                    return member
        return MISSING
    if isinstance(key, str):
        try:
            return vars(value).get(key, MISSING)
        except TypeError:
            return getattr(value, key, MISSING)
    return MISSING


def get_value_at_path(value: Any, path: Path) -> Any:
    current = value
    for key in path:
        current = child(current, key)
        if current is MISSING:
            break
    return current


def set_value_at_path(value: Any, path: Path, new: Any) -> Any:
    """Return a copy of ``value`` with ``new`` stored at ``path``.

    Missing intermediate containers are created: a list when the next key is
    an integer, a dict otherwise.
    """
    if not path:
        return new
    key, rest = path[0], path[1:]
    current = child(value, key) if value is not None and value is not MISSING else MISSING
    updated = set_value_at_path(current, rest, new)
    return _with_child(value, key, updated)


def delete_keys_at_path(value: Any, path: Path, keys: Sequence[str]) -> Any:
    """Return a copy of ``value`` with ``keys`` removed from the mapping at ``path``."""
    target = get_value_at_path(value, path)
    if not isinstance(target, Mapping):
        return value
    pruned = {k: v for k, v in target.items() if k not in keys}
    return set_value_at_path(value, path, pruned)


def _with_child(parent: Any, key: str | int, new: Any) -> Any:
    if parent is None or parent is MISSING:
        if isinstance(key, int):
            return _with_child([], key, new)
        return {key: new}
    if isinstance(parent, list | tuple) and isinstance(key, int):
        items = list(parent)
        if key >= len(items):
            items.extend([None] * (key - len(items) + 1))
        items[key] = new
        return tuple(items) if isinstance(parent, tuple) else items
    if isinstance(parent, Mapping):
        updated = dict(parent)
        updated[key] = new
        return updated
    if isinstance(parent, BaseException):
        fields = {"type": type(parent).__name__, "args": parent.args, **vars(parent)}
        fields[key] = new
        return fields
    if isinstance(parent, BaseModel) and isinstance(key, str):
        return parent.model_copy(update={key: new})
    if isinstance(key, str):
        try:
            clone = copy.copy(parent)
            object.__setattr__(clone, key, new)
            return clone
        except (AttributeError, TypeError):
            pass
    return {key: new}
