"""Validator adapter over ``pydantic.TypeAdapter``.

Any annotation pydantic understands can back an assertion: builtin types,
unions, ``Literal``, ``Annotated`` constraints, models, dataclasses and
typed dicts. Classes pydantic cannot build a schema for are checked with
``isinstance``.

Pydantic's error records are translated into :class:`Issue` objects. Union
member errors are folded into one ``invalid_union`` issue per location so
the diff synthesizer sees a single decision point.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import InstanceOf, TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from phrasal.config import get_settings
from phrasal.constants import MISSING
from phrasal.paths import child
from phrasal.validators.base import Issue, ValidationResult, Validator


logger = logging.getLogger(__name__)

_TYPE_NAMES = {
    "string": "str",
    "int": "int",
    "float": "float",
    "bool": "bool",
    "list": "list",
    "dict": "dict",
    "tuple": "tuple",
    "set": "set",
    "frozen_set": "frozenset",
    "bytes": "bytes",
    "callable": "callable",
    "iterable": "iterable",
    "decimal": "Decimal",
    "date": "date",
    "datetime": "datetime",
    "time": "time",
    "timedelta": "timedelta",
    "uuid": "UUID",
    "url": "url",
    "enum": "enum",
}

_WRAPPERS = frozenset(
    {"default", "nullable", "function-after", "function-before", "function-wrap", "model", "dataclass"}
)


class Schema(Validator):
    """Validate values against a type annotation.

    Parameters
    ----------
    annotation
        Any type annotation accepted by ``pydantic.TypeAdapter``.
    strict
        Disable pydantic's lax coercion (``"1"`` is not an ``int``). ``None``
        defers to ``PhrasalSettings.strict_validation``.
    name
        Label used in assertion descriptions and ids.
    """

    def __init__(self, annotation: Any, *, strict: bool | None = None, name: str | None = None) -> None:
        self.annotation = annotation
        self.strict = strict
        self.name = name
        self.accepts_anything = annotation is Any
        try:
            self._adapter: TypeAdapter[Any] = TypeAdapter(annotation)
        except PydanticSchemaGenerationError:
            if not isinstance(annotation, type):
                raise
            logger.debug("No pydantic schema for %r; falling back to isinstance", annotation)
            self._adapter = TypeAdapter(InstanceOf[annotation])  # type: ignore[valid-type]

    def _strict(self) -> bool:
        return get_settings().strict_validation if self.strict is None else self.strict

    def validate(self, value: Any) -> ValidationResult:
        try:
            validated = self._adapter.validate_python(value, strict=self._strict())
        except ValidationError as exc:
            return ValidationResult.fail(issues_from_error(exc, value, self._adapter), value)
        return ValidationResult.ok(validated)

    def describe(self) -> str:
        if self.name:
            return self.name
        return type_label(self.annotation)


def type_label(annotation: Any) -> str:
    if annotation is None or annotation is type(None):
        return "None"
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace("typing.", "")


def issues_from_error(error: ValidationError, value: Any, adapter: TypeAdapter[Any] | None = None) -> list[Issue]:
    """Translate a pydantic ``ValidationError`` raised for ``value``."""
    entries: dict[tuple[Any, ...], Any] = {}
    for position, detail in enumerate(error.errors(include_url=False)):
        error_type = detail["type"]
        path, tag = _resolve_loc(value, detail["loc"], error_type)
        if tag is not None or error_type.startswith("union_tag"):
            tags = entries.setdefault(("union", path), [])
            label = tag if tag is not None else str(detail.get("ctx", {}).get("tag", "?"))
            if label not in tags:
                tags.append(label)
        elif error_type == "extra_forbidden" and path:
            entries.setdefault(("extra", path[:-1]), []).append(str(path[-1]))
        else:
            entries[("plain", position)] = _translate(detail, path, adapter)

    issues = []
    for (group, key), entry in entries.items():
        if group == "union":
            issues.append(
                Issue(
                    path=key,
                    kind="invalid_union",
                    alternatives=tuple(entry),
                    message=f"Input should match one of: {', '.join(entry)}",
                )
            )
        elif group == "extra":
            issues.append(
                Issue(
                    path=key,
                    kind="unrecognized_keys",
                    keys=tuple(entry),
                    message=f"Unrecognized key(s): {', '.join(entry)}",
                )
            )
        else:
            issues.append(entry)
    return issues


def _resolve_loc(value: Any, loc: tuple[str | int, ...], error_type: str) -> tuple[tuple[str | int, ...], str | None]:
    """Split ``loc`` into a value path and the first union tag, if any."""
    path: list[str | int] = []
    current = value
    for index, step in enumerate(loc):
        if step == "[key]":
            continue
        nxt = child(current, step) if current is not MISSING else MISSING
        if nxt is MISSING:
            if index == len(loc) - 1 and error_type in ("missing", "extra_forbidden"):
                path.append(step)
                break
            if current is not MISSING:
                return tuple(path), str(step)
        path.append(step)
        current = nxt
    return tuple(path), None


def _translate(detail: Mapping[str, Any], path: tuple[str | int, ...], adapter: TypeAdapter[Any] | None) -> Issue:
    error_type: str = detail["type"]
    ctx: Mapping[str, Any] = detail.get("ctx") or {}
    message: str = detail.get("msg", error_type)
    base = {"path": path, "message": message}

    if error_type in ("string_too_long", "too_long"):
        origin = "string" if error_type.startswith("string") else "array"
        return Issue(**base, kind="too_big", origin=origin, maximum=ctx.get("max_length"))
    if error_type in ("string_too_short", "too_short"):
        origin = "string" if error_type.startswith("string") else "array"
        return Issue(**base, kind="too_small", origin=origin, minimum=ctx.get("min_length"))
    if error_type in ("less_than", "less_than_equal"):
        return Issue(**base, kind="too_big", origin="number", maximum=ctx.get("lt", ctx.get("le")))
    if error_type in ("greater_than", "greater_than_equal"):
        return Issue(**base, kind="too_small", origin="number", minimum=ctx.get("gt", ctx.get("ge")))
    if error_type in ("literal_error", "enum"):
        values = _choices(adapter, detail["loc"]) if adapter is not None else ()
        return Issue(**base, kind="invalid_value", values=values)
    if error_type == "missing":
        return Issue(**base, kind="missing_key")
    if error_type == "string_pattern_mismatch":
        return Issue(**base, kind="invalid_format", expected=str(ctx.get("pattern")))

    expected = _expected_type(error_type, ctx)
    if expected is not None:
        return Issue(**base, kind="invalid_type", expected=expected)
    return Issue(**base, kind="custom")


def _expected_type(error_type: str, ctx: Mapping[str, Any]) -> str | None:
    if error_type == "none_required":
        return "None"
    if error_type in ("is_instance_of", "is_subclass_of"):
        return str(ctx.get("class", "object"))
    if error_type in ("model_type", "dataclass_type", "model_attributes_type"):
        return str(ctx.get("class_name", "object"))
    if error_type == "int_from_float":
        return "int"
    for suffix in ("_type", "_parsing"):
        if error_type.endswith(suffix):
            stem = error_type[: -len(suffix)]
            return _TYPE_NAMES.get(stem, stem)
    return None


def _choices(adapter: TypeAdapter[Any], loc: tuple[str | int, ...]) -> tuple[Any, ...]:
    """Look up the acceptable literals at ``loc`` in the adapter's core schema."""
    try:
        schema = adapter.core_schema
        definitions: dict[str, Any] = {}
        if schema.get("type") == "definitions":
            definitions = {d["ref"]: d for d in schema.get("definitions", ())}
            schema = schema["schema"]
        return _walk_choices(schema, tuple(loc), definitions)
    except (AttributeError, KeyError, TypeError, IndexError):
        logger.debug("Could not recover literal values at %r", loc, exc_info=True)
        return ()


def _walk_choices(schema: Mapping[str, Any], loc: tuple[str | int, ...], definitions: Mapping[str, Any]) -> tuple[Any, ...]:
    while True:
        kind = schema.get("type")
        if kind == "definition-ref":
            schema = definitions[schema["schema_ref"]]
        elif kind == "definitions":
            definitions = {**definitions, **{d["ref"]: d for d in schema.get("definitions", ())}}
            schema = schema["schema"]
        elif kind in _WRAPPERS:
            schema = schema["schema"]
        else:
            break

    if not loc:
        if kind == "literal":
            return tuple(schema["expected"])
        if kind == "enum":
            return tuple(schema["members"])
        return ()

    step, rest = loc[0], loc[1:]
    if kind in ("model-fields", "typed-dict"):
        field = schema["fields"].get(step)
        return _walk_choices(field["schema"], rest, definitions) if field else ()
    if kind == "dataclass-args":
        for field in schema["fields"]:
            if field["name"] == step:
                return _walk_choices(field["schema"], rest, definitions)
        return ()
    if kind in ("list", "set", "frozenset"):
        return _walk_choices(schema["items_schema"], rest, definitions)
    if kind == "tuple":
        items = schema["items_schema"]
        if not isinstance(step, int) or not items:
            return ()
        return _walk_choices(items[min(step, len(items) - 1)], rest, definitions)
    if kind == "dict":
        if step == "[key]":
            return _walk_choices(schema["keys_schema"], rest, definitions)
        return _walk_choices(schema["values_schema"], rest, definitions)
    if kind == "union":
        for choice in schema["choices"]:
            member = choice[0] if isinstance(choice, tuple) else choice
            found = _walk_choices(member, rest, definitions)
            if found:
                return found
    return ()


ANY = Schema(Any, name="any")
