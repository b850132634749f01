"""The registered assertion and argument parsing against it."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from phrasal.assertions.parts import Part, Slot, SlotKind, ValidatorPart, slotify
from phrasal.validators.base import Validator


@dataclass(frozen=True, slots=True)
class ParseSuccess:
    """Arguments matched; ``parsed_values`` holds the subject and parameters."""

    parsed_values: tuple[Any, ...]
    exact_match: bool = True


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """Arguments did not match; ``progress`` counts slots matched before failing."""

    reason: str
    progress: int = 0


ParseResult = ParseSuccess | ParseFailure

_SLUG_CHARMAP = str.maketrans({"-": "_", "<": "_", ">": None})


def slugify(text: str) -> str:
    text = text.lower().translate(_SLUG_CHARMAP)
    text = re.sub(r"[^a-z0-9_\s]", "", text)
    return re.sub(r"\s+", "-", text.strip())


def assertion_id(parts: Sequence[Part], slots: Sequence[Slot]) -> str:
    """Deterministic id: slug of the phrase plus a ``<slots>s<parts>p`` signature."""
    rendered = []
    for part in parts:
        if isinstance(part, ValidatorPart):
            rendered.append(f"<{part.validator.describe()}>")
        else:
            rendered.append(Slot(SlotKind.LITERAL, part).texts()[0])
    return f"{slugify(' '.join(rendered))}-{len(slots)}s{len(parts)}p"


@dataclass(frozen=True, slots=True, eq=False)
class Assertion:
    """A phrase pattern bound to an implementation.

    Attributes
    ----------
    parts : tuple[Part, ...]
        Normalized phrase parts as registered.
    impl : Validator or callable
        Validator checked against the subject, or a function called as
        ``impl(ctx, *parsed_values)``.
    metadata : Mapping[str, Any]
        Read-only caller-supplied metadata (category, docs, ...).
    is_async : bool
        Whether the implementation must run through ``expect_async``.
    slots : tuple[Slot, ...]
        Derived argument positions; slot 0 is always the subject.
    id : str
        Deterministic identifier.
    """

    parts: tuple[Part, ...]
    impl: Validator | Callable[..., Any]
    metadata: Mapping[str, Any] = field(default_factory=dict)
    is_async: bool = False
    slots: tuple[Slot, ...] = field(init=False)
    id: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        slots = slotify(self.parts)
        object.__setattr__(self, "slots", slots)
        object.__setattr__(self, "id", assertion_id(self.parts, slots))

    @property
    def validator(self) -> Validator | None:
        return self.impl if isinstance(self.impl, Validator) else None

    @property
    def value_slot_count(self) -> int:
        return sum(1 for slot in self.slots if slot.is_value)

    def index_phrases(self) -> tuple[str, ...]:
        """Phrases that can appear at argument 1, or ``()`` if any can."""
        if len(self.slots) < 2:
            return ()
        return self.slots[1].texts()

    def describe(self) -> str:
        return " ".join(slot.render() for slot in self.slots)

    def __str__(self) -> str:
        return f'"{self.describe()}"'

    def __repr__(self) -> str:
        return f"<Assertion {self.id}>"

    def _match_literal(self, index: int, slot: Slot, arg: Any) -> str | None:
        texts = slot.texts()
        if isinstance(arg, str) and arg in texts:
            return None
        wanted = " or ".join(repr(t) for t in texts)
        return f"argument {index} should be {wanted}, got {arg!r}"

    def _arity_failure(self, args: Sequence[Any]) -> ParseFailure | None:
        if len(args) == len(self.slots):
            return None
        return ParseFailure(
            f"expected {len(self.slots)} arguments, got {len(args)}",
            progress=min(len(args), len(self.slots)),
        )

    def parse(self, args: Sequence[Any]) -> ParseResult:
        """Match ``args`` (subject first) against this assertion's slots."""
        values = []
        exact = True
        for index, (slot, arg) in enumerate(zip(self.slots, args)):
            match slot.kind:
                case SlotKind.SUBJECT:
                    exact = False
                    values.append(arg)
                case SlotKind.VALIDATOR:
                    validator = slot.part.validator  # type: ignore[union-attr]
                    if not validator.validate(arg).success:
                        return ParseFailure(
                            f"argument {index} is not {validator.describe()}: {arg!r}", progress=index
                        )
                    exact = exact and not validator.accepts_anything
                    values.append(arg)
                case _:
                    reason = self._match_literal(index, slot, arg)
                    if reason is not None:
                        return ParseFailure(reason, progress=index)
        return self._arity_failure(args) or ParseSuccess(tuple(values), exact)

    async def parse_async(self, args: Sequence[Any]) -> ParseResult:
        """Like :meth:`parse`, probing validator slots with ``validate_async``."""
        values = []
        exact = True
        for index, (slot, arg) in enumerate(zip(self.slots, args)):
            match slot.kind:
                case SlotKind.SUBJECT:
                    exact = False
                    values.append(arg)
                case SlotKind.VALIDATOR:
                    validator = slot.part.validator  # type: ignore[union-attr]
                    if not (await validator.validate_async(arg)).success:
                        return ParseFailure(
                            f"argument {index} is not {validator.describe()}: {arg!r}", progress=index
                        )
                    exact = exact and not validator.accepts_anything
                    values.append(arg)
                case _:
                    reason = self._match_literal(index, slot, arg)
                    if reason is not None:
                        return ParseFailure(reason, progress=index)
        return self._arity_failure(args) or ParseSuccess(tuple(values), exact)
