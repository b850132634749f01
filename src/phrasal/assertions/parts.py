"""Phrase parts and the slots derived from them."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic.errors import PydanticUserError

from phrasal.constants import CONJUNCTION, NEGATION_PREFIX
from phrasal.errors import InvalidAssertionError
from phrasal.validators.base import Validator
from phrasal.validators.schema import Schema


@dataclass(frozen=True, slots=True)
class Phrase:
    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class PhraseChoice:
    """Interchangeable phrases, e.g. ``("to be a string", "to be a str")``."""

    texts: tuple[str, ...]

    def render(self) -> str:
        return "/".join(self.texts)


@dataclass(frozen=True, slots=True)
class Conjunction:
    """The literal ``"and"`` joining two validator parts."""

    text: str = CONJUNCTION

    def render(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class ValidatorPart:
    validator: Validator

    def render(self) -> str:
        return f"{{{self.validator.describe()}}}"


Part = Phrase | PhraseChoice | Conjunction | ValidatorPart


class SlotKind(str, Enum):
    SUBJECT = "subject"
    LITERAL = "literal"
    CHOICE = "choice"
    VALIDATOR = "validator"


@dataclass(frozen=True, slots=True)
class Slot:
    """One positional argument position of an assertion."""

    kind: SlotKind
    part: Part | None = None

    @property
    def is_value(self) -> bool:
        """Whether the argument in this slot is passed to the implementation."""
        return self.kind in (SlotKind.SUBJECT, SlotKind.VALIDATOR)

    def texts(self) -> tuple[str, ...]:
        match self.part:
            case Phrase(text=text) | Conjunction(text=text):
                return (text,)
            case PhraseChoice(texts=texts):
                return texts
            case _:
                return ()

    def render(self) -> str:
        if self.part is None:
            return "{unknown}"
        return self.part.render()


SUBJECT_SLOT = Slot(SlotKind.SUBJECT)


def _check_text(text: str) -> str:
    if not text or not text.strip():
        raise InvalidAssertionError("Phrase text must be non-empty")
    if text.startswith(NEGATION_PREFIX):
        raise InvalidAssertionError(
            f"Phrase {text!r} may not start with {NEGATION_PREFIX!r}; negation is derived automatically"
        )
    return text


def _normalize_one(raw: Any) -> Part:
    if isinstance(raw, str):
        return Phrase(_check_text(raw))
    if isinstance(raw, list | tuple | set | frozenset) and all(isinstance(t, str) for t in raw):
        texts = tuple(sorted(raw)) if isinstance(raw, set | frozenset) else tuple(raw)
        if not texts:
            raise InvalidAssertionError("Phrase choices must be non-empty")
        return PhraseChoice(tuple(_check_text(t) for t in texts))
    if isinstance(raw, Validator):
        if raw.is_async:
            raise InvalidAssertionError(
                f"Validator {raw.describe()!r} is async-only and cannot be used as a phrase part"
            )
        return ValidatorPart(raw)
    try:
        return ValidatorPart(Schema(raw))
    except (PydanticUserError, TypeError) as exc:
        raise InvalidAssertionError(f"Cannot use {raw!r} as an assertion part: {exc}") from exc


def normalize_parts(raw_parts: Iterable[Any]) -> tuple[Part, ...]:
    """Convert registration input into typed parts.

    Raises
    ------
    InvalidAssertionError
        If the parts are empty, a phrase is empty or negated, or a
        conjunction is not followed by a validator.
    """
    raw = list(raw_parts)
    if not raw:
        raise InvalidAssertionError("An assertion needs at least one part")
    parts = [_normalize_one(p) for p in raw]
    for index, part in enumerate(parts):
        if isinstance(part, Phrase) and part.text == CONJUNCTION:
            following = parts[index + 1] if index + 1 < len(parts) else None
            if not isinstance(following, ValidatorPart):
                raise InvalidAssertionError(f"{CONJUNCTION!r} must be followed by a validator part")
            parts[index] = Conjunction()
    return tuple(parts)


def slotify(parts: Sequence[Part]) -> tuple[Slot, ...]:
    """Derive slots from parts, adding the implicit subject slot when needed."""
    slots = []
    for part in parts:
        match part:
            case ValidatorPart():
                slots.append(Slot(SlotKind.VALIDATOR, part))
            case PhraseChoice():
                slots.append(Slot(SlotKind.CHOICE, part))
            case _:
                slots.append(Slot(SlotKind.LITERAL, part))
    if slots and slots[0].kind is not SlotKind.VALIDATOR:
        slots.insert(0, SUBJECT_SLOT)
    return tuple(slots)
