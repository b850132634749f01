from .assertion import Assertion, ParseFailure, ParseSuccess
from .create import create_assertion, create_async_assertion
from .parts import Conjunction, Phrase, PhraseChoice, Slot, SlotKind, ValidatorPart
from .results import AssertionFailure, ParseRequest


__all__ = [
    "Assertion",
    "AssertionFailure",
    "Conjunction",
    "ParseFailure",
    "ParseRequest",
    "ParseSuccess",
    "Phrase",
    "PhraseChoice",
    "Slot",
    "SlotKind",
    "ValidatorPart",
    "create_assertion",
    "create_async_assertion",
]
