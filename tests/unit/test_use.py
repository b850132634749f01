import pytest

import phrasal
from phrasal import DEFAULT_ENGINE, Engine, MatchFailure, ValidationFailure, create_assertion, expect, use
from phrasal.errors import InvalidAssertionError


class Foo:
    pass


is_foo = create_assertion(["to be a Foo"], Foo)


def test_use_returns_extended_engine_and_leaves_original_alone():
    extended = use([is_foo])

    extended.expect(Foo(), "to be a Foo")
    with pytest.raises(MatchFailure):
        expect(Foo(), "to be a Foo")

    assert len(extended) == len(DEFAULT_ENGINE) + 1
    assert extended.assertions[-1] is is_foo
    assert DEFAULT_ENGINE.assertions[-1] is not is_foo


def test_extended_engine_still_runs_builtins():
    extended = phrasal.use([is_foo])
    extended.expect("x", "to be a string")
    with pytest.raises(ValidationFailure):
        extended.expect(object(), "to be a Foo")


def test_use_chains():
    is_bar = create_assertion(["to be a Bar"], lambda ctx, subject: subject == "bar")
    engine = use([is_foo]).use([is_bar])
    engine.expect(Foo(), "to be a Foo")
    engine.expect("bar", "to be a Bar")


def test_engine_from_scratch_only_knows_its_assertions():
    engine = Engine((is_foo,))
    engine.expect(Foo(), "to be a Foo")
    with pytest.raises(MatchFailure):
        engine.expect("x", "to be a string")


def test_engine_rejects_non_assertions():
    with pytest.raises(InvalidAssertionError):
        Engine(("to be a Foo",))
