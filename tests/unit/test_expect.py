import re

import pytest

from phrasal import (
    AssertionFailedError,
    InvalidReturnError,
    LogicFailure,
    MatchFailure,
    NegatedAssertionError,
    ValidationFailure,
    collect_outcomes,
    create_assertion,
    expect,
    fail,
    it,
    use,
)
from phrasal.assertions.builtin import SYNC_ASSERTIONS
from phrasal.constants import FAIL_ID, MISSING, NEGATION_PREFIX
from phrasal.errors import FailAssertionError, MisuseError


class TestSchemaAssertions:
    def test_wrong_type_raises_validation_failure_with_diff(self):
        with pytest.raises(ValidationFailure) as exc_info:
            expect(42, "to be a string")

        error = exc_info.value
        assert isinstance(error, AssertionError)
        [issue] = error.issues
        assert issue.path == ()
        assert issue.kind == "invalid_type"
        assert error.actual == 42
        assert error.expected == "42"
        assert error.diff is not None
        assert error.assertion_id == "to-be-a-string-2s1p"

    def test_passing_assertion_returns_none(self):
        assert expect("abc", "to be a string") is None
        assert expect("abc", "to be a str") is None

    def test_none_check(self):
        expect(None, "to be None")
        with pytest.raises(ValidationFailure) as exc_info:
            expect(0, "to be None")
        assert exc_info.value.expected is None

    def test_truthiness(self):
        expect([1], "to be truthy")
        expect("", "to be falsy")
        with pytest.raises(ValidationFailure):
            expect(0, "to be truthy")


class TestNegation:
    def test_negated_pass_fails_without_diff(self):
        with pytest.raises(NegatedAssertionError) as exc_info:
            expect("abc", "not to be a string")

        error = exc_info.value
        assert error.kind == "negated"
        assert error.diff is None
        assert error.actual is MISSING
        assert "'abc'" in error.message
        assert "to be a string" in error.message

    def test_negated_failure_passes(self):
        expect(42, "not to be a string")
        expect([1, 2], "not to contain", 3)

    def test_match_failure_is_not_negated(self):
        with pytest.raises(MatchFailure):
            expect(1, "not to be a strnig")


class TestMatching:
    def test_unknown_phrase_suggests_close_matches(self):
        with pytest.raises(MatchFailure) as exc_info:
            expect(1, "to be a strnig")

        error = exc_info.value
        assert "Did you mean" in error.message
        assert "'to be a string'" in error.message
        assert error.args_received == (1, "to be a strnig")

    def test_wrong_arity_lists_closest_candidates(self):
        with pytest.raises(MatchFailure) as exc_info:
            expect(1, "to equal")

        assert exc_info.value.reasons
        assert "Closest candidates" in exc_info.value.message

    def test_first_registered_match_wins(self):
        first = create_assertion(["to be special"], lambda ctx, subject: None)
        second = create_assertion(["to be special"], lambda ctx, subject: False)

        use([first, second]).expect(1, "to be special")
        with pytest.raises(LogicFailure):
            use([second, first]).expect(1, "to be special")


class TestConjunctions:
    def test_conjuncts_share_the_subject(self):
        expect("abc", "to be a string", "and", "to have length", 3)

    def test_failing_conjunct_raises(self):
        with pytest.raises(ValidationFailure) as exc_info:
            expect("abc", "to be a string", "and", "to have length", 4)

        assert exc_info.value.expected == 4
        assert exc_info.value.actual == 3

    def test_conjunction_part_is_not_split(self):
        expect(5, "to be between", 1, "and", 10)
        with pytest.raises(ValidationFailure):
            expect(11, "to be between", 1, "and", 10)

    def test_mixed_conjunction_resolves_by_rejoining(self):
        expect(5, "to be an integer", "and", "to be between", 1, "and", 10)

    def test_every_conjunct_resolves_before_any_runs(self):
        with pytest.raises(MatchFailure):
            expect(42, "to be a string", "and", "to frobnicate")

    def test_negated_conjunct(self):
        expect("abc", "to be a string", "and", "not to be empty")


class TestParametric:
    def test_equal_failure_carries_values(self):
        with pytest.raises(LogicFailure) as exc_info:
            expect({"a": 1}, "to equal", {"a": 2})

        error = exc_info.value
        assert error.actual == {"a": 1}
        assert error.expected == {"a": 2}
        assert error.diff is not None

    def test_identity(self):
        items = []
        expect(items, "to be", items)
        with pytest.raises(LogicFailure):
            expect([], "to be", [])

    def test_instance_checks(self):
        expect(1, "to be an instance of", int)
        expect(1, "to be an", int)
        with pytest.raises(ValidationFailure):
            expect("x", "to be a", int)

    def test_number_bounds(self):
        expect(3, "to be less than", 5)
        expect(3.5, "to be above", 3)
        with pytest.raises(ValidationFailure) as exc_info:
            expect(3, "to be greater than", 5)
        [issue] = exc_info.value.issues
        assert issue.kind == "too_small"

    def test_containment_and_keys(self):
        expect([1, 2], "to contain", 2)
        expect("hello", "to include", "ell")
        expect({"a": 1}, "to have key", "a")
        with pytest.raises(LogicFailure):
            expect({"a": 1}, "to have key", "b")

    def test_match(self):
        expect("hello", "to match", r"^h")
        with pytest.raises(LogicFailure):
            expect("hello", "to match", re.compile("z"))

    def test_satisfy(self):
        expect({"a": 1, "b": 2}, "to satisfy", {"a": 1})
        with pytest.raises(LogicFailure):
            expect({"a": 1, "b": 2}, "to exhaustively satisfy", {"a": 1})

    def test_throw(self):
        expect(lambda: 1 / 0, "to throw")
        expect(lambda: int("x"), "to throw a", ValueError)
        with pytest.raises(LogicFailure):
            expect(lambda: None, "to throw")
        with pytest.raises(LogicFailure) as exc_info:
            expect(lambda: 1 / 0, "to throw a", ValueError)
        assert exc_info.value.actual == "ZeroDivisionError"

    def test_empty(self):
        expect([], "to be empty")
        with pytest.raises(LogicFailure) as exc_info:
            expect([1], "to be empty")
        assert (exc_info.value.actual, exc_info.value.expected) == (1, 0)


class TestFunctionResults:
    def test_message_mapping_becomes_logic_failure(self):
        bad = create_assertion(["to be fine"], lambda ctx, subject: {"message": "bad"})

        with pytest.raises(LogicFailure) as exc_info:
            use([bad]).expect(1, "to be fine")

        error = exc_info.value
        assert "bad" in str(error)
        assert error.actual is MISSING
        assert error.expected is MISSING
        assert not error.has_diff_values

    def test_unsupported_return_is_misuse(self):
        odd = create_assertion(["to be odd"], lambda ctx, subject: 42)

        with pytest.raises(InvalidReturnError) as exc_info:
            use([odd]).expect(1, "to be odd")
        assert not isinstance(exc_info.value, AssertionError)

        with pytest.raises(InvalidReturnError):
            use([odd]).expect(1, "not to be odd")

    def test_other_exceptions_propagate(self):
        def explode(ctx, subject):
            raise RuntimeError("boom")

        broken = create_assertion(["to explode"], explode)
        with pytest.raises(RuntimeError, match="boom"):
            use([broken]).expect(1, "to explode")

    def test_raised_failure_can_be_negated(self):
        def refuse(ctx, subject):
            raise LogicFailure("nope")

        refusing = create_assertion(["to refuse"], refuse)
        engine = use([refusing])
        with pytest.raises(LogicFailure, match="nope"):
            engine.expect(1, "to refuse")
        engine.expect(1, "not to refuse")

    def test_returned_validator_checks_subject(self):
        from phrasal.validators import Schema

        stringy = create_assertion(["to be stringy"], lambda ctx, subject: Schema(str))
        engine = use([stringy])
        engine.expect("a", "to be stringy")
        with pytest.raises(ValidationFailure):
            engine.expect(1, "to be stringy")

    def test_context_exposes_call_details(self):
        seen = {}

        def record(ctx, subject, amount):
            seen.update(args=ctx.args, negated=ctx.negated, is_async=ctx.is_async)

        recorder = create_assertion(["to record", int], record)
        use([recorder]).expect("s", "to record", 3)

        assert seen == {"args": ("s", "to record", 3), "negated": False, "is_async": False}

    def test_nested_match_failure_is_never_negated(self):
        broken = create_assertion(["to be weird"], lambda ctx, subject: expect(subject, "to frobnicate"))
        engine = use([broken])

        with pytest.raises(MatchFailure):
            engine.expect(1, "to be weird")
        with pytest.raises(MatchFailure):
            engine.expect(1, "not to be weird")

    def test_nested_failure_can_be_negated(self):
        stringy = create_assertion(["to be stringy"], lambda ctx, subject: expect(subject, "to be a string"))
        engine = use([stringy])

        engine.expect(1, "not to be stringy")
        with pytest.raises(ValidationFailure):
            engine.expect(1, "to be stringy")

    def test_empty_failure_mapping_is_a_generic_failure(self):
        empty = create_assertion(["to be odd"], lambda ctx, subject: {})

        with pytest.raises(LogicFailure, match="to be odd"):
            use([empty]).expect(1, "to be odd")

    def test_misuse_errors_are_not_assertion_failures(self):
        assert issubclass(InvalidReturnError, MisuseError)
        assert not issubclass(MisuseError, AssertionFailedError)


def test_fail_raises_with_reason():
    with pytest.raises(FailAssertionError) as exc_info:
        fail("stop here")
    assert exc_info.value.message == "stop here"
    assert exc_info.value.assertion_id == FAIL_ID


def test_outcomes_are_collected():
    with collect_outcomes() as outcomes:
        expect("a", "to be a string")
        with pytest.raises(ValidationFailure):
            expect(1, "to be a string")

    assert [o.passed for o in outcomes] == [True, False]
    assert outcomes[1].kind == "validation"
    assert outcomes[0].assertion_id == "to-be-a-string-2s1p"


def test_cyclic_subject_fails_with_validation_failure():
    cyclic = {"n": 1}
    cyclic["self"] = cyclic

    with pytest.raises(ValidationFailure) as exc_info:
        expect(cyclic, "to be a string")
    assert exc_info.value.actual["n"] == 1


class TestEmbeddedAssertions:
    def test_it_runs_inside_satisfy_patterns(self):
        expect(
            {"name": "ada", "age": 36},
            "to satisfy",
            {"name": it("to be a string"), "age": it("to be greater than", 18)},
        )
        with pytest.raises(LogicFailure):
            expect({"name": 1}, "to satisfy", {"name": it("to be a string")})

    def test_it_works_in_exhaustive_patterns(self):
        expect({"tags": ["a"]}, "to exhaustively satisfy", {"tags": it("to have length", 1)})
        with pytest.raises(LogicFailure):
            expect({"tags": ["a"], "x": 1}, "to exhaustively satisfy", {"tags": it("to be a list")})

    def test_unknown_phrase_inside_it_is_a_match_failure(self):
        with pytest.raises(MatchFailure):
            expect({"name": "ada"}, "to satisfy", {"name": it("to be a strnig")})
        with pytest.raises(MatchFailure):
            expect({"name": "ada"}, "not to satisfy", {"name": it("to be a strnig")})

    def test_it_sees_assertions_added_with_use(self):
        class Foo:
            pass

        engine = use([create_assertion(["to be a Foo"], Foo)])

        engine.expect({"x": Foo()}, "to satisfy", {"x": engine.it("to be a Foo")})
        with pytest.raises(MatchFailure):
            expect({"x": Foo()}, "to satisfy", {"x": it("to be a Foo")})

    def test_it_can_be_called_directly(self):
        is_string = it("to be a string")
        is_string("abc")
        with pytest.raises(ValidationFailure):
            is_string(1)
        assert repr(it("to equal", 1)) == "it('to equal', 1)"


def _raise():
    raise ValueError("boom")


def _return():
    return None


_SAME = []


CATALOG_SAMPLES = [
    ("abc", "to be a string"),
    (1, "to be a string"),
    (1.5, "to be a number"),
    ("x", "to be a number"),
    (1, "to be an integer"),
    (1.5, "to be an integer"),
    (True, "to be a boolean"),
    (1, "to be a boolean"),
    (None, "to be None"),
    (0, "to be None"),
    ([1], "to be a list"),
    ((1,), "to be a list"),
    ((1,), "to be a tuple"),
    ([1], "to be a tuple"),
    ({}, "to be a dict"),
    ([], "to be a dict"),
    (len, "to be callable"),
    (1, "to be callable"),
    (1, "to be truthy"),
    (0, "to be truthy"),
    (0, "to be falsy"),
    (1, "to be falsy"),
    ([], "to be empty"),
    ([1], "to be empty"),
    (1, "to equal", 1),
    (1, "to equal", 2),
    (_SAME, "to be", _SAME),
    ([], "to be", []),
    (1, "to be an instance of", int),
    ("x", "to be an instance of", int),
    (3, "to be greater than", 1),
    (0, "to be greater than", 1),
    (0, "to be less than", 1),
    (3, "to be less than", 1),
    (5, "to be between", 1, "and", 10),
    (11, "to be between", 1, "and", 10),
    ("abc", "to have length", 3),
    ("abc", "to have length", 2),
    ([1, 2], "to contain", 2),
    ([1, 2], "to contain", 3),
    ("hello", "to match", "^h"),
    ("hello", "to match", "^z"),
    ({"a": 1, "b": 2}, "to satisfy", {"a": 1}),
    ({"a": 1}, "to satisfy", {"a": 2}),
    ({"a": 1}, "to exhaustively satisfy", {"a": 1}),
    ({"a": 1, "b": 2}, "to exhaustively satisfy", {"a": 1}),
    ({"a": 1}, "to have key", "a"),
    ({"a": 1}, "to have key", "b"),
    (_raise, "to throw"),
    (_return, "to throw"),
    (_raise, "to throw a", ValueError),
    (_raise, "to throw a", KeyError),
]


def _passes(call):
    try:
        expect(*call)
    except AssertionFailedError:
        return False
    return True


@pytest.mark.parametrize("call", CATALOG_SAMPLES)
def test_exactly_one_of_phrase_and_its_negation_passes(call):
    subject, phrase, *rest = call
    assert _passes(call) != _passes((subject, NEGATION_PREFIX + phrase, *rest))


def test_samples_cover_every_sync_assertion():
    with collect_outcomes() as outcomes:
        for call in CATALOG_SAMPLES:
            _passes(call)

    assert {o.assertion_id for o in outcomes} == {a.id for a in SYNC_ASSERTIONS}
