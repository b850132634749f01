import pytest

from phrasal import AssertionOutcome, create_assertion, expect, use
from phrasal.context import OUTCOME_COLLECTOR, collect_outcomes, record_outcome


def test_collector_is_scoped():
    assert OUTCOME_COLLECTOR.get() is None
    with collect_outcomes() as outcomes:
        assert OUTCOME_COLLECTOR.get() is outcomes
    assert OUTCOME_COLLECTOR.get() is None


def test_record_outside_scope_is_ignored():
    record_outcome(AssertionOutcome(assertion_id="x", phrase="x", passed=True))


def test_nested_collectors_only_see_their_own_outcomes():
    outer: list[AssertionOutcome] = []
    with collect_outcomes(outer):
        expect(1, "to be an integer")
        with collect_outcomes() as inner:
            expect("a", "to be a string")
        expect(None, "to be None")

    assert [o.assertion_id for o in outer] == ["to-be-an-integer-2s1p", "to-be-none-2s1p"]
    assert [o.assertion_id for o in inner] == ["to-be-a-string-2s1p"]


def test_outcome_records_negation_and_exactness():
    with collect_outcomes() as outcomes:
        expect(1, "not to be a string")

    [outcome] = outcomes
    assert outcome.negated
    assert outcome.passed
    assert not outcome.exact_match


def test_context_passed_to_implementation():
    captured = []

    def impl(ctx, subject):
        captured.append(ctx)

    probe = create_assertion(["to be probed"], impl)
    with pytest.raises(AssertionError):
        use([probe]).expect("s", "not to be probed")

    [ctx] = captured
    assert ctx.negated
    assert ctx.assertion is probe
    assert ctx.args == ("s", "to be probed")
    assert ctx.slots == probe.slots
