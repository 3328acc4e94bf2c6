"""
Golden tests for the query planner.

These pin the complete plan for representative questions and catch any
change to the intent rule table, the metric registry or the fallbacks.

Run with:
    pytest tests/test_golden_queries.py -v
"""

import pytest

from golden import GOLDEN_QUERIES, GoldenQuery, get_query_statistics
from hoop_hub.nlq import plan_question, validate_query_plan
from hoop_hub.nlq.planner import DEFAULT_METRIC_CONFIDENCE


@pytest.mark.parametrize("golden", GOLDEN_QUERIES, ids=lambda q: q.id)
def test_golden_plan(golden: GoldenQuery):
    plan = plan_question(golden.query)

    assert plan.intent.value == golden.intent
    assert plan.metric_ids == golden.metrics
    assert plan.confidence == pytest.approx(golden.confidence)
    assert plan.entities.players == golden.players
    assert plan.entities.teams == golden.teams
    assert plan.filters.season == golden.season

    if golden.window_n is None:
        assert plan.filters.window is None
    else:
        assert plan.filters.window is not None
        assert plan.filters.window.n == golden.window_n
        assert plan.filters.window.type == "last_n_games"

    for fragment in golden.reason_fragments:
        assert any(fragment in reason for reason in plan.reasons), (
            f"{golden.id}: no reason contains {fragment!r}: {plan.reasons}"
        )


@pytest.mark.parametrize("golden", GOLDEN_QUERIES, ids=lambda q: q.id)
def test_golden_plan_passes_validation(golden: GoldenQuery):
    assert validate_query_plan(plan_question(golden.query)).ok


@pytest.mark.parametrize(
    "golden", [q for q in GOLDEN_QUERIES if q.defaulted], ids=lambda q: q.id
)
def test_defaulted_plans_never_carry_full_confidence(golden: GoldenQuery):
    plan = plan_question(golden.query)
    assert plan.confidence <= 0.6
    assert [m.confidence for m in plan.metrics] == [DEFAULT_METRIC_CONFIDENCE]


def test_golden_plans_are_deterministic():
    for golden in GOLDEN_QUERIES:
        assert plan_question(golden.query) == plan_question(golden.query)


def test_golden_coverage():
    stats = get_query_statistics()
    assert set(stats) == {"leaders", "trend", "comparison", "ranking", "unsupported"}
    assert len({q.id for q in GOLDEN_QUERIES}) == len(GOLDEN_QUERIES)
