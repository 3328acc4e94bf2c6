"""
Tests for metric resolution and metric/intent compatibility.
"""

import pytest

from hoop_hub.nlq.metric_resolver import (
    RESOLVED_METRIC_CONFIDENCE,
    resolve_metrics,
    validate_metrics_for_intent,
)
from hoop_hub.nlq.models import MetricSelection
from hoop_hub.schemas.catalog import QueryIntent


def test_resolves_aliases_in_registry_order():
    resolution = resolve_metrics("points and dimes and boards")
    assert [m.id for m in resolution.metrics] == ["ast", "reb", "pts"]
    assert all(m.confidence == RESOLVED_METRIC_CONFIDENCE for m in resolution.metrics)
    assert resolution.reasons == [
        "Matched metric 'ast' from aliases.",
        "Matched metric 'reb' from aliases.",
        "Matched metric 'pts' from aliases.",
    ]


def test_metric_listed_once_even_with_several_aliases():
    resolution = resolve_metrics("assists and apg and dimes")
    assert [m.id for m in resolution.metrics] == ["ast"]


def test_multi_word_alias():
    resolution = resolve_metrics("which team has the best def rating")
    assert [m.id for m in resolution.metrics] == ["drtg"]


def test_partial_tokens_do_not_match():
    resolution = resolve_metrics("who are the best scorers and rebounders")
    assert resolution.metrics == []
    assert resolution.unresolved_terms == []


def test_unregistered_cues_reported_in_cue_order():
    resolution = resolve_metrics("blocks and steals and deflections and steals")
    assert resolution.metrics == []
    assert resolution.unresolved_terms == ["deflections", "steals", "blocks"]


def test_registered_cues_are_not_unresolved():
    resolution = resolve_metrics("assists and steals")
    assert [m.id for m in resolution.metrics] == ["ast"]
    assert resolution.unresolved_terms == ["steals"]


def test_empty_text():
    resolution = resolve_metrics("")
    assert resolution.metrics == []
    assert resolution.unresolved_terms == []
    assert resolution.reasons == []


# ============================================================================
# COMPATIBILITY
# ============================================================================


@pytest.mark.parametrize(
    "intent",
    [QueryIntent.LEAGUE_LEADERS, QueryIntent.PLAYER_TREND, QueryIntent.PLAYER_COMPARE],
)
def test_player_metrics_allowed_for_player_intents(intent):
    metrics = [MetricSelection("ast", 0.85), MetricSelection("pts", 0.85)]
    assert validate_metrics_for_intent(intent, metrics).ok


def test_unknown_metric():
    result = validate_metrics_for_intent(QueryIntent.LEAGUE_LEADERS, [MetricSelection("stl", 0.85)])
    assert not result.ok
    assert result.code == "unknown_metric"
    assert "stl" in result.error


def test_metric_not_allowed_for_intent():
    result = validate_metrics_for_intent(QueryIntent.TEAM_RANKING, [MetricSelection("pts", 0.85)])
    assert not result.ok
    assert result.code == "metric_not_allowed"
    assert result.error == "Metric 'pts' is not allowed for intent 'team_ranking'."


def test_first_failing_metric_reported():
    result = validate_metrics_for_intent(
        QueryIntent.PLAYER_TREND,
        [MetricSelection("reb", 0.85), MetricSelection("drtg", 0.85), MetricSelection("xyz", 0.85)],
    )
    assert result.code == "metric_not_allowed"
