"""
Metric registry: canonical box-score metrics and their natural-language aliases.

Aliases are stored already normalized (lowercase, no punctuation) because the
resolver matches them against normalized question text.
"""

from typing import Dict, List, Optional

from ..schemas.catalog import MetricDefinition, QueryIntent

_PLAYER_INTENTS = [
    QueryIntent.LEAGUE_LEADERS,
    QueryIntent.PLAYER_TREND,
    QueryIntent.PLAYER_COMPARE,
]

CORE_BOXSCORE_METRICS: List[MetricDefinition] = [
    MetricDefinition(
        id="ast",
        aliases=["assist", "assists", "dime", "dimes", "apg"],
        allowed_intents=_PLAYER_INTENTS,
        allowed_entity_scopes=["player"],
        required_sources=["leagueleaders", "playergamelog"],
    ),
    MetricDefinition(
        id="reb",
        aliases=["rebound", "rebounds", "rpg", "boards"],
        allowed_intents=_PLAYER_INTENTS,
        allowed_entity_scopes=["player"],
        required_sources=["leagueleaders", "playergamelog"],
    ),
    MetricDefinition(
        id="pts",
        aliases=["point", "points", "ppg", "scoring"],
        allowed_intents=_PLAYER_INTENTS,
        allowed_entity_scopes=["player"],
        required_sources=["leagueleaders", "playergamelog"],
    ),
    MetricDefinition(
        id="drtg",
        aliases=["defensive rating", "def rating", "drtg"],
        allowed_intents=[QueryIntent.TEAM_RANKING],
        allowed_entity_scopes=["team"],
        required_sources=["leaguedashteamstats"],
        formula="100 * defensive_points_allowed / defensive_possessions",
    ),
]

METRIC_REGISTRY: List[MetricDefinition] = [*CORE_BOXSCORE_METRICS]

_METRIC_BY_ID: Dict[str, MetricDefinition] = {metric.id: metric for metric in METRIC_REGISTRY}


def list_metric_definitions() -> List[MetricDefinition]:
    return list(METRIC_REGISTRY)


def get_metric_by_id(metric_id: str) -> Optional[MetricDefinition]:
    return _METRIC_BY_ID.get(metric_id)


def is_registered_alias(term: str) -> bool:
    """True when ``term`` is an alias of any registered metric."""
    return any(term in metric.aliases for metric in METRIC_REGISTRY)
