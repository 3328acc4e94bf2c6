"""
Intent classification as an ordered decision table.

``INTENT_RULES`` is evaluated top to bottom and the first matching rule wins,
so a question that satisfies several rules always resolves to the earliest
one (a "compare ... vs ..." question that also says "most" is a comparison).
If nothing matches, the question is ``unsupported``.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..schemas.catalog import QueryIntent
from .models import MetricSelection, PlanEntities, WindowFilter
from .parser import includes_any, includes_keyword

logger = logging.getLogger(__name__)


COMPARE_KEYWORDS = ("compare", "vs", "versus")
LEADER_KEYWORDS = ("leader", "leaders", "most", "highest", "top")
TREND_KEYWORDS = ("trend", "trending")
TEAM_RANKING_KEYWORDS = ("rank", "ranking", "best", "worst")
TEAM_TERMS = ("team", "teams")
TEAM_METRIC_TERMS = ("defensive rating", "drtg")

UNSUPPORTED_CONFIDENCE = 0.3


@dataclass(frozen=True)
class IntentSignals:
    """Everything the rules may look at for one question."""

    normalized: str
    entities: PlanEntities
    metrics: Tuple[MetricSelection, ...] = ()
    window: Optional[WindowFilter] = None


@dataclass(frozen=True)
class IntentRule:
    """One row of the decision table."""

    name: str
    intent: QueryIntent
    matches: Callable[[IntentSignals], bool]
    confidence: Callable[[IntentSignals], float]
    reason: str


@dataclass(frozen=True)
class IntentDecision:
    intent: QueryIntent
    confidence: float
    reason: str
    rule: Optional[str] = None


def _is_comparison(s: IntentSignals) -> bool:
    return includes_any(s.normalized, COMPARE_KEYWORDS) and len(s.entities.players) >= 2


def _is_league_leaders(s: IntentSignals) -> bool:
    return includes_any(s.normalized, LEADER_KEYWORDS) and len(s.metrics) > 0


def _is_player_trend(s: IntentSignals) -> bool:
    has_trend_signal = includes_any(s.normalized, TREND_KEYWORDS) or s.window is not None
    return has_trend_signal and len(s.entities.players) >= 1


def _is_team_ranking(s: IntentSignals) -> bool:
    has_team_signal = len(s.entities.teams) > 0 or includes_any(s.normalized, TEAM_TERMS)
    has_ranking_signal = includes_any(s.normalized, TEAM_RANKING_KEYWORDS) or any(
        includes_keyword(s.normalized, term) for term in TEAM_METRIC_TERMS
    )
    return has_team_signal and has_ranking_signal


INTENT_RULES: List[IntentRule] = [
    IntentRule(
        name="comparison",
        intent=QueryIntent.PLAYER_COMPARE,
        matches=_is_comparison,
        confidence=lambda s: 0.8,
        reason="Intent matched: compare signal + at least two players.",
    ),
    IntentRule(
        name="league_leaders",
        intent=QueryIntent.LEAGUE_LEADERS,
        matches=_is_league_leaders,
        confidence=lambda s: 0.8,
        reason="Intent matched: leader signal + metric match.",
    ),
    IntentRule(
        name="player_trend",
        intent=QueryIntent.PLAYER_TREND,
        matches=_is_player_trend,
        confidence=lambda s: 0.8 if s.window is not None else 0.6,
        reason="Intent matched: player + trend/last-N signal.",
    ),
    IntentRule(
        name="team_ranking",
        intent=QueryIntent.TEAM_RANKING,
        matches=_is_team_ranking,
        confidence=lambda s: 0.8,
        reason="Intent matched: team signal + ranking/defensive metric signal.",
    ),
]

UNSUPPORTED_REASON = "No high-confidence intent match. Marking query as unsupported."


def classify_intent(
    signals: IntentSignals, rules: Sequence[IntentRule] = INTENT_RULES
) -> IntentDecision:
    """
    Pick the first rule whose predicate holds.

    Args:
        signals: Extracted entities, metrics and window for the question
        rules: Decision table (defaults to INTENT_RULES)

    Returns:
        IntentDecision with the rule's reason, or the unsupported fallback
    """
    for rule in rules:
        if rule.matches(signals):
            logger.debug(f"Matched intent rule '{rule.name}' -> {rule.intent.value}")
            return IntentDecision(
                intent=rule.intent,
                confidence=rule.confidence(signals),
                reason=rule.reason,
                rule=rule.name,
            )

    return IntentDecision(
        intent=QueryIntent.UNSUPPORTED,
        confidence=UNSUPPORTED_CONFIDENCE,
        reason=UNSUPPORTED_REASON,
    )
