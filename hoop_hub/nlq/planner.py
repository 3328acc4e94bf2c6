"""
Query plan assembly and validation.

``build_query_plan`` combines parser, metric resolver and intent classifier
output into a QueryPlan and applies the default-metric fallback.
``validate_query_plan`` is the gate every plan passes before it is trusted.
"""

import logging
import math
import re
from typing import Dict, List

from ..schemas.catalog import QueryIntent
from .intent import UNSUPPORTED_CONFIDENCE, IntentSignals, classify_intent
from .metric_resolver import resolve_metrics, validate_metrics_for_intent
from .models import MetricSelection, PlanFilters, PlanValidationResult, QueryPlan
from .parser import extract_entities, extract_window_filter

logger = logging.getLogger(__name__)


# ============================================================================
# DEFAULT METRIC FALLBACK
# ============================================================================

DEFAULT_METRIC_BY_INTENT: Dict[QueryIntent, str] = {
    QueryIntent.LEAGUE_LEADERS: "pts",
    QueryIntent.PLAYER_TREND: "pts",
    QueryIntent.PLAYER_COMPARE: "pts",
    QueryIntent.TEAM_RANKING: "drtg",
}

DEFAULT_METRIC_CONFIDENCE = 0.55
DEFAULTED_PLAN_CONFIDENCE_CAP = 0.6


# ============================================================================
# ASSEMBLY
# ============================================================================


def build_query_plan(normalized: str) -> QueryPlan:
    """
    Build a plan from a normalized question. Never raises.

    Args:
        normalized: Output of ``normalize_question``

    Returns:
        A structurally complete QueryPlan (possibly ``unsupported``)

    Examples:
        >>> build_query_plan("who averaged the most assists in 2023-24").intent
        <QueryIntent.LEAGUE_LEADERS: 'league_leaders'>
    """
    entities = extract_entities(normalized)
    resolution = resolve_metrics(normalized)
    window = extract_window_filter(normalized)
    season = entities.seasons[0] if entities.seasons else None

    reasons: List[str] = list(resolution.reasons)
    if window:
        reasons.append(f"Parsed rolling window: last {window.n} games.")
    if season:
        reasons.append(f"Parsed season filter: {season}.")

    decision = classify_intent(
        IntentSignals(
            normalized=normalized,
            entities=entities,
            metrics=tuple(resolution.metrics),
            window=window,
        )
    )
    reasons.append(decision.reason)

    intent = decision.intent
    confidence = decision.confidence
    metrics = list(resolution.metrics)

    if intent != QueryIntent.UNSUPPORTED and not metrics:
        if resolution.unresolved_terms:
            # Recognized stat vocabulary with no registered metric means the
            # capability is missing; do not paper over it with a default.
            intent = QueryIntent.UNSUPPORTED
            confidence = UNSUPPORTED_CONFIDENCE
            reasons.append(
                f"Unsupported metric cues detected ({', '.join(resolution.unresolved_terms)}). "
                "Falling back to unsupported intent."
            )
        else:
            default_id = DEFAULT_METRIC_BY_INTENT[intent]
            metrics = [MetricSelection(id=default_id, confidence=DEFAULT_METRIC_CONFIDENCE)]
            confidence = min(confidence, DEFAULTED_PLAN_CONFIDENCE_CAP)
            reasons.append(
                f"No explicit metric found. Applied default metric '{default_id}' "
                f"for intent '{intent.value}'."
            )

    plan = QueryPlan(
        intent=intent,
        entities=entities,
        metrics=tuple(metrics),
        filters=PlanFilters(season=season, window=window),
        confidence=confidence,
        reasons=tuple(reasons),
    )
    logger.debug(
        f"Plan: intent={plan.intent.value}, metrics={list(plan.metric_ids)}, "
        f"confidence={plan.confidence:.2f}"
    )
    return plan


# ============================================================================
# VALIDATION
# ============================================================================

_SEASON_FORMAT = re.compile(r"[0-9]{4}-[0-9]{2}")


def validate_query_plan(plan: QueryPlan) -> PlanValidationResult:
    """
    Check structural invariants, returning the first violation.

    Pure; never raises for an ill-formed plan. Violation codes, in check
    order: confidence_out_of_range, unsupported_confidence_too_high,
    missing_metrics, insufficient_players, invalid_season_format,
    invalid_window, unknown_metric, metric_not_allowed.
    """
    confidence = plan.confidence
    if (
        isinstance(confidence, bool)
        or not isinstance(confidence, (int, float))
        or not math.isfinite(confidence)
        or confidence < 0
        or confidence > 1
    ):
        return PlanValidationResult.failure(
            "confidence_out_of_range", "QueryPlan confidence must be between 0 and 1."
        )

    supported = plan.intent != QueryIntent.UNSUPPORTED

    if not supported and confidence >= 0.5:
        return PlanValidationResult.failure(
            "unsupported_confidence_too_high",
            "Unsupported QueryPlan confidence must be lower than 0.5.",
        )

    if supported and not plan.metrics:
        return PlanValidationResult.failure(
            "missing_metrics", "Supported QueryPlan intents require at least one metric."
        )

    if plan.intent == QueryIntent.PLAYER_COMPARE and len(set(plan.entities.players)) < 2:
        return PlanValidationResult.failure(
            "insufficient_players", "player_compare intent requires at least two players."
        )

    season = plan.filters.season
    if season is not None and not (isinstance(season, str) and _SEASON_FORMAT.fullmatch(season)):
        return PlanValidationResult.failure(
            "invalid_season_format", "Season filter must match format 'YYYY-YY'."
        )

    window = plan.filters.window
    if window is not None:
        n = window.n
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            return PlanValidationResult.failure(
                "invalid_window", "Window filter must use a positive integer game count."
            )

    if supported:
        return validate_metrics_for_intent(plan.intent, plan.metrics)

    return PlanValidationResult.success()
