"""
Metric resolution: map normalized question text onto registered metric ids.

Two outputs matter to the planner:
- ``metrics``: registry metrics whose aliases appear in the text
- ``unresolved_terms``: stat vocabulary that appears in the text but that no
  registered metric claims (e.g. "steals" today). The planner treats these as
  a request for an unsupported capability rather than as noise.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from ..data.metric_registry import get_metric_by_id, is_registered_alias, list_metric_definitions
from ..schemas.catalog import QueryIntent
from .models import MetricSelection, PlanValidationResult
from .parser import includes_keyword

logger = logging.getLogger(__name__)

RESOLVED_METRIC_CONFIDENCE = 0.85

# Stat vocabulary we recognize whether or not a metric exists for it yet.
METRIC_CUE_WORDS = (
    "assist",
    "assists",
    "dime",
    "dimes",
    "apg",
    "rebound",
    "rebounds",
    "boards",
    "point",
    "points",
    "ppg",
    "scoring",
    "defensive rating",
    "def rating",
    "drtg",
    "deflections",
    "steals",
    "blocks",
)


@dataclass
class MetricResolution:
    """Result of scanning one question for metrics."""

    metrics: List[MetricSelection] = field(default_factory=list)
    unresolved_terms: List[str] = field(default_factory=list)
    reasons: List[str] = field(default_factory=list)


def resolve_metrics(normalized: str) -> MetricResolution:
    """
    Resolve metrics from normalized text. Never raises.

    Args:
        normalized: Output of ``normalize_question``

    Returns:
        MetricResolution with deduplicated metrics (registry order) and
        deduplicated unresolved cue terms (cue order)
    """
    resolution = MetricResolution()

    for metric in list_metric_definitions():
        if any(includes_keyword(normalized, alias) for alias in metric.aliases):
            resolution.metrics.append(
                MetricSelection(id=metric.id, confidence=RESOLVED_METRIC_CONFIDENCE)
            )
            resolution.reasons.append(f"Matched metric '{metric.id}' from aliases.")

    for cue in METRIC_CUE_WORDS:
        if includes_keyword(normalized, cue) and not is_registered_alias(cue):
            if cue not in resolution.unresolved_terms:
                resolution.unresolved_terms.append(cue)

    if resolution.unresolved_terms:
        logger.debug(f"Unresolved metric cues: {resolution.unresolved_terms}")

    return resolution


def validate_metrics_for_intent(
    intent: QueryIntent, metrics: Sequence[MetricSelection]
) -> PlanValidationResult:
    """Every metric must exist in the registry and allow ``intent``."""
    for metric in metrics:
        definition = get_metric_by_id(metric.id)
        if definition is None:
            return PlanValidationResult.failure(
                "unknown_metric", f"Unknown metric id '{metric.id}'."
            )
        if intent not in definition.allowed_intents:
            return PlanValidationResult.failure(
                "metric_not_allowed",
                f"Metric '{metric.id}' is not allowed for intent '{getattr(intent, 'value', intent)}'.",
            )
    return PlanValidationResult.success()
