"""
Natural language query planning.

    normalize_question -> build_query_plan -> validate_query_plan

``plan_question`` runs all three and raises QueryPlanInvariantError when the
assembled plan is inconsistent.
"""

from .intent import INTENT_RULES, IntentDecision, IntentRule, IntentSignals, classify_intent
from .metric_resolver import MetricResolution, resolve_metrics, validate_metrics_for_intent
from .models import (
    MetricSelection,
    PlanEntities,
    PlanFilters,
    PlanValidationResult,
    QueryPlan,
    WindowFilter,
)
from .parser import extract_entities, extract_window_filter, normalize_question
from .pipeline import PlannedQuery, QueryPlanner, plan_question
from .planner import build_query_plan, validate_query_plan

__all__ = [
    "INTENT_RULES",
    "IntentDecision",
    "IntentRule",
    "IntentSignals",
    "classify_intent",
    "MetricResolution",
    "resolve_metrics",
    "validate_metrics_for_intent",
    "MetricSelection",
    "PlanEntities",
    "PlanFilters",
    "PlanValidationResult",
    "QueryPlan",
    "WindowFilter",
    "extract_entities",
    "extract_window_filter",
    "normalize_question",
    "PlannedQuery",
    "QueryPlanner",
    "plan_question",
    "build_query_plan",
    "validate_query_plan",
]
