"""
Query planning pipeline.

Provides a synchronous entry point from raw question text to a validated
QueryPlan, and ``QueryPlanner`` which adds request validation and trace
recording on top of a DataStore.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from ..cache.freshness import utc_now_iso
from ..errors import QueryPlanInvariantError
from ..observability.metrics import record_plan, record_plan_invariant_error, timer
from ..schemas.requests import validate_chat_query_request
from ..schemas.store import QueryTrace, TraceSourceBundle
from ..store.base import DataStore
from .models import QueryPlan
from .parser import normalize_question
from .planner import build_query_plan, validate_query_plan

logger = logging.getLogger(__name__)


# ============================================================================
# MAIN PIPELINE
# ============================================================================


def plan_question(message: str) -> QueryPlan:
    """
    Turn a natural language question into a validated QueryPlan.

    Questions the planner cannot answer still succeed, with intent
    ``unsupported``.

    Args:
        message: Raw question (e.g., "Who led the league in assists in 2023-24?")

    Returns:
        QueryPlan that passed ``validate_query_plan``

    Raises:
        QueryPlanInvariantError: If the assembled plan fails validation

    Examples:
        >>> plan_question("Compare Stephen Curry vs Damian Lillard").intent.value
        'player_compare'
    """
    elapsed = timer()
    normalized = normalize_question(message)
    plan = build_query_plan(normalized)

    validation = validate_query_plan(plan)
    if not validation.ok:
        record_plan_invariant_error(validation.code)
        logger.error(
            f"Query plan invariant violated ({validation.code}) for '{normalized}': "
            f"{validation.error}"
        )
        raise QueryPlanInvariantError(
            violation=validation.code or "unknown",
            message=validation.error or "Query plan failed validation.",
            plan=plan.to_dict(),
        )

    record_plan(plan.intent.value, elapsed())
    logger.debug(f"Planned '{normalized}' as {plan.intent.value} ({plan.confidence:.2f})")
    return plan


# ============================================================================
# PLANNER SERVICE
# ============================================================================


@dataclass(frozen=True)
class PlannedQuery:
    """A plan plus the trace id it was recorded under."""

    trace_id: str
    normalized_question: str
    plan: QueryPlan

    def to_dict(self) -> dict:
        return {
            "trace_id": self.trace_id,
            "normalized_question": self.normalized_question,
            "plan": self.plan.to_dict(),
        }


class QueryPlanner:
    """
    Validates chat requests, plans them and records a QueryTrace per request.

    Args:
        store: Where query traces and source-call provenance are kept
    """

    def __init__(self, store: DataStore):
        self.store = store

    def submit(self, payload: Any) -> PlannedQuery:
        """
        Plan one chat request.

        Raises:
            InvalidRequestError: Malformed payload
            QueryPlanInvariantError: The planner produced an invalid plan
        """
        request = validate_chat_query_request(payload)
        normalized = normalize_question(request.message)
        plan = plan_question(request.message)

        trace_id = str(uuid.uuid4())
        self.store.put_query_trace(
            QueryTrace(
                trace_id=trace_id,
                normalized_question=normalized,
                intent=plan.intent.value,
                confidence=plan.confidence,
                plan_summary=list(plan.reasons),
                created_at=utc_now_iso(),
            )
        )
        logger.info(f"Session {request.session_id}: trace {trace_id} -> {plan.intent.value}")
        return PlannedQuery(trace_id=trace_id, normalized_question=normalized, plan=plan)

    def get_trace(self, trace_id: str) -> Optional[QueryTrace]:
        return self.store.get_query_trace(trace_id)

    def get_trace_sources(self, trace_id: str) -> TraceSourceBundle:
        return self.store.get_trace_source_calls(trace_id)
