"""
Observability module for Hoop Hub.

Provides Prometheus metrics for the planner and the data store.
"""

from hoop_hub.observability.metrics import (
    CACHE_LOOKUPS,
    PLAN_DURATION,
    PLAN_INVARIANT_ERRORS,
    PLAN_REQUESTS,
    STORE_OPERATIONS,
    get_metrics,
    record_cache_lookup,
    record_plan,
    record_plan_invariant_error,
    track_store_operation,
)

__all__ = [
    "CACHE_LOOKUPS",
    "PLAN_DURATION",
    "PLAN_INVARIANT_ERRORS",
    "PLAN_REQUESTS",
    "STORE_OPERATIONS",
    "get_metrics",
    "record_cache_lookup",
    "record_plan",
    "record_plan_invariant_error",
    "track_store_operation",
]
