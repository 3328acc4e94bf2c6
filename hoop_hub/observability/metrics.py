"""
Prometheus metrics for Hoop Hub.

This module tracks:
- Planned questions per intent and planning latency
- Plan invariant violations per validation code
- DataStore operations per backend
- Raw cache lookup outcomes (hit, stale_hit, miss)
"""

import functools
import logging
import time
from typing import Callable, Optional

from prometheus_client import REGISTRY, Counter, Histogram, generate_latest

logger = logging.getLogger(__name__)

# METRIC DEFINITIONS

PLAN_REQUESTS = Counter(
    "hoop_hub_plan_requests_total",
    "Total number of planned questions by intent",
    ["intent"],
)

PLAN_INVARIANT_ERRORS = Counter(
    "hoop_hub_plan_invariant_errors_total",
    "Plans rejected by the plan validator",
    ["code"],
)

PLAN_DURATION = Histogram(
    "hoop_hub_plan_duration_seconds",
    "Time to normalize, build and validate one plan",
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
)

STORE_OPERATIONS = Counter(
    "hoop_hub_store_operations_total",
    "DataStore operations",
    ["backend", "operation", "result"],  # result: success, error
)

CACHE_LOOKUPS = Counter(
    "hoop_hub_cache_lookups_total",
    "Raw endpoint cache lookups by outcome",
    ["cache_status"],  # hit, stale_hit, miss
)


# RECORDING HELPERS


def record_plan(intent: str, duration: float) -> None:
    PLAN_REQUESTS.labels(intent=intent).inc()
    PLAN_DURATION.observe(duration)


def record_plan_invariant_error(code: Optional[str]) -> None:
    PLAN_INVARIANT_ERRORS.labels(code=code or "unknown").inc()


def record_cache_lookup(cache_status: str) -> None:
    CACHE_LOOKUPS.labels(cache_status=cache_status).inc()


def track_store_operation(operation: Optional[str] = None):
    """
    Decorator counting DataStore method calls by backend and result.

    The backend label is read from the store instance's ``backend_name``.

    Args:
        operation: Operation label (defaults to the method name)
    """

    def decorator(func: Callable) -> Callable:
        op_name = operation or func.__name__

        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            backend = getattr(self, "backend_name", type(self).__name__)
            result = "success"
            try:
                return func(self, *args, **kwargs)
            except Exception:
                result = "error"
                raise
            finally:
                STORE_OPERATIONS.labels(backend=backend, operation=op_name, result=result).inc()

        return wrapper

    return decorator


def timer() -> Callable[[], float]:
    """Start a monotonic timer; calling the result returns elapsed seconds."""
    start = time.perf_counter()
    return lambda: time.perf_counter() - start


# EXPORT


def get_metrics() -> bytes:
    """Metrics in Prometheus text exposition format."""
    return generate_latest(REGISTRY)
