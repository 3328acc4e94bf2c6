"""Golden planner queries for Hoop Hub."""

from .queries import (
    GOLDEN_QUERIES,
    GoldenQuery,
    get_queries_by_category,
    get_queries_by_intent,
    get_query_by_id,
    get_query_statistics,
)

__all__ = [
    "GoldenQuery",
    "GOLDEN_QUERIES",
    "get_query_by_id",
    "get_queries_by_category",
    "get_queries_by_intent",
    "get_query_statistics",
]
