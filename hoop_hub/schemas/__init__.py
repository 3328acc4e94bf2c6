"""Pydantic schemas shared across the planner, catalog and store."""

from .catalog import (
    SUPPORTED_INTENTS,
    TTL_MINUTES_BY_TIER,
    EndpointCatalogEntry,
    MetricDefinition,
    QueryIntent,
    VolatilityTier,
)
from .requests import ChatQueryRequest, validate_chat_query_request
from .store import (
    CompleteNightlyRunInput,
    NightlyRunRecord,
    PutRawEndpointCacheInput,
    QueryTrace,
    RawEndpointCacheRecord,
    StartNightlyRunInput,
    TraceSourceBundle,
    TraceSourceCall,
)

__all__ = [
    "QueryIntent",
    "SUPPORTED_INTENTS",
    "VolatilityTier",
    "TTL_MINUTES_BY_TIER",
    "MetricDefinition",
    "EndpointCatalogEntry",
    "ChatQueryRequest",
    "validate_chat_query_request",
    "PutRawEndpointCacheInput",
    "RawEndpointCacheRecord",
    "StartNightlyRunInput",
    "CompleteNightlyRunInput",
    "NightlyRunRecord",
    "TraceSourceCall",
    "TraceSourceBundle",
    "QueryTrace",
]
