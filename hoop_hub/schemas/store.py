"""
Record models persisted by the DataStore backends.

Timestamps are ISO-8601 UTC strings (``2026-02-25T05:00:00.000Z``) so they
sort lexicographically and round-trip unchanged through either backend.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

NightlyRunStatus = Literal["running", "completed", "failed", "partial"]
NightlyRunTerminalStatus = Literal["completed", "failed", "partial"]
NightlyRunFinalizedBy = Literal["game_complete_aware", "cutoff_fallback"]
CacheStatus = Literal["hit", "miss", "stale_hit"]
SourceStatus = Literal["ok", "timeout", "rate_limited", "error"]
DataFreshnessMode = Literal["nightly", "provisional_live"]


# ============================================================================
# RAW ENDPOINT CACHE
# ============================================================================


class PutRawEndpointCacheInput(BaseModel):
    """Write request for a raw cache record; checksum is derived when omitted."""

    cache_key: str = Field(..., min_length=1)
    endpoint_id: str
    params_json: str
    payload_json: str
    fetched_at: str
    expires_at: str
    snapshot_date: str = Field(..., examples=["2026-02-25"])
    parser_version: str
    is_provisional: bool = False
    checksum: Optional[str] = None


class RawEndpointCacheRecord(BaseModel):
    """One cached upstream response."""

    model_config = ConfigDict(frozen=True)

    cache_key: str
    endpoint_id: str
    params_json: str
    payload_json: str
    fetched_at: str
    expires_at: str
    snapshot_date: str
    parser_version: str
    checksum: str
    is_provisional: bool


# ============================================================================
# NIGHTLY RUNS
# ============================================================================


class StartNightlyRunInput(BaseModel):
    run_id: str = Field(..., min_length=1)
    slate_date: str
    started_at: str


class CompleteNightlyRunInput(BaseModel):
    run_id: str = Field(..., min_length=1)
    completed_at: str
    status: NightlyRunTerminalStatus
    finalized_by: NightlyRunFinalizedBy
    error_summary: Optional[str] = None


class NightlyRunRecord(BaseModel):
    """One batch ingestion attempt for a slate date."""

    model_config = ConfigDict(frozen=True)

    run_id: str
    slate_date: str
    started_at: str
    completed_at: Optional[str] = None
    status: NightlyRunStatus = "running"
    finalized_by: Optional[NightlyRunFinalizedBy] = None
    error_summary: Optional[str] = None


# ============================================================================
# TRACE PROVENANCE
# ============================================================================


class TraceSourceCall(BaseModel):
    """One upstream-or-cache interaction attributed to a query trace."""

    model_config = ConfigDict(frozen=True)

    endpoint_id: str
    cache_status: CacheStatus
    latency_ms: int = Field(..., ge=0)
    stale: bool = False
    is_provisional: bool = False
    parser_version: str
    source_status: SourceStatus = "ok"


class TraceSourceBundle(BaseModel):
    """A trace's source calls, all under one freshness mode."""

    model_config = ConfigDict(frozen=True)

    data_freshness_mode: DataFreshnessMode = "nightly"
    source_calls: List[TraceSourceCall] = Field(default_factory=list)


class QueryTrace(BaseModel):
    """Planner-side record of one answered question."""

    model_config = ConfigDict(frozen=True)

    trace_id: str
    normalized_question: str
    intent: str
    confidence: float
    plan_summary: List[str] = Field(default_factory=list)
    created_at: str
