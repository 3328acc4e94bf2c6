"""In-process DataStore backend used when DuckDB is unavailable and in tests."""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Sequence

from ..errors import StoreConstraintError, StoreError
from ..observability.metrics import track_store_operation
from ..schemas.store import (
    CompleteNightlyRunInput,
    DataFreshnessMode,
    NightlyRunRecord,
    PutRawEndpointCacheInput,
    QueryTrace,
    RawEndpointCacheRecord,
    StartNightlyRunInput,
    TraceSourceBundle,
    TraceSourceCall,
)
from .base import DataStore, build_raw_cache_record

logger = logging.getLogger(__name__)


class InMemoryDataStore(DataStore):
    """
    Dictionary-backed store with the same semantics as DuckDBDataStore.

    Records are frozen pydantic models, so handing them out directly cannot
    let callers mutate stored state. Trace bundles are rebuilt on every read.
    """

    backend_name = "memory"

    def __init__(self):
        self._lock = threading.RLock()
        self._raw_cache: Dict[str, RawEndpointCacheRecord] = {}
        self._nightly_runs: Dict[str, NightlyRunRecord] = {}
        self._trace_sources: Dict[str, TraceSourceBundle] = {}
        self._query_traces: Dict[str, QueryTrace] = {}
        self._closed = False
        logger.info("In-memory data store initialized")

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        with self._lock:
            if self._closed:
                raise StoreError(f"In-memory {operation} failed: store is closed", operation=operation)
            yield

    @track_store_operation()
    def put_raw_endpoint_cache(self, data: PutRawEndpointCacheInput) -> RawEndpointCacheRecord:
        record = build_raw_cache_record(data)
        with self._guard("put_raw_endpoint_cache"):
            self._raw_cache[record.cache_key] = record
        return record

    @track_store_operation()
    def get_raw_endpoint_cache(self, cache_key: str) -> Optional[RawEndpointCacheRecord]:
        with self._guard("get_raw_endpoint_cache"):
            return self._raw_cache.get(cache_key)

    @track_store_operation()
    def start_nightly_run(self, data: StartNightlyRunInput) -> NightlyRunRecord:
        with self._guard("start_nightly_run"):
            if data.run_id in self._nightly_runs:
                raise StoreConstraintError(
                    f"Nightly run '{data.run_id}' already exists", operation="start_nightly_run"
                )
            record = NightlyRunRecord(
                run_id=data.run_id, slate_date=data.slate_date, started_at=data.started_at
            )
            self._nightly_runs[data.run_id] = record
        logger.info(f"Nightly run {data.run_id} started for slate {data.slate_date}")
        return record

    @track_store_operation()
    def complete_nightly_run(self, data: CompleteNightlyRunInput) -> Optional[NightlyRunRecord]:
        with self._guard("complete_nightly_run"):
            existing = self._nightly_runs.get(data.run_id)
            if existing is None:
                return None
            if existing.status != "running":
                raise StoreConstraintError(
                    f"Nightly run '{data.run_id}' is already {existing.status}",
                    operation="complete_nightly_run",
                )
            record = existing.model_copy(
                update={
                    "completed_at": data.completed_at,
                    "status": data.status,
                    "finalized_by": data.finalized_by,
                    "error_summary": data.error_summary,
                }
            )
            self._nightly_runs[data.run_id] = record
        logger.info(f"Nightly run {data.run_id} finished with status {data.status}")
        return record

    @track_store_operation()
    def get_nightly_run(self, run_id: str) -> Optional[NightlyRunRecord]:
        with self._guard("get_nightly_run"):
            return self._nightly_runs.get(run_id)

    @track_store_operation()
    def get_latest_nightly_run_for_slate(self, slate_date: str) -> Optional[NightlyRunRecord]:
        with self._guard("get_latest_nightly_run_for_slate"):
            runs = [run for run in self._nightly_runs.values() if run.slate_date == slate_date]
        if not runs:
            return None
        # max() keeps the first of equal keys; insertion order breaks ties
        return max(runs, key=lambda run: run.started_at)

    @track_store_operation()
    def replace_trace_source_calls(
        self,
        trace_id: str,
        data_freshness_mode: DataFreshnessMode,
        source_calls: Sequence[TraceSourceCall],
    ) -> None:
        bundle = TraceSourceBundle(
            data_freshness_mode=data_freshness_mode, source_calls=list(source_calls)
        )
        with self._guard("replace_trace_source_calls"):
            self._trace_sources[trace_id] = bundle

    @track_store_operation()
    def get_trace_source_calls(self, trace_id: str) -> TraceSourceBundle:
        with self._guard("get_trace_source_calls"):
            bundle = self._trace_sources.get(trace_id)
        if bundle is None or not bundle.source_calls:
            return TraceSourceBundle()
        return TraceSourceBundle(
            data_freshness_mode=bundle.data_freshness_mode,
            source_calls=list(bundle.source_calls),
        )

    @track_store_operation()
    def put_query_trace(self, trace: QueryTrace) -> QueryTrace:
        with self._guard("put_query_trace"):
            self._query_traces[trace.trace_id] = trace
        return trace

    @track_store_operation()
    def get_query_trace(self, trace_id: str) -> Optional[QueryTrace]:
        with self._guard("get_query_trace"):
            return self._query_traces.get(trace_id)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._raw_cache.clear()
            self._nightly_runs.clear()
            self._trace_sources.clear()
            self._query_traces.clear()
