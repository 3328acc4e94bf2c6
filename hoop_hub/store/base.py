"""
DataStore interface shared by the DuckDB and in-memory backends.

Absent records read back as ``None`` (or an empty nightly bundle for traces);
constraint violations raise ``StoreConstraintError``.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..cache.cache_key import compute_payload_checksum
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


def build_raw_cache_record(data: PutRawEndpointCacheInput) -> RawEndpointCacheRecord:
    """Resolve the checksum (derived when omitted, verbatim when given)."""
    checksum = data.checksum if data.checksum is not None else compute_payload_checksum(data.payload_json)
    return RawEndpointCacheRecord(
        cache_key=data.cache_key,
        endpoint_id=data.endpoint_id,
        params_json=data.params_json,
        payload_json=data.payload_json,
        fetched_at=data.fetched_at,
        expires_at=data.expires_at,
        snapshot_date=data.snapshot_date,
        parser_version=data.parser_version,
        checksum=checksum,
        is_provisional=data.is_provisional,
    )


class DataStore(ABC):
    """Cache, nightly-run and trace provenance persistence."""

    backend_name: str = "abstract"

    # Raw endpoint cache

    @abstractmethod
    def put_raw_endpoint_cache(self, data: PutRawEndpointCacheInput) -> RawEndpointCacheRecord:
        """Upsert by cache key; the last writer wins on every field."""

    @abstractmethod
    def get_raw_endpoint_cache(self, cache_key: str) -> Optional[RawEndpointCacheRecord]:
        ...

    # Nightly runs

    @abstractmethod
    def start_nightly_run(self, data: StartNightlyRunInput) -> NightlyRunRecord:
        """Create a ``running`` run; a duplicate run id raises StoreConstraintError."""

    @abstractmethod
    def complete_nightly_run(self, data: CompleteNightlyRunInput) -> Optional[NightlyRunRecord]:
        """
        Move a running run to a terminal status.

        Returns None for an unknown run id. Raises StoreConstraintError when
        the run is already terminal.
        """

    @abstractmethod
    def get_nightly_run(self, run_id: str) -> Optional[NightlyRunRecord]:
        ...

    @abstractmethod
    def get_latest_nightly_run_for_slate(self, slate_date: str) -> Optional[NightlyRunRecord]:
        """Run with the latest ``started_at`` for the slate, if any."""

    # Trace provenance

    @abstractmethod
    def replace_trace_source_calls(
        self,
        trace_id: str,
        data_freshness_mode: DataFreshnessMode,
        source_calls: Sequence[TraceSourceCall],
    ) -> None:
        """Atomically replace every source call recorded for ``trace_id``."""

    @abstractmethod
    def get_trace_source_calls(self, trace_id: str) -> TraceSourceBundle:
        ...

    @abstractmethod
    def put_query_trace(self, trace: QueryTrace) -> QueryTrace:
        ...

    @abstractmethod
    def get_query_trace(self, trace_id: str) -> Optional[QueryTrace]:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    def __enter__(self) -> "DataStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
