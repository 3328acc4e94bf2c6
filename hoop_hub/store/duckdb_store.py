"""
DuckDB-backed DataStore.

A single connection per store instance, guarded by a re-entrant lock.
Every public method is one statement or one explicit transaction, so a
crash never leaves a trace with a partial set of source calls.
"""

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

import duckdb

from ..cache.freshness import utc_now_iso
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

IN_MEMORY_PATH = ":memory:"

# Columns touched by ON CONFLICT DO UPDATE must not be indexed in DuckDB,
# so raw_endpoint_cache and query_traces carry only their primary keys.
SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS raw_endpoint_cache (
        cache_key VARCHAR PRIMARY KEY,
        endpoint_id VARCHAR NOT NULL,
        params_json VARCHAR NOT NULL,
        payload_json VARCHAR NOT NULL,
        fetched_at VARCHAR NOT NULL,
        expires_at VARCHAR NOT NULL,
        snapshot_date VARCHAR NOT NULL,
        parser_version VARCHAR NOT NULL,
        checksum VARCHAR NOT NULL,
        is_provisional BOOLEAN NOT NULL
    )
    """,
    "CREATE SEQUENCE IF NOT EXISTS seq_nightly_runs START 1",
    """
    CREATE TABLE IF NOT EXISTS nightly_runs (
        run_id VARCHAR PRIMARY KEY,
        slate_date VARCHAR NOT NULL,
        started_at VARCHAR NOT NULL,
        completed_at VARCHAR,
        status VARCHAR NOT NULL CHECK (status IN ('running', 'completed', 'failed', 'partial')),
        finalized_by VARCHAR CHECK (finalized_by IN ('game_complete_aware', 'cutoff_fallback')),
        error_summary VARCHAR,
        created_seq BIGINT NOT NULL DEFAULT nextval('seq_nightly_runs')
    )
    """,
    "CREATE SEQUENCE IF NOT EXISTS seq_query_trace_source_calls START 1",
    """
    CREATE TABLE IF NOT EXISTS query_trace_source_calls (
        id BIGINT PRIMARY KEY DEFAULT nextval('seq_query_trace_source_calls'),
        trace_id VARCHAR NOT NULL,
        endpoint_id VARCHAR NOT NULL,
        cache_status VARCHAR NOT NULL CHECK (cache_status IN ('hit', 'miss', 'stale_hit')),
        latency_ms INTEGER NOT NULL CHECK (latency_ms >= 0),
        stale BOOLEAN NOT NULL,
        is_provisional BOOLEAN NOT NULL,
        parser_version VARCHAR NOT NULL,
        source_status VARCHAR NOT NULL
            CHECK (source_status IN ('ok', 'timeout', 'rate_limited', 'error')),
        data_freshness_mode VARCHAR NOT NULL
            CHECK (data_freshness_mode IN ('nightly', 'provisional_live')),
        created_at VARCHAR NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_query_trace_source_calls_trace
        ON query_trace_source_calls (trace_id, id)
    """,
    """
    CREATE TABLE IF NOT EXISTS query_traces (
        trace_id VARCHAR PRIMARY KEY,
        normalized_question VARCHAR NOT NULL,
        intent VARCHAR NOT NULL,
        confidence DOUBLE NOT NULL,
        plan_summary_json VARCHAR NOT NULL,
        created_at VARCHAR NOT NULL
    )
    """,
]

_RAW_CACHE_COLUMNS = (
    "cache_key, endpoint_id, params_json, payload_json, fetched_at, expires_at, "
    "snapshot_date, parser_version, checksum, is_provisional"
)
_NIGHTLY_RUN_COLUMNS = (
    "run_id, slate_date, started_at, completed_at, status, finalized_by, error_summary"
)


class DuckDBDataStore(DataStore):
    """
    DataStore persisted in a DuckDB database file (or ``:memory:``).

    Args:
        db_path: Database file path; parent directories are created
    """

    backend_name = "duckdb"

    def __init__(self, db_path: str = IN_MEMORY_PATH):
        self.db_path = str(db_path)
        self._lock = threading.RLock()

        if self.db_path != IN_MEMORY_PATH:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            self._con = duckdb.connect(self.db_path)
            for statement in SCHEMA_STATEMENTS:
                self._con.execute(statement)
        except duckdb.Error as e:
            raise StoreError(
                f"Failed to open DuckDB store at {self.db_path}: {e}", operation="open"
            ) from e

        logger.info(f"DuckDB data store initialized at {self.db_path}")

    # ────────────────────────────────────────────────────────────────────
    # Helpers
    # ────────────────────────────────────────────────────────────────────

    @contextmanager
    def _guard(self, operation: str) -> Iterator[duckdb.DuckDBPyConnection]:
        """Serialize access and translate driver errors into StoreError."""
        with self._lock:
            try:
                yield self._con
            except duckdb.ConstraintException as e:
                raise StoreConstraintError(str(e), operation=operation) from e
            except duckdb.Error as e:
                raise StoreError(f"DuckDB {operation} failed: {e}", operation=operation) from e

    @staticmethod
    def _fetch_dicts(cursor: duckdb.DuckDBPyConnection) -> List[Dict[str, Any]]:
        columns = [column[0] for column in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def _fetch_one(self, con, sql: str, params: Sequence[Any]) -> Optional[Dict[str, Any]]:
        rows = self._fetch_dicts(con.execute(sql, list(params)))
        return rows[0] if rows else None

    # ────────────────────────────────────────────────────────────────────
    # Raw endpoint cache
    # ────────────────────────────────────────────────────────────────────

    @track_store_operation()
    def put_raw_endpoint_cache(self, data: PutRawEndpointCacheInput) -> RawEndpointCacheRecord:
        record = build_raw_cache_record(data)
        with self._guard("put_raw_endpoint_cache") as con:
            con.execute(
                f"""
                INSERT INTO raw_endpoint_cache ({_RAW_CACHE_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (cache_key) DO UPDATE SET
                    endpoint_id = excluded.endpoint_id,
                    params_json = excluded.params_json,
                    payload_json = excluded.payload_json,
                    fetched_at = excluded.fetched_at,
                    expires_at = excluded.expires_at,
                    snapshot_date = excluded.snapshot_date,
                    parser_version = excluded.parser_version,
                    checksum = excluded.checksum,
                    is_provisional = excluded.is_provisional
                """,
                [
                    record.cache_key,
                    record.endpoint_id,
                    record.params_json,
                    record.payload_json,
                    record.fetched_at,
                    record.expires_at,
                    record.snapshot_date,
                    record.parser_version,
                    record.checksum,
                    record.is_provisional,
                ],
            )
        logger.debug(f"Cached {record.endpoint_id} payload under {record.cache_key}")
        return record

    @track_store_operation()
    def get_raw_endpoint_cache(self, cache_key: str) -> Optional[RawEndpointCacheRecord]:
        with self._guard("get_raw_endpoint_cache") as con:
            row = self._fetch_one(
                con,
                f"SELECT {_RAW_CACHE_COLUMNS} FROM raw_endpoint_cache WHERE cache_key = ?",
                [cache_key],
            )
        return RawEndpointCacheRecord(**row) if row else None

    # ────────────────────────────────────────────────────────────────────
    # Nightly runs
    # ────────────────────────────────────────────────────────────────────

    @track_store_operation()
    def start_nightly_run(self, data: StartNightlyRunInput) -> NightlyRunRecord:
        with self._guard("start_nightly_run") as con:
            con.execute(
                "INSERT INTO nightly_runs (run_id, slate_date, started_at, status) "
                "VALUES (?, ?, ?, 'running')",
                [data.run_id, data.slate_date, data.started_at],
            )
        logger.info(f"Nightly run {data.run_id} started for slate {data.slate_date}")
        return NightlyRunRecord(
            run_id=data.run_id, slate_date=data.slate_date, started_at=data.started_at
        )

    @track_store_operation()
    def complete_nightly_run(self, data: CompleteNightlyRunInput) -> Optional[NightlyRunRecord]:
        with self._guard("complete_nightly_run") as con:
            existing = self._fetch_one(
                con, "SELECT status FROM nightly_runs WHERE run_id = ?", [data.run_id]
            )
            if existing is None:
                return None
            if existing["status"] != "running":
                raise StoreConstraintError(
                    f"Nightly run '{data.run_id}' is already {existing['status']}",
                    operation="complete_nightly_run",
                )
            con.execute(
                """
                UPDATE nightly_runs
                SET completed_at = ?, status = ?, finalized_by = ?, error_summary = ?
                WHERE run_id = ? AND status = 'running'
                """,
                [
                    data.completed_at,
                    data.status,
                    data.finalized_by,
                    data.error_summary,
                    data.run_id,
                ],
            )
            row = self._fetch_one(
                con,
                f"SELECT {_NIGHTLY_RUN_COLUMNS} FROM nightly_runs WHERE run_id = ?",
                [data.run_id],
            )
        logger.info(f"Nightly run {data.run_id} finished with status {data.status}")
        return NightlyRunRecord(**row) if row else None

    @track_store_operation()
    def get_nightly_run(self, run_id: str) -> Optional[NightlyRunRecord]:
        with self._guard("get_nightly_run") as con:
            row = self._fetch_one(
                con, f"SELECT {_NIGHTLY_RUN_COLUMNS} FROM nightly_runs WHERE run_id = ?", [run_id]
            )
        return NightlyRunRecord(**row) if row else None

    @track_store_operation()
    def get_latest_nightly_run_for_slate(self, slate_date: str) -> Optional[NightlyRunRecord]:
        with self._guard("get_latest_nightly_run_for_slate") as con:
            row = self._fetch_one(
                con,
                f"""
                SELECT {_NIGHTLY_RUN_COLUMNS} FROM nightly_runs
                WHERE slate_date = ?
                ORDER BY started_at DESC, created_seq ASC
                LIMIT 1
                """,
                [slate_date],
            )
        return NightlyRunRecord(**row) if row else None

    # ────────────────────────────────────────────────────────────────────
    # Trace provenance
    # ────────────────────────────────────────────────────────────────────

    @track_store_operation()
    def replace_trace_source_calls(
        self,
        trace_id: str,
        data_freshness_mode: DataFreshnessMode,
        source_calls: Sequence[TraceSourceCall],
    ) -> None:
        created_at = utc_now_iso()
        rows = [
            [
                trace_id,
                call.endpoint_id,
                call.cache_status,
                call.latency_ms,
                call.stale,
                call.is_provisional,
                call.parser_version,
                call.source_status,
                data_freshness_mode,
                created_at,
            ]
            for call in source_calls
        ]

        with self._guard("replace_trace_source_calls") as con:
            con.begin()
            try:
                con.execute("DELETE FROM query_trace_source_calls WHERE trace_id = ?", [trace_id])
                if rows:
                    con.executemany(
                        """
                        INSERT INTO query_trace_source_calls (
                            trace_id, endpoint_id, cache_status, latency_ms, stale,
                            is_provisional, parser_version, source_status,
                            data_freshness_mode, created_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        rows,
                    )
                con.commit()
            except duckdb.Error:
                con.rollback()
                raise

        logger.debug(f"Recorded {len(rows)} source call(s) for trace {trace_id}")

    @track_store_operation()
    def get_trace_source_calls(self, trace_id: str) -> TraceSourceBundle:
        with self._guard("get_trace_source_calls") as con:
            rows = self._fetch_dicts(
                con.execute(
                    """
                    SELECT endpoint_id, cache_status, latency_ms, stale, is_provisional,
                           parser_version, source_status, data_freshness_mode
                    FROM query_trace_source_calls
                    WHERE trace_id = ?
                    ORDER BY id ASC
                    """,
                    [trace_id],
                )
            )

        if not rows:
            return TraceSourceBundle()

        return TraceSourceBundle(
            data_freshness_mode=rows[0]["data_freshness_mode"],
            source_calls=[
                TraceSourceCall(**{k: v for k, v in row.items() if k != "data_freshness_mode"})
                for row in rows
            ],
        )

    @track_store_operation()
    def put_query_trace(self, trace: QueryTrace) -> QueryTrace:
        with self._guard("put_query_trace") as con:
            con.execute(
                """
                INSERT INTO query_traces (
                    trace_id, normalized_question, intent, confidence,
                    plan_summary_json, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT (trace_id) DO UPDATE SET
                    normalized_question = excluded.normalized_question,
                    intent = excluded.intent,
                    confidence = excluded.confidence,
                    plan_summary_json = excluded.plan_summary_json,
                    created_at = excluded.created_at
                """,
                [
                    trace.trace_id,
                    trace.normalized_question,
                    trace.intent,
                    trace.confidence,
                    json.dumps(trace.plan_summary, ensure_ascii=False),
                    trace.created_at,
                ],
            )
        return trace

    @track_store_operation()
    def get_query_trace(self, trace_id: str) -> Optional[QueryTrace]:
        with self._guard("get_query_trace") as con:
            row = self._fetch_one(
                con,
                """
                SELECT trace_id, normalized_question, intent, confidence,
                       plan_summary_json, created_at
                FROM query_traces WHERE trace_id = ?
                """,
                [trace_id],
            )
        if row is None:
            return None
        row["plan_summary"] = json.loads(row.pop("plan_summary_json"))
        return QueryTrace(**row)

    def close(self) -> None:
        with self._lock:
            try:
                self._con.close()
            except duckdb.Error as e:
                logger.warning(f"Error closing DuckDB store {self.db_path}: {e}")
