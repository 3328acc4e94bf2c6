"""
Tiered TTL and freshness classification for raw endpoint cache records.

TTL tiers:
- HIGH (15 min): live or same-day values (box scores, game logs)
- MEDIUM (3 hours): season aggregates that move after every game night
- LOW (24 hours): career totals, profiles

A record past its ``expires_at`` is still served, but flagged ``stale_hit``
so the caller can decide whether to refresh.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Union

from ..observability.metrics import record_cache_lookup
from ..schemas.catalog import TTL_MINUTES_BY_TIER, EndpointCatalogEntry, VolatilityTier
from ..schemas.store import CacheStatus, PutRawEndpointCacheInput, RawEndpointCacheRecord
from .cache_key import build_raw_endpoint_cache_key, compute_payload_checksum, stable_stringify

logger = logging.getLogger(__name__)

Timestamp = Union[str, datetime]


def to_iso_timestamp(value: datetime) -> str:
    """Render a datetime as millisecond-precision UTC, e.g. ``2026-02-25T05:00:00.000Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_iso_timestamp(value: Timestamp) -> datetime:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed); naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def utc_now_iso() -> str:
    return to_iso_timestamp(datetime.now(timezone.utc))


def ttl_minutes_for_tier(tier: VolatilityTier) -> int:
    return TTL_MINUTES_BY_TIER[VolatilityTier(tier)]


def compute_expires_at(fetched_at: Timestamp, tier: VolatilityTier) -> str:
    """Expiry timestamp for a payload fetched at ``fetched_at`` under ``tier``."""
    expires = parse_iso_timestamp(fetched_at) + timedelta(minutes=ttl_minutes_for_tier(tier))
    return to_iso_timestamp(expires)


def build_raw_cache_input(
    entry: EndpointCatalogEntry,
    params: Mapping[str, Any],
    payload: Any,
    fetched_at: Timestamp,
    snapshot_date: str,
    is_provisional: bool = False,
) -> PutRawEndpointCacheInput:
    """
    Assemble a cache write for one upstream response.

    The cache key, expiry and checksum are all derived from the catalog
    entry so callers cannot drift from the endpoint's parser version or TTL.

    Args:
        entry: Catalog entry of the endpoint that was called
        params: Request parameters sent upstream
        payload: Parsed JSON payload, or the raw JSON text
        fetched_at: When the payload was fetched
        snapshot_date: Slate date the payload belongs to ("2026-02-25")
        is_provisional: True for live data fetched before games were final

    Returns:
        PutRawEndpointCacheInput ready for ``DataStore.put_raw_endpoint_cache``
    """
    payload_json = payload if isinstance(payload, str) else stable_stringify(payload)
    fetched_iso = to_iso_timestamp(parse_iso_timestamp(fetched_at))

    return PutRawEndpointCacheInput(
        cache_key=build_raw_endpoint_cache_key(
            entry.endpoint_id, params, entry.parser_version, snapshot_date
        ),
        endpoint_id=entry.endpoint_id,
        params_json=stable_stringify(params),
        payload_json=payload_json,
        fetched_at=fetched_iso,
        expires_at=compute_expires_at(fetched_iso, entry.volatility_tier),
        snapshot_date=snapshot_date,
        parser_version=entry.parser_version,
        is_provisional=is_provisional,
        checksum=compute_payload_checksum(payload_json),
    )


def classify_cache_record(
    record: Optional[RawEndpointCacheRecord], now: Optional[Timestamp] = None
) -> CacheStatus:
    """
    Classify a cache lookup result.

    Returns:
        "miss" when there is no record, "hit" while ``now < expires_at``,
        otherwise "stale_hit"
    """
    status = _cache_status(record, now)
    record_cache_lookup(status)
    return status


def _cache_status(record: Optional[RawEndpointCacheRecord], now: Optional[Timestamp]) -> CacheStatus:
    if record is None:
        return "miss"

    current = parse_iso_timestamp(now) if now is not None else datetime.now(timezone.utc)
    if current < parse_iso_timestamp(record.expires_at):
        return "hit"

    logger.debug(f"Cache record {record.cache_key} expired at {record.expires_at}")
    return "stale_hit"


def payload_matches_checksum(record: RawEndpointCacheRecord) -> bool:
    """True when the stored payload still hashes to its recorded checksum."""
    return compute_payload_checksum(record.payload_json) == record.checksum


def load_payload(record: RawEndpointCacheRecord) -> Any:
    return json.loads(record.payload_json)
