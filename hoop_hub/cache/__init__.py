"""Cache key derivation and freshness policy for raw endpoint payloads."""

from .cache_key import (
    CACHE_KEY_NAMESPACE,
    build_raw_endpoint_cache_key,
    compute_payload_checksum,
    normalize_params,
    stable_stringify,
)
from .freshness import (
    build_raw_cache_input,
    classify_cache_record,
    compute_expires_at,
    load_payload,
    parse_iso_timestamp,
    payload_matches_checksum,
    to_iso_timestamp,
    ttl_minutes_for_tier,
    utc_now_iso,
)

__all__ = [
    "CACHE_KEY_NAMESPACE",
    "build_raw_endpoint_cache_key",
    "compute_payload_checksum",
    "normalize_params",
    "stable_stringify",
    "build_raw_cache_input",
    "classify_cache_record",
    "compute_expires_at",
    "load_payload",
    "parse_iso_timestamp",
    "payload_matches_checksum",
    "to_iso_timestamp",
    "ttl_minutes_for_tier",
    "utc_now_iso",
]
