"""
Content-addressed cache keys and payload checksums.

Both the key format and the checksum algorithm are persistence contracts:
changing either orphans every cached row, so any change must come with a
parser-version bump in the endpoint catalog.

Key format:
    nba:{endpoint_id}:{parser_version}:{snapshot_date}:{sha256(stable params)}
"""

import hashlib
import json
from typing import Any, Mapping

CACHE_KEY_NAMESPACE = "nba"

# JSON.stringify switches to exponent notation from here on
_MAX_PLAIN_INTEGRAL = 1e21


def normalize_params(value: Any) -> Any:
    """
    Recursively sort mapping keys; keep sequence order.

    Integral floats below 1e21 are written as ints so that ``10.0`` and ``10``
    hash alike, as they do in JavaScript clients sharing the cache.

    Example:
        >>> normalize_params({"b": 1, "a": {"d": [3, 1], "c": None}})
        {'a': {'c': None, 'd': [3, 1]}, 'b': 1}
    """
    if isinstance(value, Mapping):
        return {str(key): normalize_params(value[key]) for key in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [normalize_params(item) for item in value]
    if isinstance(value, float) and value.is_integer() and abs(value) < _MAX_PLAIN_INTEGRAL:
        return int(value)
    return value


def stable_stringify(value: Any) -> str:
    """Canonical compact JSON for a parameter object."""
    return json.dumps(
        normalize_params(value),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def _sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def compute_payload_checksum(payload_json: str) -> str:
    """SHA-256 hex digest of the exact payload text that is stored."""
    return _sha256_hex(payload_json)


def build_raw_endpoint_cache_key(
    endpoint_id: str,
    params: Mapping[str, Any],
    parser_version: str,
    snapshot_date: str,
) -> str:
    """
    Generate a deterministic cache key for one upstream request.

    Structurally equal ``params`` produce the same key regardless of key
    insertion order.

    Example:
        >>> build_raw_endpoint_cache_key("leagueleaders", {"Season": "2024-25"}, "v1", "2026-02-25")
        'nba:leagueleaders:v1:2026-02-25:...'
    """
    params_hash = _sha256_hex(stable_stringify(params))
    return f"{CACHE_KEY_NAMESPACE}:{endpoint_id}:{parser_version}:{snapshot_date}:{params_hash}"
