"""
Tests for TTL tiers, expiry and cache lookup classification.
"""

import json
from datetime import datetime, timezone

import pytest
from prometheus_client import REGISTRY

from hoop_hub.cache.cache_key import build_raw_endpoint_cache_key, compute_payload_checksum
from hoop_hub.cache.freshness import (
    build_raw_cache_input,
    classify_cache_record,
    compute_expires_at,
    load_payload,
    parse_iso_timestamp,
    payload_matches_checksum,
    to_iso_timestamp,
    ttl_minutes_for_tier,
)
from hoop_hub.data.catalog import get_endpoint_catalog_entry
from hoop_hub.schemas.catalog import VolatilityTier
from hoop_hub.store.base import build_raw_cache_record


@pytest.mark.parametrize(
    "tier,minutes",
    [(VolatilityTier.HIGH, 15), (VolatilityTier.MEDIUM, 180), (VolatilityTier.LOW, 1440)],
)
def test_ttl_minutes_for_tier(tier, minutes):
    assert ttl_minutes_for_tier(tier) == minutes
    assert ttl_minutes_for_tier(tier.value) == minutes


def test_iso_timestamp_format():
    value = datetime(2026, 2, 25, 5, 0, 0, 123456, tzinfo=timezone.utc)
    assert to_iso_timestamp(value) == "2026-02-25T05:00:00.123Z"
    assert parse_iso_timestamp("2026-02-25T05:00:00.123Z") == value.replace(microsecond=123000)


def test_naive_datetimes_are_utc():
    assert to_iso_timestamp(datetime(2026, 2, 25, 5, 0)) == "2026-02-25T05:00:00.000Z"


def test_compute_expires_at():
    assert compute_expires_at("2026-02-25T05:00:00.000Z", VolatilityTier.HIGH) == "2026-02-25T05:15:00.000Z"
    assert compute_expires_at("2026-02-25T23:00:00.000Z", VolatilityTier.LOW) == "2026-02-26T23:00:00.000Z"


def test_build_raw_cache_input_derives_everything_from_catalog():
    entry = get_endpoint_catalog_entry("leagueleaders")
    params = {"Season": "2023-24", "StatCategory": "AST"}
    payload = {"resultSet": {"rowSet": [[1, "Tyrese Haliburton", 10.9]]}}

    data = build_raw_cache_input(
        entry, params, payload, "2026-02-25T05:00:00.000Z", "2026-02-25", is_provisional=True
    )

    assert data.cache_key == build_raw_endpoint_cache_key(
        "leagueleaders", params, entry.parser_version, "2026-02-25"
    )
    assert data.endpoint_id == "leagueleaders"
    assert json.loads(data.params_json) == params
    assert json.loads(data.payload_json) == payload
    assert data.expires_at == compute_expires_at("2026-02-25T05:00:00.000Z", entry.volatility_tier)
    assert data.checksum == compute_payload_checksum(data.payload_json)
    assert data.is_provisional is True


def test_build_raw_cache_input_keeps_text_payload_verbatim():
    entry = get_endpoint_catalog_entry("playergamelog")
    data = build_raw_cache_input(entry, {}, '{"b": 1, "a": 2}', "2026-02-25T05:00:00Z", "2026-02-25")
    assert data.payload_json == '{"b": 1, "a": 2}'


def _record(expires_at="2026-02-25T05:15:00.000Z"):
    entry = get_endpoint_catalog_entry("leagueleaders")
    data = build_raw_cache_input(entry, {"Season": "2023-24"}, {"rows": []}, "2026-02-25T05:00:00.000Z", "2026-02-25")
    return build_raw_cache_record(data.model_copy(update={"expires_at": expires_at}))


def test_classify_cache_record():
    record = _record()
    assert classify_cache_record(None) == "miss"
    assert classify_cache_record(record, now="2026-02-25T05:10:00.000Z") == "hit"
    assert classify_cache_record(record, now="2026-02-25T05:15:00.000Z") == "stale_hit"
    assert classify_cache_record(record, now=datetime(2026, 3, 1, tzinfo=timezone.utc)) == "stale_hit"


def _lookup_count(status):
    value = REGISTRY.get_sample_value("hoop_hub_cache_lookups_total", {"cache_status": status})
    return value or 0.0


@pytest.mark.parametrize(
    "now,status",
    [(None, "miss"), ("2026-02-25T05:10:00.000Z", "hit"), ("2026-02-25T05:20:00.000Z", "stale_hit")],
)
def test_classify_cache_record_counts_lookups(now, status):
    record = None if status == "miss" else _record()
    before = _lookup_count(status)

    assert classify_cache_record(record, now=now) == status
    assert _lookup_count(status) == before + 1


def test_payload_checksum_helpers():
    record = _record()
    assert payload_matches_checksum(record)
    assert load_payload(record) == {"rows": []}
    tampered = record.model_copy(update={"payload_json": '{"rows":[1]}'})
    assert not payload_matches_checksum(tampered)
