"""
Tests for content-addressed cache keys and payload checksums.
"""

import hashlib
import re

from hoop_hub.cache.cache_key import (
    build_raw_endpoint_cache_key,
    compute_payload_checksum,
    normalize_params,
    stable_stringify,
)

KEY_PATTERN = re.compile(r"^nba:[a-z0-9]+:v\d+:\d{4}-\d{2}-\d{2}:[0-9a-f]{64}$")


def test_stable_stringify_sorts_nested_keys():
    value = {"b": 1, "a": {"d": [3, 1], "c": None}}
    assert stable_stringify(value) == '{"a":{"c":null,"d":[3,1]},"b":1}'


def test_stable_stringify_keeps_non_ascii():
    assert stable_stringify({"player": "Jokić"}) == '{"player":"Jokić"}'


def test_normalize_params_keeps_list_order():
    assert normalize_params([{"z": 1, "y": 2}, 3]) == [{"y": 2, "z": 1}, 3]


def test_key_format():
    key = build_raw_endpoint_cache_key(
        "leagueleaders", {"Season": "2023-24", "StatCategory": "AST"}, "v1", "2026-02-25"
    )
    assert KEY_PATTERN.match(key)
    assert key.startswith("nba:leagueleaders:v1:2026-02-25:")


def test_key_hash_is_sha256_of_stable_params():
    params = {"Season": "2023-24", "PerMode": "PerGame"}
    expected = hashlib.sha256(stable_stringify(params).encode("utf-8")).hexdigest()
    key = build_raw_endpoint_cache_key("leagueleaders", params, "v1", "2026-02-25")
    assert key.rsplit(":", 1)[1] == expected


def test_key_ignores_insertion_order():
    a = {"Season": "2023-24", "PerMode": "PerGame", "Scope": {"b": 2, "a": 1}}
    b = {"Scope": {"a": 1, "b": 2}, "PerMode": "PerGame", "Season": "2023-24"}
    assert build_raw_endpoint_cache_key("x", a, "v1", "2026-02-25") == build_raw_endpoint_cache_key(
        "x", b, "v1", "2026-02-25"
    )


def test_key_changes_with_each_component():
    params = {"Season": "2023-24"}
    base = build_raw_endpoint_cache_key("leagueleaders", params, "v1", "2026-02-25")
    assert base != build_raw_endpoint_cache_key("playergamelog", params, "v1", "2026-02-25")
    assert base != build_raw_endpoint_cache_key("leagueleaders", params, "v2", "2026-02-25")
    assert base != build_raw_endpoint_cache_key("leagueleaders", params, "v1", "2026-02-26")
    assert base != build_raw_endpoint_cache_key("leagueleaders", {"Season": "2022-23"}, "v1", "2026-02-25")


def test_list_order_is_significant():
    a = build_raw_endpoint_cache_key("x", {"ids": [1, 2]}, "v1", "2026-02-25")
    b = build_raw_endpoint_cache_key("x", {"ids": [2, 1]}, "v1", "2026-02-25")
    assert a != b


def test_integral_floats_hash_like_ints():
    assert stable_stringify({"LastNGames": 10.0, "Pace": 98.5}) == '{"LastNGames":10,"Pace":98.5}'
    assert build_raw_endpoint_cache_key("x", {"LastNGames": 10}, "v1", "2026-02-25") == (
        build_raw_endpoint_cache_key("x", {"LastNGames": 10.0}, "v1", "2026-02-25")
    )
    assert stable_stringify([True, 1e21]) == "[true,1e+21]"


def test_payload_checksum():
    payload = '{"resultSets":[]}'
    assert compute_payload_checksum(payload) == hashlib.sha256(payload.encode("utf-8")).hexdigest()
    assert compute_payload_checksum(payload) != compute_payload_checksum(payload + " ")
