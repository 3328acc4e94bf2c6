"""
Tests for the endpoint catalog, metric registry and their schemas.
"""

import pytest
from pydantic import ValidationError

from hoop_hub.data.catalog import (
    ENDPOINT_CATALOG,
    endpoints_for_intent,
    get_endpoint_catalog_entry,
    list_endpoint_catalog,
    resolve_default_ttl_minutes_for_tier,
)
from hoop_hub.data.metric_registry import get_metric_by_id, is_registered_alias, list_metric_definitions
from hoop_hub.schemas.catalog import (
    EndpointCatalogEntry,
    MetricDefinition,
    QueryIntent,
    VolatilityTier,
)


def test_catalog_ids_are_unique():
    ids = [entry.endpoint_id for entry in list_endpoint_catalog()]
    assert len(ids) == len(set(ids)) == 8


@pytest.mark.parametrize("entry", ENDPOINT_CATALOG, ids=lambda e: e.endpoint_id)
def test_catalog_entry_contract(entry):
    assert entry.path == f"/stats/{entry.endpoint_id}"
    assert not set(entry.required_params) & set(entry.optional_params)
    assert entry.ttl_minutes == resolve_default_ttl_minutes_for_tier(entry.volatility_tier)
    assert entry.parser_version == "v1"
    assert QueryIntent.UNSUPPORTED not in entry.supported_intents


def test_get_endpoint_catalog_entry():
    entry = get_endpoint_catalog_entry("leagueleaders")
    assert "StatCategory" in entry.required_params
    assert get_endpoint_catalog_entry("nope") is None


def test_endpoints_for_intent():
    ids = [entry.endpoint_id for entry in endpoints_for_intent(QueryIntent.TEAM_RANKING)]
    assert "leaguedashteamstats" in ids
    assert endpoints_for_intent(QueryIntent.UNSUPPORTED) == []


def test_list_endpoint_catalog_is_a_copy():
    entries = list_endpoint_catalog()
    entries.clear()
    assert len(list_endpoint_catalog()) == 8


def test_entry_rejects_overlapping_params():
    with pytest.raises(ValidationError):
        EndpointCatalogEntry(
            endpoint_id="x",
            path="/stats/x",
            required_params=["Season"],
            optional_params=["Season"],
            volatility_tier=VolatilityTier.LOW,
            ttl_minutes=1440,
        )


def test_entry_rejects_ttl_that_does_not_match_tier():
    with pytest.raises(ValidationError):
        EndpointCatalogEntry(
            endpoint_id="x",
            path="/stats/x",
            volatility_tier=VolatilityTier.HIGH,
            ttl_minutes=60,
        )


# ============================================================================
# METRIC REGISTRY
# ============================================================================


def test_registry_ids():
    assert [metric.id for metric in list_metric_definitions()] == ["ast", "reb", "pts", "drtg"]


def test_drtg_is_team_only():
    drtg = get_metric_by_id("drtg")
    assert drtg.allowed_intents == [QueryIntent.TEAM_RANKING]
    assert drtg.allowed_entity_scopes == ["team"]
    assert drtg.formula


def test_is_registered_alias():
    assert is_registered_alias("dimes")
    assert is_registered_alias("defensive rating")
    assert not is_registered_alias("steals")


def test_metric_definition_rejects_unsupported_intent():
    with pytest.raises(ValidationError):
        MetricDefinition(
            id="x",
            aliases=["x"],
            allowed_intents=[QueryIntent.UNSUPPORTED],
            allowed_entity_scopes=["player"],
        )
