"""Static data tables: endpoint catalog and metric registry."""

from .catalog import (
    ENDPOINT_CATALOG,
    endpoints_for_intent,
    get_endpoint_catalog_entry,
    list_endpoint_catalog,
    resolve_default_ttl_minutes_for_tier,
)
from .metric_registry import (
    METRIC_REGISTRY,
    get_metric_by_id,
    is_registered_alias,
    list_metric_definitions,
)

__all__ = [
    "ENDPOINT_CATALOG",
    "list_endpoint_catalog",
    "get_endpoint_catalog_entry",
    "endpoints_for_intent",
    "resolve_default_ttl_minutes_for_tier",
    "METRIC_REGISTRY",
    "list_metric_definitions",
    "get_metric_by_id",
    "is_registered_alias",
]
