"""
Endpoint catalog contract check against the published nba_api docs.

Each nba_api endpoint doc (``docs/nba_api/stats/endpoints/<id>.md``) embeds
a JSON blob with ``required_parameters`` and ``nullable_parameters`` and an
``Endpoint URL`` section. This module fetches those docs with httpx and
reports every disagreement with ``ENDPOINT_CATALOG``.

Run out-of-band (``scripts/check_endpoint_catalog.py`` or
``invoke check-catalog``); nothing on the planning path imports it.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urlparse

import httpx

from ..config import load_settings
from ..errors import CatalogContractError, UpstreamDocsError, retry_with_backoff
from ..schemas.catalog import EndpointCatalogEntry
from .catalog import list_endpoint_catalog

logger = logging.getLogger(__name__)

USER_AGENT = "HoopHubCatalogContractCheck/1.0"

_ENDPOINT_URL_PATTERN = re.compile(
    r"##### Endpoint URL\s*\n>\[(https://stats\.nba\.com/stats/[^\]]+)\]"
)


@dataclass
class EndpointDocContract:
    """Parameter contract published for one endpoint."""

    path: str
    required_params: List[str] = field(default_factory=list)
    optional_params: List[str] = field(default_factory=list)


# ============================================================================
# MARKDOWN PARSING
# ============================================================================


def parse_array_values(markdown: str, key: str) -> List[str]:
    """
    Read a ``"key": [...]`` array out of the doc's embedded JSON.

    Raises:
        ValueError: If the key is absent
    """
    match = re.search(rf'"{re.escape(key)}"\s*:\s*\[(.*?)\]\s*,', markdown, re.DOTALL)
    if not match:
        raise ValueError(f"Could not parse '{key}' from endpoint markdown.")

    values = []
    for raw in match.group(1).split(","):
        value = raw.strip().strip('"')
        if value:
            values.append(value)
    return values


def parse_endpoint_path(markdown: str) -> str:
    """URL path of the endpoint, e.g. ``/stats/leagueleaders``."""
    match = _ENDPOINT_URL_PATTERN.search(markdown)
    if not match:
        raise ValueError("Could not parse endpoint URL from markdown.")
    return urlparse(match.group(1)).path


def extract_doc_contract(markdown: str) -> EndpointDocContract:
    required = parse_array_values(markdown, "required_parameters")
    nullable = parse_array_values(markdown, "nullable_parameters")
    return EndpointDocContract(
        path=parse_endpoint_path(markdown),
        required_params=required,
        optional_params=[param for param in nullable if param not in required],
    )


# ============================================================================
# COMPARISON
# ============================================================================


def _normalized(values: Iterable[str]) -> List[str]:
    return sorted(set(values))


def params_diff_message(actual: Sequence[str], expected: Sequence[str]) -> str:
    """Describe what the catalog is missing and what it has in excess."""
    missing = [value for value in expected if value not in actual]
    unexpected = [value for value in actual if value not in expected]

    chunks = []
    if missing:
        chunks.append(f"missing: [{', '.join(missing)}]")
    if unexpected:
        chunks.append(f"unexpected: [{', '.join(unexpected)}]")
    return "; ".join(chunks)


def compare_entry_to_contract(
    entry: EndpointCatalogEntry, contract: EndpointDocContract
) -> List[str]:
    """List of human-readable mismatches (empty when the entry agrees)."""
    failures = []
    prefix = f"[{entry.endpoint_id}]"

    if contract.path != entry.path:
        failures.append(
            f"{prefix} path mismatch: catalog='{entry.path}' docs='{contract.path}'"
        )

    for label, actual, expected in (
        ("required_params", entry.required_params, contract.required_params),
        ("optional_params", entry.optional_params, contract.optional_params),
    ):
        actual_norm, expected_norm = _normalized(actual), _normalized(expected)
        if actual_norm != expected_norm:
            failures.append(
                f"{prefix} {label} mismatch ({params_diff_message(actual_norm, expected_norm)})"
            )

    return failures


# ============================================================================
# FETCHING
# ============================================================================


def is_transient_fetch_error(error: Exception) -> bool:
    """True for transport failures, timeouts, 429 and 5xx responses."""
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        return status == 429 or status >= 500
    return isinstance(error, (httpx.TransportError, asyncio.TimeoutError))


@retry_with_backoff(max_retries=2, base_delay=0.3, retry_if=is_transient_fetch_error)
async def fetch_endpoint_markdown(client: httpx.AsyncClient, base_url: str, endpoint_id: str) -> str:
    """
    Fetch one endpoint doc; up to 3 attempts with exponential backoff on
    transient failures.

    Raises:
        httpx.HTTPError: After the last failed attempt
    """
    response = await client.get(f"{base_url.rstrip('/')}/{endpoint_id}.md")
    response.raise_for_status()
    return response.text


async def _check_entry(
    client: httpx.AsyncClient, base_url: str, entry: EndpointCatalogEntry
) -> List[str]:
    try:
        markdown = await fetch_endpoint_markdown(client, base_url, entry.endpoint_id)
    except (httpx.HTTPError, asyncio.TimeoutError) as e:
        error = UpstreamDocsError(entry.endpoint_id, f"doc fetch failed: {e}")
        return [error.message]

    try:
        contract = extract_doc_contract(markdown)
    except ValueError as e:
        error = UpstreamDocsError(entry.endpoint_id, f"doc parse failed: {e}")
        return [error.message]

    return compare_entry_to_contract(entry, contract)


async def check_endpoint_catalog(
    entries: Optional[Sequence[EndpointCatalogEntry]] = None,
    base_url: Optional[str] = None,
    timeout: float = 20.0,
    client: Optional[httpx.AsyncClient] = None,
) -> List[str]:
    """
    Compare catalog entries with the upstream docs.

    Args:
        entries: Entries to check (defaults to the whole catalog)
        base_url: Docs base URL (defaults to HOOP_HUB_CATALOG_DOCS_URL)
        timeout: Per-request timeout in seconds
        client: Pre-built client (tests pass one with a MockTransport)

    Returns:
        Failure messages in catalog order; empty when everything matches
    """
    if entries is None:
        entries = list_endpoint_catalog()
    if base_url is None:
        base_url = load_settings().catalog_docs_url

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout, headers={"User-Agent": USER_AGENT})

    try:
        results = await asyncio.gather(*(_check_entry(client, base_url, entry) for entry in entries))
    finally:
        if owns_client:
            await client.aclose()

    failures = [failure for entry_failures in results for failure in entry_failures]
    logger.info(
        f"Catalog contract check: {len(entries)} endpoint(s), {len(failures)} failure(s)"
    )
    return failures


async def assert_endpoint_catalog(**kwargs) -> int:
    """
    Raise CatalogContractError on any mismatch; return the number of endpoints checked.
    """
    entries = kwargs.pop("entries", None) or list_endpoint_catalog()
    failures = await check_endpoint_catalog(entries=entries, **kwargs)
    if failures:
        raise CatalogContractError(failures)
    return len(entries)
