"""
Verify the endpoint catalog against the published nba_api endpoint docs.

For every catalog entry this fetches ``<docs>/<endpoint_id>.md`` and checks:
- the endpoint URL path
- required parameters
- nullable (optional) parameters

Usage:
    python scripts/check_endpoint_catalog.py [--docs-url URL] [--timeout SECONDS]

Exits 1 when any endpoint disagrees or cannot be fetched.
"""

import argparse
import asyncio
import sys

from hoop_hub.config import configure_logging, load_settings
from hoop_hub.data.catalog import list_endpoint_catalog
from hoop_hub.data.catalog_contracts import check_endpoint_catalog


def main() -> int:
    settings = load_settings()
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--docs-url", default=settings.catalog_docs_url)
    parser.add_argument("--timeout", type=float, default=settings.catalog_timeout)
    args = parser.parse_args()

    configure_logging(settings.log_level)
    entries = list_endpoint_catalog()
    failures = asyncio.run(
        check_endpoint_catalog(entries=entries, base_url=args.docs_url, timeout=args.timeout)
    )

    if failures:
        print("Endpoint catalog contract check failed:\n", file=sys.stderr)
        for failure in failures:
            print(f"- {failure}", file=sys.stderr)
        return 1

    print(f"Endpoint catalog contract check passed for {len(entries)} endpoints.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
