"""
Runtime configuration for Hoop Hub.

Settings come from environment variables (optionally via a ``.env`` file):

    HOOP_HUB_DB_PATH            DuckDB file, or ":memory:" (default .data/hoop-hub.duckdb)
    HOOP_HUB_STORE_BACKEND      auto | duckdb | memory (default auto)
    HOOP_HUB_LOG_LEVEL          logging level name (default INFO)
    HOOP_HUB_CATALOG_DOCS_URL   base URL of the nba_api endpoint docs
    HOOP_HUB_CATALOG_TIMEOUT    per-request timeout in seconds for doc fetches
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DB_PATH = str(Path(".data") / "hoop-hub.duckdb")
DEFAULT_CATALOG_DOCS_URL = (
    "https://raw.githubusercontent.com/swar/nba_api/master/docs/nba_api/stats/endpoints"
)
STORE_BACKENDS = ("auto", "duckdb", "memory")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """Resolved Hoop Hub settings."""

    db_path: str = DEFAULT_DB_PATH
    store_backend: str = "auto"
    log_level: str = "INFO"
    catalog_docs_url: str = DEFAULT_CATALOG_DOCS_URL
    catalog_timeout: float = 20.0


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build Settings from the environment.

    ``load_dotenv`` never overrides variables that are already set, so an
    exported variable always wins over the ``.env`` file.
    """
    load_dotenv(dotenv_path=env_file)

    backend = os.getenv("HOOP_HUB_STORE_BACKEND", "auto").strip().lower()
    if backend not in STORE_BACKENDS:
        raise ValueError(
            f"HOOP_HUB_STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}; got '{backend}'"
        )

    return Settings(
        db_path=os.getenv("HOOP_HUB_DB_PATH", DEFAULT_DB_PATH),
        store_backend=backend,
        log_level=os.getenv("HOOP_HUB_LOG_LEVEL", "INFO").upper(),
        catalog_docs_url=os.getenv("HOOP_HUB_CATALOG_DOCS_URL", DEFAULT_CATALOG_DOCS_URL).rstrip("/"),
        catalog_timeout=float(os.getenv("HOOP_HUB_CATALOG_TIMEOUT", "20")),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for CLI and script entry points."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
