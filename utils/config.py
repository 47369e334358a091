"""Configuration for the Canada fiscal badge, loaded from environment variables."""

import os
from pathlib import Path
from typing import Optional


# Fiscal Monitor package on open.canada.ca; its "Data tables" ZIP resources
# hold the CSV tables read by the metric endpoints.
FISCAL_MONITOR_PACKAGE_ID = "7680320b-c837-4b67-b73f-9361c4a9716d"
OPENDATA_BASE_URL = "https://open.canada.ca/data"


class AppConfig:
    """Application-level configuration loaded from environment variables.

    All env vars have defaults so the server works out of the box.

    Environment variables:
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_PORT: API server port (default: 3000)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
        OPENDATA_BASE_URL: Open-data portal root (default: open.canada.ca/data)
        FISCAL_MONITOR_PACKAGE_ID: CKAN package holding the data tables
        UPSTREAM_TIMEOUT_SECONDS: Timeout for portal and ZIP requests (default: 30)
        UPSTREAM_MAX_RETRIES: Retries on upstream 5xx/429 (default: 0)
        TABLE_CACHE_TTL_SECONDS: Lifetime of extracted tables; 0 disables (default: 300)
        TABLE_CACHE_MAXSIZE: Maximum cached tables (default: 16)
        METRIC_REGISTRY_PATH: JSON file overriding metric label patterns
        BADGE_API_BASE: Remote API used by the badge; unset resolves in process
    """

    def __init__(self) -> None:
        self.api_host = os.getenv("APP_HOST", "127.0.0.1")
        self.api_port = int(os.getenv("APP_PORT", "3000"))
        self.log_format = os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )
        self.opendata_base_url = os.getenv(
            "OPENDATA_BASE_URL", OPENDATA_BASE_URL
        ).rstrip("/")
        self.package_id = os.getenv(
            "FISCAL_MONITOR_PACKAGE_ID", FISCAL_MONITOR_PACKAGE_ID
        )
        self.upstream_timeout = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "30"))
        self.upstream_max_retries = int(os.getenv("UPSTREAM_MAX_RETRIES", "0"))
        self.table_cache_ttl = float(os.getenv("TABLE_CACHE_TTL_SECONDS", "300"))
        self.table_cache_maxsize = int(os.getenv("TABLE_CACHE_MAXSIZE", "16"))
        raw_registry = os.getenv("METRIC_REGISTRY_PATH", "")
        self.metric_registry_path: Optional[Path] = (
            Path(raw_registry) if raw_registry else None
        )
        self.badge_api_base: Optional[str] = (
            os.getenv("BADGE_API_BASE", "").rstrip("/") or None
        )

    @property
    def package_show_url(self) -> str:
        """CKAN package_show endpoint for the configured package."""
        return (
            f"{self.opendata_base_url}/api/3/action/package_show"
            f"?id={self.package_id}"
        )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
