"""
Pytest fixtures for the Canada fiscal badge tests.

Test data and fakes live in tests/helpers.py; this module wires them into
fixtures.  Nothing here touches the network.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tests.helpers import (  # noqa: E402
    PACKAGE_SHOW_URL,
    ZIP_URL,
    FakeResponse,
    FakeSession,
    FakeTables,
    data_tables_resource,
    package_meta,
    release_zip,
)
from utils.config import AppConfig  # noqa: E402

# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def config(monkeypatch) -> AppConfig:
    """AppConfig with default portal settings and no environment leakage."""
    for var in ("APP_HOST", "APP_PORT", "OPENDATA_BASE_URL", "FISCAL_MONITOR_PACKAGE_ID",
                "UPSTREAM_TIMEOUT_SECONDS", "UPSTREAM_MAX_RETRIES", "TABLE_CACHE_MAXSIZE",
                "TABLE_CACHE_TTL_SECONDS", "METRIC_REGISTRY_PATH", "BADGE_API_BASE",
                "APP_CORS_ORIGINS", "APP_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    return AppConfig.from_env()


@pytest.fixture
def portal_session() -> FakeSession:
    """Session serving one Data tables release and its ZIP."""
    return FakeSession({
        PACKAGE_SHOW_URL: FakeResponse(json_data=package_meta([data_tables_resource()])),
        ZIP_URL: FakeResponse(release_zip()),
    })


@pytest.fixture
def fake_tables() -> FakeTables:
    return FakeTables()
