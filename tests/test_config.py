"""Tests for utils/config.py — environment-driven settings."""
from pathlib import Path

from utils.config import FISCAL_MONITOR_PACKAGE_ID, AppConfig


class TestAppConfigDefaults:
    def test_defaults(self, config):
        assert config.api_host == "127.0.0.1"
        assert config.api_port == 3000
        assert config.package_id == FISCAL_MONITOR_PACKAGE_ID
        assert config.upstream_timeout == 30.0
        assert config.upstream_max_retries == 0
        assert config.table_cache_ttl == 300.0
        assert config.cors_origins == ["*"]
        assert config.metric_registry_path is None
        assert config.badge_api_base is None

    def test_package_show_url(self, config):
        assert config.package_show_url == (
            "https://open.canada.ca/data/api/3/action/package_show"
            f"?id={FISCAL_MONITOR_PACKAGE_ID}"
        )


class TestAppConfigEnv:
    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("OPENDATA_BASE_URL", "http://mirror.local/data/")
        monkeypatch.setenv("FISCAL_MONITOR_PACKAGE_ID", "abc")
        monkeypatch.setenv("TABLE_CACHE_TTL_SECONDS", "0")
        monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "2.5")
        cfg = AppConfig.from_env()
        assert cfg.package_show_url == (
            "http://mirror.local/data/api/3/action/package_show?id=abc"
        )
        assert cfg.table_cache_ttl == 0
        assert cfg.upstream_timeout == 2.5

    def test_cors_origins_list(self, monkeypatch):
        monkeypatch.setenv("APP_CORS_ORIGINS", "https://a.ca, https://b.ca,")
        assert AppConfig.from_env().cors_origins == ["https://a.ca", "https://b.ca"]

    def test_badge_api_base_trailing_slash(self, monkeypatch):
        monkeypatch.setenv("BADGE_API_BASE", "https://fiscal.example.ca/")
        assert AppConfig.from_env().badge_api_base == "https://fiscal.example.ca"

    def test_registry_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("METRIC_REGISTRY_PATH", str(tmp_path / "m.json"))
        assert AppConfig.from_env().metric_registry_path == Path(tmp_path / "m.json")
