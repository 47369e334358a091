"""Tests for opendata/release.py — newest "Data tables" ZIP selection."""

import requests
import pytest

from opendata.errors import UpstreamUnavailable
from opendata.release import locate_latest_zip, select_latest_zip
from tests.helpers import (
    PACKAGE_SHOW_URL,
    FakeResponse,
    FakeSession,
    data_tables_resource,
    package_meta,
)


class TestSelectLatestZip:
    def test_newest_created_wins(self):
        older = data_tables_resource(url="https://x/t1.zip", created="2025-02-20T10:00:00")
        newer = data_tables_resource(url="https://x/t2.zip", created="2025-05-22T10:00:00")
        assert select_latest_zip([older, newer])["url"] == "https://x/t2.zip"
        assert select_latest_zip([newer, older])["url"] == "https://x/t2.zip"

    def test_ignores_non_zip_formats(self):
        csv = data_tables_resource(url="https://x/new.csv", created="2026-01-01T00:00:00",
                                   fmt="CSV")
        zipped = data_tables_resource(url="https://x/old.zip", created="2024-01-01T00:00:00")
        assert select_latest_zip([csv, zipped])["url"] == "https://x/old.zip"

    def test_format_match_is_exact(self):
        lower = data_tables_resource(fmt="zip")
        assert select_latest_zip([lower]) is None

    def test_name_match_is_case_sensitive_substring(self):
        other = data_tables_resource(url="https://x/a.zip", name="Fiscal Monitor - data tables")
        match = data_tables_resource(url="https://x/b.zip", name="FM (Data tables, March)",
                                     created="2020-01-01T00:00:00")
        assert select_latest_zip([other, match])["url"] == "https://x/b.zip"

    def test_tie_keeps_first_listed(self):
        a = data_tables_resource(url="https://x/a.zip", created="2025-05-22T10:00:00")
        b = data_tables_resource(url="https://x/b.zip", created="2025-05-22T10:00:00")
        assert select_latest_zip([a, b])["url"] == "https://x/a.zip"

    def test_unparseable_created_sorts_oldest(self):
        bad = data_tables_resource(url="https://x/bad.zip", created="not a date")
        good = data_tables_resource(url="https://x/good.zip", created="2019-01-01T00:00:00")
        assert select_latest_zip([bad, good])["url"] == "https://x/good.zip"

    def test_timezone_aware_and_naive_mix(self):
        aware = data_tables_resource(url="https://x/aware.zip", created="2025-05-22T12:00:00Z")
        naive = data_tables_resource(url="https://x/naive.zip", created="2025-05-21T12:00:00")
        assert select_latest_zip([naive, aware])["url"] == "https://x/aware.zip"

    def test_no_match_returns_none(self):
        assert select_latest_zip([]) is None


class TestLocateLatestZip:
    def _session(self, response):
        return FakeSession({PACKAGE_SHOW_URL: response})

    def test_returns_newest_url(self, config):
        meta = package_meta([
            data_tables_resource(url="https://x/t1.zip", created="2025-01-01T00:00:00"),
            data_tables_resource(url="https://x/t2.zip", created="2025-04-01T00:00:00"),
        ])
        session = self._session(FakeResponse(json_data=meta))
        assert locate_latest_zip(session, config) == "https://x/t2.zip"
        assert session.calls == [PACKAGE_SHOW_URL]

    def test_no_matching_resource_raises(self, config):
        meta = package_meta([data_tables_resource(fmt="PDF")])
        with pytest.raises(UpstreamUnavailable, match="No 'Data tables' ZIP"):
            locate_latest_zip(self._session(FakeResponse(json_data=meta)), config)

    def test_resource_without_url_raises(self, config):
        meta = package_meta([data_tables_resource(url="")])
        with pytest.raises(UpstreamUnavailable, match="no download URL"):
            locate_latest_zip(self._session(FakeResponse(json_data=meta)), config)

    def test_http_error_raises(self, config):
        with pytest.raises(UpstreamUnavailable):
            locate_latest_zip(self._session(FakeResponse(b"oops", status_code=503)), config)

    def test_timeout_raises_upstream_unavailable(self, config):
        session = self._session(requests.Timeout("slow"))
        with pytest.raises(UpstreamUnavailable, match="Timed out"):
            locate_latest_zip(session, config)

    def test_connection_error_raises(self, config):
        session = self._session(requests.ConnectionError("refused"))
        with pytest.raises(UpstreamUnavailable):
            locate_latest_zip(session, config)

    def test_invalid_json_raises(self, config):
        with pytest.raises(UpstreamUnavailable, match="not valid JSON"):
            locate_latest_zip(self._session(FakeResponse(b"<html>")), config)

    def test_requests_json_decode_error_reported_as_invalid_json(self, config):
        class HtmlResponse(FakeResponse):
            def json(self):
                raise requests.JSONDecodeError("Expecting value", "<html>", 0)

        with pytest.raises(UpstreamUnavailable, match="not valid JSON"):
            locate_latest_zip(self._session(HtmlResponse(b"<html>")), config)

    def test_unsuccessful_package_show_raises(self, config):
        resp = FakeResponse(json_data={"success": False, "error": {"message": "Not found"}})
        with pytest.raises(UpstreamUnavailable):
            locate_latest_zip(self._session(resp), config)

    def test_missing_resources_raises(self, config):
        resp = FakeResponse(json_data={"success": True, "result": {}})
        with pytest.raises(UpstreamUnavailable, match="no resource list"):
            locate_latest_zip(self._session(resp), config)
