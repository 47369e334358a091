"""Metric sources for the badge: the HTTP API or the in-process resolver."""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from resolver.registry import DEFAULT_METRICS, MetricSpec
from resolver.resolve import TableSource, resolve_metric
from utils.http import SessionManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reading:
    """One metric as displayed: raw dollars, period label, provenance."""

    value: float
    as_of: str
    live: bool = True


class MetricSource(Protocol):
    def fetch(self, key: str) -> Reading: ...


class HttpMetricSource:
    """Reads metrics from a running API (``{api_base}/{endpoint}``).

    Any network error, non-2xx status or malformed body raises; the badge
    treats that as a failure for this metric only.  Without an explicit
    session the source owns a pooled one, released by close().
    """

    def __init__(self, api_base: str = "", session: Optional[requests.Session] = None,
                 timeout: float = 10.0,
                 registry: Optional[dict[str, MetricSpec]] = None) -> None:
        self.api_base = api_base.rstrip("/")
        self._session_manager: Optional[SessionManager] = None
        if session is None:
            self._session_manager = SessionManager()
            session = self._session_manager.session
        self.session = session
        self.timeout = timeout
        self.registry = registry or DEFAULT_METRICS

    def url_for(self, key: str) -> str:
        return f"{self.api_base}/{self.registry[key].endpoint}"

    def fetch(self, key: str) -> Reading:
        resp = self.session.get(
            self.url_for(key),
            timeout=self.timeout,
            headers={"Cache-Control": "no-store"},
        )
        resp.raise_for_status()
        body = resp.json()
        try:
            return Reading(value=float(body["value"]), as_of=str(body["asOf"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed {key} response: {body!r}") from e

    def close(self) -> None:
        if self._session_manager is not None:
            self._session_manager.close()


class LocalMetricSource:
    """Resolves metrics in process through a table source."""

    def __init__(self, tables: TableSource,
                 registry: Optional[dict[str, MetricSpec]] = None) -> None:
        self.tables = tables
        self.registry = registry or DEFAULT_METRICS

    def fetch(self, key: str) -> Reading:
        result = resolve_metric(key, self.tables, self.registry)
        return Reading(value=result.value, as_of=result.as_of)
