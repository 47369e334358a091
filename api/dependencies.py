"""
Shared per-process objects for the API, exposed as FastAPI dependencies.

create_app() installs the table extractor, metric registry and badge metric
source once; routes receive them through Depends() so tests can swap in
fakes with ``app.dependency_overrides``.
"""

from typing import Optional

from badge.sources import HttpMetricSource, LocalMetricSource, MetricSource
from opendata.tables import TableExtractor
from resolver.registry import MetricSpec, load_registry
from utils.config import AppConfig

_config: Optional[AppConfig] = None
_extractor: Optional[TableExtractor] = None
_registry: Optional[dict[str, MetricSpec]] = None
_metric_source: Optional[MetricSource] = None


def configure(config: AppConfig, extractor: Optional[TableExtractor] = None,
              registry: Optional[dict[str, MetricSpec]] = None) -> None:
    """Install the process-wide config, extractor, registry and badge source.

    The badge reads from the remote API when BADGE_API_BASE is set, through
    one pooled session for the life of the process; otherwise it resolves
    metrics in process through the shared extractor.
    """
    global _config, _extractor, _registry, _metric_source
    shutdown()
    _config = config
    _extractor = extractor or TableExtractor(config)
    _registry = registry or load_registry(config.metric_registry_path)
    if config.badge_api_base:
        _metric_source = HttpMetricSource(config.badge_api_base, registry=_registry)
    else:
        _metric_source = LocalMetricSource(_extractor, _registry)


def get_config() -> AppConfig:
    if _config is None:
        raise RuntimeError("API not configured; call configure() first")
    return _config


def get_extractor() -> TableExtractor:
    if _extractor is None:
        raise RuntimeError("API not configured; call configure() first")
    return _extractor


def get_registry() -> dict[str, MetricSpec]:
    if _registry is None:
        raise RuntimeError("API not configured; call configure() first")
    return _registry


def get_metric_source() -> MetricSource:
    if _metric_source is None:
        raise RuntimeError("API not configured; call configure() first")
    return _metric_source


def shutdown() -> None:
    """Release the HTTP sessions owned by the extractor and the badge source."""
    for owner in (_extractor, _metric_source):
        close = getattr(owner, "close", None)
        if close is not None:
            close()
