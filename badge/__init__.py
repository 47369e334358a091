"""
Fiscal badge rendering.

Collects the five published figures from a metric source, substitutes
compiled-in fallbacks per metric on failure and renders a themed HTML
fragment for the embeddable widget.
"""

from badge.renderer import (
    FALLBACK_DATA,
    METRIC_ORDER,
    REFRESH_INTERVAL_SECONDS,
    Badge,
    BadgeRow,
    build_badge,
    collect_readings,
    format_value,
    loading_badge,
    newest_as_of,
    refresh_badge,
    render_badge,
)
from badge.sources import HttpMetricSource, LocalMetricSource, Reading

__all__ = [
    "FALLBACK_DATA",
    "METRIC_ORDER",
    "REFRESH_INTERVAL_SECONDS",
    "Badge",
    "BadgeRow",
    "build_badge",
    "collect_readings",
    "format_value",
    "loading_badge",
    "newest_as_of",
    "refresh_badge",
    "render_badge",
    "HttpMetricSource",
    "LocalMetricSource",
    "Reading",
]
