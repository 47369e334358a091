"""
Metric resolution for the Fiscal Monitor tables.

Turns a table's CSV text into published figures: positional row parsing,
label-pattern lookup, magnitude normalisation and per-metric aggregation.
"""

from resolver.normalize import TableLayout, normalize, read_as_of, to_raw_units
from resolver.registry import DEFAULT_METRICS, MetricSpec, load_registry
from resolver.resolve import MetricResult, compute_metric, resolve_metric
from resolver.rows import find_row, parse_rows

__all__ = [
    "TableLayout",
    "normalize",
    "read_as_of",
    "to_raw_units",
    "DEFAULT_METRICS",
    "MetricSpec",
    "load_registry",
    "MetricResult",
    "compute_metric",
    "resolve_metric",
    "find_row",
    "parse_rows",
]
