"""
Metric registry: which table, which row labels, and how to combine them.

Row selection is driven entirely by this table so that wording changes in the
upstream CSVs are a configuration change.  Set ``METRIC_REGISTRY_PATH`` to a
JSON file to override entries, e.g.::

    {"payroll": {"patterns": ["^Personnel costs"]}}
"""

import json
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from resolver.normalize import DEFAULT_LAYOUT, TableLayout

AGGREGATIONS = ("single", "sum")


@dataclass(frozen=True)
class MetricSpec:
    """How to compute one published figure."""

    name: str
    endpoint: str
    table: int
    patterns: tuple[re.Pattern, ...]
    aggregation: str = "single"
    layout: TableLayout = DEFAULT_LAYOUT

    def __post_init__(self):
        if self.aggregation not in AGGREGATIONS:
            raise ValueError(
                f"{self.name}: aggregation must be one of {AGGREGATIONS}, "
                f"got {self.aggregation!r}"
            )
        if not self.patterns:
            raise ValueError(f"{self.name}: at least one label pattern is required")
        if self.aggregation == "single" and len(self.patterns) != 1:
            raise ValueError(f"{self.name}: 'single' metrics take exactly one pattern")


def _compile(*patterns: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


DEFAULT_METRICS: dict[str, MetricSpec] = {
    spec.name: spec for spec in (
        MetricSpec(
            name="nationalDebt",
            endpoint="national-debt",
            table=7,
            patterns=_compile(r"^Federal debt.*accumulated deficit\)?$"),
        ),
        MetricSpec(
            name="deficit",
            endpoint="deficit",
            table=1,
            patterns=_compile(r"^Budgetary balance.*deficit/surplus"),
        ),
        MetricSpec(
            name="interest",
            endpoint="interest",
            table=1,
            patterns=_compile(r"^Public debt charges"),
        ),
        MetricSpec(
            name="payroll",
            endpoint="payroll",
            table=4,
            patterns=_compile(r"^Personnel, excluding net actuarial losses"),
        ),
        MetricSpec(
            name="procurement",
            endpoint="procurement",
            table=4,
            patterns=_compile(
                r"professional\s+and\s+special\s+services?",
                r"rentals?",
                r"repair\s+and\s+maintenance",
                r"utilities?,?\s*materials?\s*(and)?\s*supplies?",
                r"transportation\s+and\s+communications?",
            ),
            aggregation="sum",
        ),
    )
}


def load_registry(path: Optional[Path] = None) -> dict[str, MetricSpec]:
    """Return the metric registry, applying JSON overrides from *path*.

    Overrides may change ``table``, ``patterns`` and ``aggregation`` of a
    known metric; unknown metric names are rejected.

    Raises:
        ValueError: unknown metric or invalid override.
        FileNotFoundError: *path* does not exist.
    """
    registry = dict(DEFAULT_METRICS)
    if path is None:
        return registry

    with open(path, "r", encoding="utf-8") as f:
        overrides = json.load(f)

    for name, fields in overrides.items():
        if name not in registry:
            raise ValueError(f"Unknown metric in {path}: {name!r}")
        changes = {}
        if "table" in fields:
            changes["table"] = int(fields["table"])
        if "patterns" in fields:
            changes["patterns"] = _compile(*fields["patterns"])
        if "aggregation" in fields:
            changes["aggregation"] = fields["aggregation"]
        registry[name] = replace(registry[name], **changes)
    return registry
