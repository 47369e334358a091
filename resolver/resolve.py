"""
Metric resolution: table -> matched rows -> normalised value.

Runs synchronously per call; the only state shared between calls is the
extractor's table cache.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from opendata.errors import RowNotFound
from resolver.normalize import normalize, read_as_of, to_raw_units, value_cell
from resolver.registry import DEFAULT_METRICS, MetricSpec
from resolver.rows import Row, find_row, parse_rows

logger = logging.getLogger(__name__)


class TableSource(Protocol):
    def extract_table(self, table_number: int) -> str: ...


@dataclass(frozen=True)
class MetricResult:
    """A published figure in raw dollars with its reporting period."""

    value: float
    as_of: str

    def to_dict(self) -> dict:
        return {"asOf": self.as_of, "value": self.value}


def compute_metric(spec: MetricSpec, rows: list[Row]) -> MetricResult:
    """Compute *spec* from already-parsed table rows.

    Matched magnitudes are summed in the table's units (millions) and scaled
    once at the end.

    Raises:
        RowNotFound: a label pattern matched no row.
        ParseError: a value or the as-of cell could not be parsed.
    """
    total = 0.0
    for pattern in spec.patterns:
        row = find_row(rows, pattern)
        if row is None:
            raise RowNotFound(pattern.pattern, spec.table)
        magnitude = normalize(value_cell(row, spec.layout))
        logger.debug("%s: %r -> %s", spec.name, row[0], magnitude)
        total += magnitude
    as_of = read_as_of(rows, spec.layout)
    return MetricResult(value=to_raw_units(total), as_of=as_of)


def resolve_metric(name: str, source: TableSource,
                   registry: dict[str, MetricSpec] | None = None) -> MetricResult:
    """Fetch the metric's table from *source* and compute its value.

    Raises:
        KeyError: unknown metric name.
        FiscalDataError: any pipeline failure.
    """
    spec = (registry or DEFAULT_METRICS)[name]
    rows = parse_rows(source.extract_table(spec.table))
    result = compute_metric(spec, rows)
    logger.info("Resolved %s = %.0f (as of %s)", name, result.value, result.as_of)
    return result
