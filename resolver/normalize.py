"""
Value normalisation for Fiscal Monitor cells.

Source tables report millions of dollars with thousands separators, currency
symbols and signed figures; the API reports non-negative raw dollars.
"""

from dataclasses import dataclass
from typing import Any, Sequence

from opendata.errors import ParseError
from utils.patterns import NON_NUMERIC, PERIOD_YEAR

MILLIONS = 1_000_000


@dataclass(frozen=True)
class TableLayout:
    """Fixed cell positions of a Fiscal Monitor table.

    ``as_of_cell`` is positional (third row, third column in every table
    published so far); it is not looked up by header text, so a layout
    change upstream surfaces as a ParseError from read_as_of().
    """

    as_of_cell: tuple[int, int] = (2, 2)
    value_column: int = 2


DEFAULT_LAYOUT = TableLayout()


def normalize(cell_text: Any) -> float:
    """Parse a cell as an absolute magnitude in the table's own units.

    Everything except digits, ``.`` and ``-`` is stripped and the sign is
    dropped: ``"$1,234.5 M"`` -> 1234.5, ``"-34.0"`` -> 34.0.

    Raises:
        ParseError: nothing numeric remains.
    """
    digits = NON_NUMERIC.sub("", "" if cell_text is None else str(cell_text))
    try:
        return abs(float(digits))
    except ValueError as e:
        raise ParseError(f"Cannot parse {cell_text!r} as a number") from e


def to_raw_units(millions: float) -> float:
    """Scale a value in millions to raw dollars."""
    return millions * MILLIONS


def value_cell(row: Sequence[Any], layout: TableLayout = DEFAULT_LAYOUT) -> Any:
    """Return the value column of a matched row."""
    if len(row) <= layout.value_column:
        label = row[0] if row else ""
        raise ParseError(f"Row {label!r} has no value in column {layout.value_column}")
    return row[layout.value_column]


def read_as_of(rows: Sequence[Sequence[Any]], layout: TableLayout = DEFAULT_LAYOUT) -> str:
    """Return the period label stored at the layout's as-of cell.

    Raises:
        ParseError: the cell is missing or does not look like a period.
    """
    r, c = layout.as_of_cell
    try:
        raw = rows[r][c]
    except IndexError:
        raise ParseError(f"Table has no as-of cell at row {r}, column {c}") from None
    as_of = "" if raw is None else str(raw)
    if not PERIOD_YEAR.search(as_of):
        raise ParseError(f"As-of cell ({r}, {c}) holds {as_of!r}, not a period label")
    return as_of
