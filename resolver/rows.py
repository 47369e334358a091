"""Positional CSV parsing and label-based row lookup."""

import csv
import io
import re
from typing import Any, Optional, Sequence

Row = list[str]


def parse_rows(csv_text: str) -> list[Row]:
    """Parse CSV text into positional rows, skipping blank lines.

    No header semantics: row 0 is whatever the file starts with.
    """
    reader = csv.reader(io.StringIO(csv_text))
    return [row for row in reader if row and row != [""]]


def cell_text(cell: Any) -> str:
    """Coerce a cell to its trimmed string form."""
    return "" if cell is None else str(cell).strip()


def find_row(rows: Sequence[Sequence[Any]], pattern: re.Pattern) -> Optional[Sequence[Any]]:
    """Return the first row whose column-0 label matches *pattern*, else None."""
    for row in rows:
        if not row:
            continue
        if pattern.search(cell_text(row[0])):
            return row
    return None
