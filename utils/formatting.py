"""Output formatting utilities for the fiscal badge.

Provides reusable functions for:
- Compact currency display (billions / millions)
- Plain dollar amounts for CLI output
"""

from typing import Optional

BILLION = 1_000_000_000
MILLION = 1_000_000


def format_compact(value: float, billions_suffix: str = "B",
                   millions_suffix: str = "M") -> str:
    """Format a raw dollar amount as a compact string.

    Magnitudes of at least one billion get one decimal and the billions
    suffix; anything smaller is rounded to whole millions.  The sign is kept,
    so a negative fallback deficit renders as ``-23.0B``.

    Examples:
        format_compact(1_287_000_000_000) -> "1287.0B"
        format_compact(4_700_000) -> "5M"
        format_compact(34e9, " G$", " M$") -> "34.0 G$"
    """
    if abs(value) >= BILLION:
        return f"{value / BILLION:.1f}{billions_suffix}"
    return f"{value / MILLION:.0f}{millions_suffix}"


def format_amount(value: Optional[float], precision: int = 0) -> str:
    """Format a dollar amount with thousands separators.

    Examples:
        format_amount(23_000_000_000) -> "$23,000,000,000"
        format_amount(None) -> "-"
    """
    if value is None:
        return "-"
    return f"${value:,.{precision}f}"
