"""Pre-compiled regex patterns for the fiscal data tools.

Usage:
    from utils.patterns import NON_NUMERIC, table_entry_pattern

    digits = NON_NUMERIC.sub("", "$1,234.5 M")
"""

import re

# Everything that is not part of a plain decimal number: currency symbols,
# thousands separators, unit suffixes, whitespace.
NON_NUMERIC = re.compile(r'[^0-9.\-]+')

# A period label carries a four-digit year: "2025-Q1", "April 2025",
# "2024-25", "Mars 2025".
PERIOD_YEAR = re.compile(r'(?<!\d)(?:19|20)\d{2}(?!\d)')

# CKAN resource name marker for the Fiscal Monitor CSV bundle (case-sensitive).
DATA_TABLES_NAME = re.compile(r'Data tables')


def table_entry_pattern(table_number: int) -> re.Pattern:
    """Return the archive-entry pattern for ``Table_<N>``.

    The trailing word boundary keeps ``Table_1`` from matching
    ``Table_10.csv``.
    """
    return re.compile(rf'Table_{int(table_number)}\b', re.IGNORECASE)
