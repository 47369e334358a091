"""
Open-data access for the Government of Canada Fiscal Monitor.

Locates the newest "Data tables" release on open.canada.ca and extracts
individual CSV tables from its ZIP archive.
"""

from opendata.errors import (
    FiscalDataError,
    ParseError,
    RowNotFound,
    TableNotFound,
    UpstreamUnavailable,
)
from opendata.release import locate_latest_zip, select_latest_zip
from opendata.tables import TableExtractor, extract_from_archive

__all__ = [
    "FiscalDataError",
    "ParseError",
    "RowNotFound",
    "TableNotFound",
    "UpstreamUnavailable",
    "locate_latest_zip",
    "select_latest_zip",
    "TableExtractor",
    "extract_from_archive",
]
