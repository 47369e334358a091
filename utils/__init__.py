"""Shared utilities for the Canada fiscal badge tools."""

# Caching
from utils.cache import SingleFlightCache, TTLCache

# Configuration
from utils.config import AppConfig

# Formatting
from utils.formatting import format_amount, format_compact

# HTTP sessions
from utils.http import RetryStrategy, SessionManager

# Pattern definitions
from utils.patterns import NON_NUMERIC, PERIOD_YEAR, table_entry_pattern

__all__ = [
    "SingleFlightCache",
    "TTLCache",
    "AppConfig",
    "format_amount",
    "format_compact",
    "RetryStrategy",
    "SessionManager",
    "NON_NUMERIC",
    "PERIOD_YEAR",
    "table_entry_pattern",
]
