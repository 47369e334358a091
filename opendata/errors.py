"""Error taxonomy for the fiscal data pipeline.

Every failure between the open-data portal and the metric endpoints is one
of these; the API maps all of them to ``500 {"error": message}``.
"""


class FiscalDataError(Exception):
    """Base class for pipeline failures."""


class UpstreamUnavailable(FiscalDataError):
    """The portal metadata, the release ZIP, or its download is unusable."""


class TableNotFound(FiscalDataError):
    """No archive entry matches the requested table number."""

    def __init__(self, table_number: int):
        self.table_number = table_number
        super().__init__(f"Table_{table_number} CSV not found in ZIP")


class RowNotFound(FiscalDataError):
    """No row label matches the pattern."""

    def __init__(self, pattern: str, table_number: int | None = None):
        self.pattern = pattern
        self.table_number = table_number
        where = f" in Table_{table_number}" if table_number is not None else ""
        super().__init__(f"No row matching /{pattern}/{where}")


class ParseError(FiscalDataError):
    """A cell could not be coerced into a number or a period label."""
