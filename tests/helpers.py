"""
Shared test data and fakes: Fiscal Monitor-shaped CSV tables, an in-memory
release ZIP builder, a fake ``requests`` session serving canned portal
responses, and a dict-backed table source.
"""

import io
import json
import zipfile

import requests

from opendata.errors import TableNotFound

PACKAGE_SHOW_URL = (
    "https://open.canada.ca/data/api/3/action/package_show"
    "?id=7680320b-c837-4b67-b73f-9361c4a9716d"
)
ZIP_URL = "https://www.canada.ca/content/dam/fin/data/fm-2025-03-data-tables.zip"

# ── Table fixtures ────────────────────────────────────────────────────────────
# Row 2 column 2 holds the period label; column 2 of data rows holds the
# current-period value in $ millions.

TABLE_1_CSV = """\
Table 1,Summary statement of transactions,,
($ millions),,,

,,2025-Q1,2024-Q1
Budgetary revenues,,"459,512","447,800"
Program expenses excluding net actuarial losses,,"-431,000","-420,100"
Public debt charges,,"-34,012","-31,900"
Net actuarial losses,,"-17,500","-15,800"
Budgetary balance (deficit/surplus),,"-23,000","-20,000"
Non-budgetary transactions,,"1,200","900"
"""

TABLE_4_CSV = """\
Table 4,Expenses by object,,
($ millions),,,
,,2025-Q1,2024-Q1
"Personnel, excluding net actuarial losses",,"12,345","11,900"
Transportation and communications,,1,1
Information,,0.5,0.4
Professional and special services,,2,2
Rentals,,3,3
Repair and maintenance,,4,4
"Utilities, materials and supplies",,5,5
Acquisition of land and buildings,,6,6
"""

TABLE_7_CSV = """\
Table 7,Federal debt,,
($ millions),,,
,,March 2025,March 2024
Total liabilities,,"1,900,000","1,850,000"
Total financial assets,,"-500,000","-480,000"
Net debt,,"1,400,000","1,370,000"
Non-financial assets,,"-113,000","-110,000"
Federal debt (accumulated deficit),,"1,287,000","1,260,000"
"""

TABLE_10_CSV = """\
Table 10,Something else entirely,,
($ millions),,,
,,2025-Q1,2024-Q1
Budgetary balance (deficit/surplus),,"-999,999","-1"
"""


def build_zip(entries: dict[str, str | bytes], directories: tuple[str, ...] = ()) -> bytes:
    """Build an in-memory ZIP archive from ``{name: content}``."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for d in directories:
            zf.writestr(d.rstrip("/") + "/", "")
        for name, content in entries.items():
            zf.writestr(name, content)
    return buf.getvalue()


def release_zip() -> bytes:
    """A release archive with Table_1, Table_4, Table_7 and a decoy Table_10."""
    return build_zip(
        {
            "fm-2025-03/Table_10.csv": TABLE_10_CSV,
            "fm-2025-03/Table_1.csv": TABLE_1_CSV,
            "fm-2025-03/Table_4.csv": TABLE_4_CSV,
            "fm-2025-03/Table_7.csv": TABLE_7_CSV,
        },
        directories=("fm-2025-03",),
    )


def package_meta(resources: list[dict]) -> dict:
    return {"success": True, "result": {"id": "fm", "resources": resources}}


def data_tables_resource(url: str = ZIP_URL, created: str = "2025-05-22T12:00:00.000000",
                         name: str = "Fiscal Monitor March 2025 - Data tables",
                         fmt: str = "ZIP") -> dict:
    return {"format": fmt, "name": name, "created": created, "url": url}


# ── Fake HTTP ─────────────────────────────────────────────────────────────────

class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, content: bytes = b"", status_code: int = 200, json_data=None):
        if json_data is not None:
            content = json.dumps(json_data).encode("utf-8")
        self.content = content
        self.status_code = status_code

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def json(self):
        return json.loads(self.content)

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Serves canned responses by URL and records every GET.

    Route values may be a FakeResponse, an exception instance (raised), or a
    callable returning either.
    """

    def __init__(self, routes: dict | None = None):
        self.routes = dict(routes or {})
        self.calls: list[str] = []
        self.headers: dict = {}

    def get(self, url, timeout=None, **kwargs):
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(b"not found", status_code=404)
        if callable(route) and not isinstance(route, FakeResponse):
            route = route()
        if isinstance(route, BaseException):
            raise route
        return route

    def close(self) -> None:
        pass


class FakeTables:
    """Table source backed by a dict of CSV text."""

    def __init__(self, tables: dict[int, str] | None = None):
        self.tables = tables if tables is not None else {
            1: TABLE_1_CSV, 4: TABLE_4_CSV, 7: TABLE_7_CSV,
        }
        self.requested: list[int] = []

    def extract_table(self, table_number: int) -> str:
        self.requested.append(table_number)
        if table_number not in self.tables:
            raise TableNotFound(table_number)
        return self.tables[table_number]


