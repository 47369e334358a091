"""
Badge renderer: live figures with per-metric fallbacks, as an HTML fragment.

Each refresh asks the metric source for all five figures at once and waits
for every answer.  A metric whose fetch fails shows its compiled-in fallback;
the others are unaffected.  A row is either entirely live or entirely
fallback, never a mix of the two.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from jinja2 import Environment, FileSystemLoader, select_autoescape

from badge.sources import MetricSource, Reading
from utils.formatting import format_compact

logger = logging.getLogger(__name__)

# Order the metrics appear in the badge
METRIC_ORDER = ("deficit", "payroll", "nationalDebt", "interest", "procurement")

REFRESH_INTERVAL_SECONDS = 30 * 60

# Earlier than any real period label; as-of labels compare as plain strings.
AS_OF_SENTINEL = "1900-01-01"

LOADING_TEXT = "…"

# Update occasionally with fiscal_snapshot.py
FALLBACK_DATA: dict[str, Reading] = {
    "nationalDebt": Reading(value=1_287_000_000_000, as_of="2025-Q1", live=False),
    "interest": Reading(value=34_000_000_000, as_of="2025-03-31", live=False),
    "deficit": Reading(value=-23_000_000_000, as_of="2025-03-01", live=False),
    "procurement": Reading(value=4_700_000_000, as_of="2025-05-01", live=False),
    "payroll": Reading(value=12_000_000_000, as_of="2025-03-31", live=False),
}

I18N: dict[str, dict[str, str]] = {
    "en": {
        "nationalDebt": "National Debt",
        "interest": "Interest on Debt",
        "deficit": "Budgetary Deficit",
        "procurement": "Procurement Spend",
        "payroll": "Federal Payroll",
        "billions": "B",
        "millions": "M",
        "asOf": "as of",
    },
    "fr": {
        "nationalDebt": "Dette nationale",
        "interest": "Intérêts de la dette",
        "deficit": "Déficit budgétaire",
        "procurement": "Dépenses d’approvisionnement",
        "payroll": "Rémunération fédérale",
        "billions": " G$",
        "millions": " M$",
        "asOf": "au",
    },
}

THEMES = ("light", "dark", "auto")

_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)


@dataclass
class BadgeRow:
    key: str
    label: str
    text: str = LOADING_TEXT
    state: str = "loading"  # loading | rendered
    live: bool = False


@dataclass
class Badge:
    lang: str
    theme: str
    rows: list[BadgeRow] = field(default_factory=list)
    as_of: str = ""

    @property
    def as_of_text(self) -> str:
        if not self.as_of:
            return ""
        return f"{I18N[self.lang]['asOf']} {self.as_of}"


def _check_options(lang: str, theme: str) -> None:
    if lang not in I18N:
        raise ValueError(f"Unsupported language {lang!r}; expected one of {tuple(I18N)}")
    if theme not in THEMES:
        raise ValueError(f"Unsupported theme {theme!r}; expected one of {THEMES}")


def format_value(value: float, lang: str = "en") -> str:
    """Compact currency string in the badge language."""
    strings = I18N[lang]
    return format_compact(value, strings["billions"], strings["millions"])


def collect_readings(source: MetricSource,
                     keys: Iterable[str] = METRIC_ORDER) -> dict[str, Reading]:
    """Fetch every metric concurrently and wait for all of them.

    A failed fetch is logged and replaced by that metric's fallback.
    """
    keys = tuple(keys)

    def _fetch(key: str) -> Reading:
        try:
            return source.fetch(key)
        except Exception as exc:  # noqa: BLE001 - any failure means fallback
            logger.warning("%s fetch failed, using fallback: %s", key, exc)
            return FALLBACK_DATA[key]

    with ThreadPoolExecutor(max_workers=len(keys) or 1) as pool:
        readings = list(pool.map(_fetch, keys))
    return dict(zip(keys, readings))


def newest_as_of(readings: Iterable[Reading]) -> str:
    """Latest as-of label by plain string comparison."""
    newest = AS_OF_SENTINEL
    for reading in readings:
        if reading.as_of and reading.as_of > newest:
            newest = reading.as_of
    return newest


def loading_badge(lang: str = "en", theme: str = "auto") -> Badge:
    """Badge with every row in its loading placeholder state."""
    _check_options(lang, theme)
    strings = I18N[lang]
    return Badge(
        lang=lang,
        theme=theme,
        rows=[BadgeRow(key=k, label=strings[k]) for k in METRIC_ORDER],
    )


def build_badge(readings: dict[str, Reading], lang: str = "en",
                theme: str = "auto") -> Badge:
    """Move every row of a fresh badge to its rendered state."""
    badge = loading_badge(lang, theme)
    for row in badge.rows:
        reading = readings.get(row.key) or FALLBACK_DATA[row.key]
        row.text = format_value(reading.value, lang)
        row.state = "rendered"
        row.live = reading.live
    badge.as_of = newest_as_of(readings.get(k) or FALLBACK_DATA[k] for k in METRIC_ORDER)
    return badge


def render_badge(badge: Badge) -> str:
    """Render a badge as a self-contained HTML fragment."""
    return _env.get_template("badge.html").render(
        badge=badge,
        refresh_seconds=REFRESH_INTERVAL_SECONDS,
    )


def refresh_badge(source: MetricSource, lang: str = "en", theme: str = "auto") -> Badge:
    """One refresh cycle: collect all readings, then build the badge."""
    _check_options(lang, theme)
    return build_badge(collect_readings(source), lang, theme)
