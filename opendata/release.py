"""
Release locator for the Fiscal Monitor open-data package.

Asks the CKAN ``package_show`` API for the package metadata and picks the
newest "Data tables" ZIP resource.  The portal re-publishes the package every
month, so the URL is resolved on each table load rather than pinned.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import requests

from opendata.errors import UpstreamUnavailable
from utils.config import AppConfig
from utils.patterns import DATA_TABLES_NAME

logger = logging.getLogger(__name__)


def _parse_created(value: Any) -> datetime:
    """Parse a CKAN ``created`` timestamp; unparseable values sort oldest."""
    if not value:
        return datetime.min
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        return datetime.min
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def is_data_tables_zip(resource: dict) -> bool:
    """True for ZIP resources whose name mentions "Data tables"."""
    return (
        resource.get("format") == "ZIP"
        and bool(DATA_TABLES_NAME.search(str(resource.get("name") or "")))
    )


def select_latest_zip(resources: list[dict]) -> Optional[dict]:
    """Return the newest "Data tables" ZIP resource, or None.

    Ties on ``created`` keep the resource listed first.
    """
    zips = [r for r in resources if isinstance(r, dict) and is_data_tables_zip(r)]
    if not zips:
        return None
    # sorted() is stable with reverse=True, so equal timestamps keep list order
    zips = sorted(zips, key=lambda r: _parse_created(r.get("created")), reverse=True)
    return zips[0]


def fetch_package(session: requests.Session, config: AppConfig) -> dict:
    """Fetch the package metadata ``result`` object from the portal."""
    url = config.package_show_url
    try:
        resp = session.get(url, timeout=config.upstream_timeout)
        resp.raise_for_status()
    except requests.Timeout as e:
        raise UpstreamUnavailable(
            f"Timed out after {config.upstream_timeout:g}s fetching package metadata"
        ) from e
    except requests.RequestException as e:
        raise UpstreamUnavailable(f"Package metadata request failed: {e}") from e

    # requests.JSONDecodeError is both a ValueError and a RequestException
    try:
        meta = resp.json()
    except ValueError as e:
        raise UpstreamUnavailable("Package metadata is not valid JSON") from e

    if not isinstance(meta, dict) or not meta.get("success", True):
        raise UpstreamUnavailable(f"Portal rejected package_show for {config.package_id}")
    result = meta.get("result")
    if not isinstance(result, dict) or not isinstance(result.get("resources"), list):
        raise UpstreamUnavailable("Package metadata has no resource list")
    return result


def locate_latest_zip(session: requests.Session, config: AppConfig) -> str:
    """Return the download URL of the newest "Data tables" ZIP.

    Raises:
        UpstreamUnavailable: metadata fetch failed or no resource qualifies.
    """
    package = fetch_package(session, config)
    resource = select_latest_zip(package["resources"])
    if resource is None:
        raise UpstreamUnavailable(
            f"No 'Data tables' ZIP resource in package {config.package_id}"
        )
    url = resource.get("url")
    if not url:
        raise UpstreamUnavailable(
            f"Resource '{resource.get('name')}' has no download URL"
        )
    logger.debug("Latest data tables ZIP: %s (created %s)",
                 url, resource.get("created"))
    return url
