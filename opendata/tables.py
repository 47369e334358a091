"""
Table extractor for the Fiscal Monitor data tables ZIP.

Downloads the newest release archive into memory and returns the decoded
text of the ``Table_<N>`` CSV entry.  Extracted tables are kept in a
short-lived single-flight cache keyed by ``(package_id, table_number)``; the
archive itself sits in a one-entry cache keyed by package, so the three
distinct tables behind the five endpoints share one metadata lookup and one
download.
"""

import io
import logging
import zipfile
from typing import Optional

import requests

from opendata.errors import TableNotFound, UpstreamUnavailable
from opendata.release import locate_latest_zip
from utils.cache import SingleFlightCache
from utils.config import AppConfig
from utils.http import RetryStrategy, SessionManager
from utils.patterns import table_entry_pattern

logger = logging.getLogger(__name__)


def find_table_entry(zf: zipfile.ZipFile, table_number: int) -> Optional[zipfile.ZipInfo]:
    """Return the first file entry whose name matches ``Table_<N>``."""
    pattern = table_entry_pattern(table_number)
    for info in zf.infolist():
        if info.is_dir():
            continue
        if pattern.search(info.filename):
            return info
    return None


def decode_table(raw: bytes) -> str:
    """Decode CSV bytes; UTF-8 (BOM stripped) first, cp1252 for legacy exports."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("cp1252", errors="replace")


def extract_from_archive(archive: bytes, table_number: int) -> str:
    """Return the text of ``Table_<N>`` from an in-memory ZIP archive.

    Raises:
        UpstreamUnavailable: the payload is not a ZIP archive.
        TableNotFound: no entry matches the table number.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(archive)) as zf:
            entry = find_table_entry(zf, table_number)
            if entry is None:
                raise TableNotFound(table_number)
            logger.debug("Reading %s from release archive", entry.filename)
            return decode_table(zf.read(entry))
    except zipfile.BadZipFile as e:
        raise UpstreamUnavailable(f"Release download is not a ZIP archive: {e}") from e


class TableExtractor:
    """Fetches Fiscal Monitor tables by number.

    Usage::

        extractor = TableExtractor(AppConfig.from_env())
        csv_text = extractor.extract_table(7)
    """

    def __init__(self, config: Optional[AppConfig] = None,
                 session: Optional[requests.Session] = None,
                 cache: Optional[SingleFlightCache] = None) -> None:
        self.config = config or AppConfig.from_env()
        self._session_manager: Optional[SessionManager] = None
        if session is None:
            self._session_manager = SessionManager(
                RetryStrategy(max_retries=self.config.upstream_max_retries)
            )
            session = self._session_manager.session
        self.session = session
        self.cache = cache or SingleFlightCache(
            maxsize=self.config.table_cache_maxsize,
            ttl_seconds=self.config.table_cache_ttl,
        )
        self.archives = SingleFlightCache(
            maxsize=1 if self.config.table_cache_maxsize > 0 else 0,
            ttl_seconds=self.config.table_cache_ttl,
        )

    def locate_latest_zip(self) -> str:
        return locate_latest_zip(self.session, self.config)

    def download_archive(self, url: str) -> bytes:
        """Download the release ZIP into memory."""
        try:
            resp = self.session.get(url, timeout=self.config.upstream_timeout)
            resp.raise_for_status()
        except requests.Timeout as e:
            raise UpstreamUnavailable(
                f"Timed out after {self.config.upstream_timeout:g}s downloading {url}"
            ) from e
        except requests.RequestException as e:
            raise UpstreamUnavailable(f"Release download failed: {e}") from e
        logger.info("Downloaded release archive %s (%d bytes)", url, len(resp.content))
        return resp.content

    def latest_archive(self) -> bytes:
        """Bytes of the newest release ZIP, shared by every table lookup."""
        return self.archives.get_or_load(self.config.package_id, self._fetch_archive)

    def _fetch_archive(self) -> bytes:
        url = self.locate_latest_zip()
        archive = self.download_archive(url)
        # Checked before caching so a bad payload is not reused
        if not zipfile.is_zipfile(io.BytesIO(archive)):
            raise UpstreamUnavailable(f"Release download is not a ZIP archive: {url}")
        return archive

    def _load(self, table_number: int) -> str:
        return extract_from_archive(self.latest_archive(), table_number)

    def extract_table(self, table_number: int) -> str:
        """Return the raw CSV text of ``Table_<table_number>``.

        Raises:
            UpstreamUnavailable: metadata or archive fetch failed.
            TableNotFound: the archive has no matching entry.
        """
        key = (self.config.package_id, int(table_number))
        return self.cache.get_or_load(key, lambda: self._load(table_number))

    def close(self) -> None:
        if self._session_manager is not None:
            self._session_manager.close()
