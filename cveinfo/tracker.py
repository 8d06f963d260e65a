"""Debian Security Tracker client.

The tracker publishes one large JSON document mapping
``package -> CVE -> {"releases": {codename -> {status, fixed_version}}}``.
It is downloaded wholesale, cached, and parsed once per instance.
"""

import datetime as dt
import json
import logging
from typing import Any

import requests

from .cache import CacheStore
from .downloaders import BULK_HTTP_TIMEOUT, DEBIAN_TRACKER_URL, fetch
from .models import TrackerInfo
from .parsers import parse_codename_info

TRACKER_CACHE_KEY = "debian-tracker.json"
DEFAULT_MAX_AGE = dt.timedelta(hours=1)


class TrackerUnavailableError(RuntimeError):
    """Raised when the tracker database can be neither downloaded nor read locally."""


class DebianSecurityTracker:
    """Per-release patch status lookups against the Debian Security Tracker.

    The database is loaded in the constructor: refreshed if the cached copy
    is missing or stale, and the local copy used if the refresh fails.

    Attributes:
        codename: Optional Debian release to restrict results to.
        database: Parsed tracker database.
    """

    def __init__(
        self,
        cache: CacheStore,
        session: requests.Session,
        codename: str | None = None,
        *,
        max_age: dt.timedelta = DEFAULT_MAX_AGE,
        verify: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.cache = cache
        self.session = session
        self.codename = codename
        self.max_age = max_age
        self.verify = verify
        self.log = logger or logging.getLogger(__name__)
        self.database: dict[str, Any] = self._load()

    def _download(self) -> bytes | None:
        self.log.info("Downloading debian security tracker database...")
        try:
            status_code, body = fetch(self.session, DEBIAN_TRACKER_URL, timeout=BULK_HTTP_TIMEOUT, verify=self.verify)
        except requests.RequestException as e:
            self.log.error(f"Failed to update debian security tracker database: {e}")
            return None
        if status_code != 200:
            self.log.error(f"Failed to download debian security tracker database ({status_code})")
            return None
        return body

    def _load(self) -> dict[str, Any]:
        body = None
        if self.cache.is_stale(TRACKER_CACHE_KEY, self.max_age):
            body = self._download()
            if body is not None:
                self.cache.write(TRACKER_CACHE_KEY, body)
            elif not self.cache.exists(TRACKER_CACHE_KEY):
                raise TrackerUnavailableError(
                    f"No debian security tracker database available in {self.cache.root}"
                )
            else:
                self.log.warning(
                    "Using local debian security tracker database from "
                    f"{self.cache.last_modified(TRACKER_CACHE_KEY)}"
                )

        try:
            if body is None:
                body = self.cache.read(TRACKER_CACHE_KEY)
            return json.loads(body)
        except (OSError, ValueError) as e:
            raise TrackerUnavailableError(f"Cannot read debian security tracker database: {e}") from e

    def get_tracker_info(self, cve_id: str) -> list[TrackerInfo]:
        """Find every package the tracker lists for a CVE.

        Packages are returned in database order.  With a codename filter only
        that release is reported; a package without it still appears, with no
        codenames.  Any malformed entry discards the whole result.

        Args:
            cve_id: The CVE identifier.

        Returns:
            List of ``TrackerInfo``, empty if the CVE is unknown or the scan
            failed.
        """
        infos: list[TrackerInfo] = []
        try:
            for package_name, cves in self.database.items():
                if cve_id not in cves:
                    continue

                info = TrackerInfo(package_name=package_name, cve_id=cve_id)
                releases = cves[cve_id].get("releases")
                if releases is not None:
                    codenames = [self.codename] if self.codename else list(releases)
                    for codename in codenames:
                        codename_info = parse_codename_info(releases, codename)
                        if codename_info is None:
                            self.log.warning(f"Given Debian release not found: {codename}")
                            continue
                        info.codenames.append(codename_info)
                infos.append(info)
        except Exception as e:
            self.log.error(f"Error occurred while searching for {cve_id} in the debian security tracker: {e}")
            return []
        return infos
