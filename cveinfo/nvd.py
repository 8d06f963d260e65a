"""NVD CVE API 2.0 client with a local response cache.

A CVE's raw JSON is cached for the freshness window.  When a refresh
fails, a stale cache entry is used instead of giving up.
"""

import datetime as dt
import json
import logging
import time
from collections.abc import Callable

import requests
from tenacity import RetryCallState, Retrying, retry_if_result, stop_after_attempt, wait_incrementing

from .cache import CacheStore
from .downloaders import DEFAULT_HTTP_TIMEOUT, fetch, nvd_cve_url
from .models import VulnerabilityRecord
from .parsers import parse_vulnerability_record

DEFAULT_MAX_AGE = dt.timedelta(hours=1)


def classify_status(status_code: int) -> str:
    """Classify a non-200 NVD status code.

    Returns:
        One of ``rate_limited``, ``not_found``, ``unavailable``, or ``error``.
    """
    if status_code == 403:
        return "rate_limited"
    if status_code == 404:
        return "not_found"
    if status_code in (500, 503):
        return "unavailable"
    return "error"


def status_message(status_code: int, cve_id: str) -> str:
    """Human-readable diagnostic for a failed NVD request."""
    kind = classify_status(status_code)
    if kind == "rate_limited":
        return f"{cve_id} - request forbidden: try limiting the request frequency"
    if kind == "not_found":
        return f"{cve_id} not found in the NIST database"
    if kind == "unavailable":
        if status_code == 503:
            return f"Couldn't retrieve information about {cve_id} - NIST database temporarily unavailable"
        return f"Couldn't retrieve information about {cve_id} - internal server error in the NIST database"
    return f"Couldn't retrieve information about {cve_id} - status code {status_code}"


def _is_rate_limited(result: tuple[int, bytes]) -> bool:
    return result[0] == 403


def _last_result(retry_state: RetryCallState) -> tuple[int, bytes]:
    return retry_state.outcome.result()


class NvdClient:
    """Fetches single CVE records from the NVD, through a ``CacheStore``.

    Attributes:
        cache: Response cache.
        session: Requests session used for all calls.
        api_key: Optional NVD API key, sent as the ``apiKey`` header.
        max_age: Freshness window for cached responses.
        max_attempts: Total attempts when the NVD answers 403.
        backoff_seconds: Linear backoff multiplier; the n-th retry waits
            ``backoff_seconds * n``.
        verify: Verify TLS certificates.
    """

    def __init__(
        self,
        cache: CacheStore,
        session: requests.Session,
        api_key: str | None = None,
        *,
        max_age: dt.timedelta = DEFAULT_MAX_AGE,
        max_attempts: int = 3,
        backoff_seconds: float = 5.0,
        verify: bool = False,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ):
        self.cache = cache
        self.session = session
        self.api_key = api_key
        self.max_age = max_age
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.verify = verify
        self._sleep = sleep
        self.log = logger or logging.getLogger(__name__)

    def _headers(self) -> dict[str, str]:
        return {"apiKey": self.api_key} if self.api_key else {}

    def _download(self, cve_id: str) -> bytes | None:
        """Download a CVE's raw JSON, retrying while rate limited.

        Returns:
            Response body, or None if every attempt failed.
        """
        retryer = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=self.backoff_seconds, increment=self.backoff_seconds),
            retry=retry_if_result(_is_rate_limited),
            retry_error_callback=_last_result,
            sleep=self._sleep,
        )
        try:
            status_code, body = retryer(
                fetch,
                self.session,
                nvd_cve_url(cve_id),
                headers=self._headers(),
                timeout=DEFAULT_HTTP_TIMEOUT,
                verify=self.verify,
            )
        except requests.RequestException as e:
            self.log.error(f"Couldn't retrieve information about {cve_id} - {e}")
            return None

        if status_code != 200:
            self.log.error(status_message(status_code, cve_id))
            return None
        return body

    def _load_json(self, cve_id: str) -> object | None:
        exists = self.cache.exists(cve_id)
        stale = self.cache.is_stale(cve_id, self.max_age)

        if not exists or stale:
            body = self._download(cve_id)
            if body is not None:
                self.cache.write(cve_id, body)
                return json.loads(body)

        if not exists:
            return None
        if stale:
            self.log.warning(f"Using local cache from {self.cache.last_modified(cve_id)} for {cve_id}")
        return json.loads(self.cache.read(cve_id))

    def fetch_description(self, cve_id: str) -> VulnerabilityRecord | None:
        """Look up a CVE's description and CVSS v3.1 data.

        Uses a fresh cache entry when there is one; otherwise asks the NVD
        and falls back to a stale entry if that fails.

        Args:
            cve_id: The CVE identifier (e.g. ``CVE-2024-12345``).

        Returns:
            ``VulnerabilityRecord``, or None if the CVE could not be
            retrieved from either the NVD or the cache.
        """
        try:
            data = self._load_json(cve_id)
        except (OSError, ValueError) as e:
            self.log.error(f"Couldn't retrieve information about {cve_id} - {e}")
            return None
        if data is None:
            return None
        return parse_vulnerability_record(data, cve_id, logger=self.log)
