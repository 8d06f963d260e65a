"""HTTP helpers for the NVD and Debian Security Tracker sources.

All network I/O is isolated here.  Callers receive the raw status code
and body and decide themselves what counts as success.
"""

import requests

from . import __version__

NVD_CVE_API_URL = "https://services.nvd.nist.gov/rest/json/cves/2.0"
DEBIAN_TRACKER_URL = "https://security-tracker.debian.org/tracker/data/json"

DEFAULT_HTTP_TIMEOUT = (10, 120)  # (connect, read)
BULK_HTTP_TIMEOUT = (10, 300)


def requests_session() -> requests.Session:
    """Create a requests session with the default headers.

    Returns:
        Configured ``requests.Session``.
    """
    s = requests.Session()
    s.headers.update(
        {
            "User-Agent": f"cveinfo/{__version__}",
            "Accept": "application/json",
        }
    )
    return s


def nvd_cve_url(cve_id: str) -> str:
    """Build the NVD CVE API 2.0 URL for a single CVE."""
    return f"{NVD_CVE_API_URL}?cveId={cve_id}"


def fetch(
    session: requests.Session,
    url: str,
    headers: dict[str, str] | None = None,
    timeout: tuple[int, int] = DEFAULT_HTTP_TIMEOUT,
    verify: bool = False,
) -> tuple[int, bytes]:
    """Perform a blocking GET and return the status code and raw body.

    Non-2xx responses are returned, not raised.

    Args:
        session: Requests session.
        url: URL to fetch.
        headers: Extra request headers.
        timeout: ``(connect, read)`` timeout in seconds.
        verify: Verify TLS certificates.

    Returns:
        Tuple of (status_code, body).

    Raises:
        requests.RequestException: on connection errors and timeouts.
    """
    r = session.get(url, headers=headers or {}, timeout=timeout, verify=verify)
    return r.status_code, r.content
