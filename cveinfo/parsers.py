"""NVD and Debian tracker JSON parsing.

Pure functions for extracting structured data from an NVD CVE API 2.0
response and from Debian Security Tracker entries.  No I/O or network
calls — all inputs are in-memory data structures.
"""

import logging
import re
from typing import Any

from .models import CodenameInfo, VulnerabilityRecord

_CVE_ID_RE = re.compile(r"^CVE-(\d{4})-(\d+)$", flags=re.IGNORECASE)


def normalize_cve_id(cve_id: str) -> str | None:
    """Strip and upper-case a CVE ID.

    Args:
        cve_id: A string like ``cve-2024-12345``.

    Returns:
        Normalized ID (``CVE-2024-12345``), or None if invalid.
    """
    value = (cve_id or "").strip()
    if not _CVE_ID_RE.match(value):
        return None
    return value.upper()


def dig(data: Any, *path: str | int) -> Any:
    """Walk nested dicts and lists, returning None on any mismatch.

    Args:
        data: Parsed JSON value.
        *path: Dict keys and list indexes to follow.

    Returns:
        The value at ``path``, or None if any step is missing or of the
        wrong type.
    """
    cur = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(cur, list) or not -len(cur) <= step < len(cur):
                return None
            cur = cur[step]
        else:
            if not isinstance(cur, dict) or step not in cur:
                return None
            cur = cur[step]
    return cur


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _opt_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def extract_cvss_v31(cve: dict[str, Any]) -> tuple[str | None, str | None, float | None] | None:
    """Extract the first CVSS v3.1 metric of an NVD ``cve`` object.

    Args:
        cve: The ``vulnerabilities[0].cve`` dict.

    Returns:
        Tuple of (vector_string, base_severity, base_score) with missing
        members as None, or None if there is no v3.1 metric at all.
    """
    cvss = dig(cve, "metrics", "cvssMetricV31", 0, "cvssData")
    if not isinstance(cvss, dict):
        return None
    return (
        _opt_str(cvss.get("vectorString")),
        _opt_str(cvss.get("baseSeverity")),
        _opt_float(cvss.get("baseScore")),
    )


def pick_english_description(cve: dict[str, Any]) -> str | None:
    """Select the English description of an NVD ``cve`` object.

    Every ``lang == "en"`` entry overwrites the previous one, so with
    duplicates the last English entry wins.

    Args:
        cve: The ``vulnerabilities[0].cve`` dict.

    Returns:
        Description string, or None if no English entry exists.
    """
    description = None
    descs = dig(cve, "descriptions")
    if not isinstance(descs, list):
        return None
    for d in descs:
        if dig(d, "lang") == "en":
            description = _opt_str(dig(d, "value"))
    return description


def parse_vulnerability_record(
    data: Any,
    cve_id: str,
    logger: logging.Logger | None = None,
) -> VulnerabilityRecord:
    """Parse an NVD CVE API 2.0 response into a ``VulnerabilityRecord``.

    Missing or malformed parts leave the matching fields empty; they
    never abort the lookup.

    Args:
        data: Parsed JSON response body.
        cve_id: The queried CVE identifier.
        logger: Logger for parse diagnostics.

    Returns:
        ``VulnerabilityRecord`` (possibly with every field empty).
    """
    log = logger or logging.getLogger(__name__)
    record = VulnerabilityRecord(cve_id=cve_id)

    cve = dig(data, "vulnerabilities", 0, "cve")
    if not isinstance(cve, dict):
        log.error(f"Failed to get info for {cve_id}: CVE not found")
        return record

    cvss = extract_cvss_v31(cve)
    if cvss is None:
        log.error(f"Failed to get CVSS for {cve_id}")
    else:
        record.vector_string, record.severity, record.score = cvss

    record.description = pick_english_description(cve)
    return record


def parse_codename_info(releases: dict[str, Any], codename: str) -> CodenameInfo | None:
    """Build the status of one release from a tracker ``releases`` dict.

    Args:
        releases: The ``releases`` dict of a tracker CVE entry.
        codename: Debian release codename (e.g. ``bookworm``).

    Returns:
        ``CodenameInfo``, or None if the release is not listed.
    """
    release = releases.get(codename)
    if not isinstance(release, dict):
        return None
    return CodenameInfo(
        name=codename,
        status=_opt_str(release.get("status")),
        fixed_version=_opt_str(release.get("fixed_version")),
    )
