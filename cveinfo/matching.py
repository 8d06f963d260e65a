"""Reconcile a user-supplied package name with the tracker's package names."""

import logging

from .models import TrackerInfo


def match_package(
    packages: list[TrackerInfo],
    name: str,
    cve_id: str,
    logger: logging.Logger | None = None,
) -> TrackerInfo | None:
    """Pick the package matching ``name``.

    Tiers, in order, first hit wins:

    1. exact name equality;
    2. the tracker's package name contains ``name``;
    3. ``name`` contains the tracker's package name.

    Within a tier the first package in iteration order wins.  Partial
    (tier 2 and 3) matches are logged as warnings.

    Args:
        packages: Tracker results for ``cve_id``.
        name: Package name given by the user.
        cve_id: The CVE identifier, for diagnostics.
        logger: Logger for partial-match warnings.

    Returns:
        The matching ``TrackerInfo``, or None.
    """
    log = logger or logging.getLogger(__name__)

    for info in packages:
        if info.package_name == name:
            return info

    for info in packages:
        if name in info.package_name:
            log.warning(
                f"Given CVE ID {cve_id} matching package name only partially: {name} ~= {info.package_name}"
            )
            return info

    for info in packages:
        if info.package_name in name:
            log.warning(
                f"Given CVE ID {cve_id} matching package name only partially: {info.package_name} ~= {name}"
            )
            return info

    return None


def select_packages(
    packages: list[TrackerInfo],
    name: str | None,
    cve_id: str,
    logger: logging.Logger | None = None,
) -> list[TrackerInfo]:
    """Narrow tracker results down to the package the user asked for.

    Without a name, or with at most one result, everything is returned
    unchanged.

    Returns:
        List of packages to report; empty if ``name`` matched nothing.
    """
    if not name or len(packages) <= 1:
        return list(packages)

    log = logger or logging.getLogger(__name__)
    match = match_package(packages, name, cve_id, logger=log)
    if match is None:
        log.error(f"Given CVE ID {cve_id} not found in the given package: {name}")
        return []
    return [match]
