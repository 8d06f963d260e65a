"""Command line entry point.

Usage::

    cveinfo [OPTIONS] <CVE ID> [package-name]

Exit status is 0 when the NVD lookup succeeded (tracker failures are only
logged), 1 when the CVE could not be retrieved, and 2 on usage or
configuration errors.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from . import __version__
from .cache import CacheStore
from .config import APP_NAME, CveInfoConfig, find_config, load_config
from .downloaders import requests_session
from .matching import select_packages
from .nvd import NvdClient
from .parsers import normalize_cve_id
from .report import render_description, render_tracker_info
from .tracker import DebianSecurityTracker, TrackerUnavailableError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Print NVD details and Debian patch status for a CVE.",
    )
    p.add_argument("cve_id", nargs="?", help="CVE identifier, e.g. CVE-2021-44228")
    p.add_argument("package", nargs="?", help="Package name to narrow the Debian tracker output")
    p.add_argument("-v", "--no-cvss", action="store_true", help="Don't print the CVSS block")
    p.add_argument("-c", "--codename", help="Use a specific Debian release codename")
    p.add_argument("-k", "--api-key", help="NIST NVD API key (default: $NVD_API_KEY)")
    p.add_argument("--config", type=Path, help="Path to a YAML config file")
    p.add_argument("--cache-dir", type=Path, help="Cache directory (default: $XDG_CACHE_HOME/cveinfo)")
    p.add_argument("--max-age", type=int, dest="max_age_seconds", help="Cache freshness window in seconds")
    p.add_argument("--clear-cache", action="store_true", help="Delete all cached responses first")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def _setup_logging(debug: bool) -> None:
    """Attach a single stderr handler to the package logger."""
    pkg_logger = logging.getLogger(APP_NAME)
    pkg_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if not pkg_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        pkg_logger.addHandler(handler)


def _load_settings(args: argparse.Namespace) -> CveInfoConfig:
    """Merge the config file (if any) with command line overrides."""
    path = args.config or find_config()
    base = load_config(path) if path else CveInfoConfig()

    overrides: dict[str, Any] = {}
    for name in ("api_key", "codename", "cache_dir", "max_age_seconds"):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    if args.no_cvss:
        overrides["no_cvss"] = True
    if not overrides:
        return base
    return CveInfoConfig.model_validate({**base.model_dump(), **overrides})


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.debug)

    try:
        config = _load_settings(args)
    except (OSError, ValidationError, yaml.YAMLError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    cache = CacheStore(config.resolved_cache_dir())
    if args.clear_cache:
        removed = cache.clear()
        logger.info(f"Removed {removed} cached file(s) from {cache.root}")
        if not args.cve_id:
            return 0

    if not args.cve_id:
        parser.print_usage(sys.stderr)
        return 2

    cve_id = normalize_cve_id(args.cve_id)
    if cve_id is None:
        logger.error(f"Invalid CVE ID: {args.cve_id}")
        return 2

    if not config.verify_tls:
        logger.debug("TLS certificate verification is disabled")

    session = requests_session()
    color = sys.stdout.isatty()

    nvd = NvdClient(
        cache,
        session,
        config.resolved_api_key(),
        max_age=config.max_age,
        max_attempts=config.max_attempts,
        backoff_seconds=config.backoff_seconds,
        verify=config.verify_tls,
    )
    record = nvd.fetch_description(cve_id)
    if record is None:
        return 1
    print(render_description(record, no_cvss=config.no_cvss, color=color), end="")

    try:
        tracker = DebianSecurityTracker(
            cache,
            session,
            config.codename,
            max_age=config.max_age,
            verify=config.verify_tls,
        )
    except TrackerUnavailableError as e:
        logger.error(f"Failed to print debian tracker info: {e}")
        return 0

    packages = select_packages(tracker.get_tracker_info(cve_id), args.package, cve_id)
    print(render_tracker_info(packages, color=color), end="")
    return 0


def run() -> None:
    """Console script entry point."""
    raise SystemExit(main())


if __name__ == "__main__":
    run()
