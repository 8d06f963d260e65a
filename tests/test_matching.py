"""Unit tests for cveinfo.matching — package name reconciliation."""

import logging

from cveinfo.matching import match_package, select_packages
from cveinfo.models import TrackerInfo

CVE_ID = "CVE-2024-0001"


def _pkgs(*names: str) -> list[TrackerInfo]:
    return [TrackerInfo(package_name=n, cve_id=CVE_ID) for n in names]


# ── match_package ────────────────────────────────────────────────────────────


class TestMatchPackage:
    def test_exact(self):
        m = match_package(_pkgs("libfoo", "libfoo-dev"), "libfoo", CVE_ID)
        assert m.package_name == "libfoo"

    def test_exact_beats_earlier_substring(self):
        m = match_package(_pkgs("libfoo-dev", "libfoo"), "libfoo", CVE_ID)
        assert m.package_name == "libfoo"

    def test_tracker_name_contains_given(self, caplog):
        with caplog.at_level(logging.WARNING):
            m = match_package(_pkgs("libfoo"), "foo", CVE_ID)
        assert m.package_name == "libfoo"
        assert "only partially: foo ~= libfoo" in caplog.text

    def test_given_contains_tracker_name(self, caplog):
        with caplog.at_level(logging.WARNING):
            m = match_package(_pkgs("libfoo"), "libfoo-extra", CVE_ID)
        assert m.package_name == "libfoo"
        assert "only partially: libfoo ~= libfoo-extra" in caplog.text

    def test_no_match(self):
        assert match_package(_pkgs("libfoo"), "bar", CVE_ID) is None

    def test_first_in_order_wins(self):
        m = match_package(_pkgs("openssl1.0", "openssl", "libssl"), "ssl", CVE_ID)
        assert m.package_name == "openssl1.0"

    def test_exact_match_not_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            match_package(_pkgs("libfoo"), "libfoo", CVE_ID)
        assert caplog.records == []


# ── select_packages ──────────────────────────────────────────────────────────


class TestSelectPackages:
    def test_no_name_returns_all(self):
        pkgs = _pkgs("a", "b")
        assert select_packages(pkgs, None, CVE_ID) == pkgs

    def test_single_package_returned_unmatched(self):
        pkgs = _pkgs("libfoo")
        assert select_packages(pkgs, "bar", CVE_ID) == pkgs

    def test_empty(self):
        assert select_packages([], "bar", CVE_ID) == []

    def test_exact(self):
        result = select_packages(_pkgs("libfoo", "libfoo-dev"), "libfoo", CVE_ID)
        assert [p.package_name for p in result] == ["libfoo"]

    def test_substring_tiers(self):
        assert [p.package_name for p in select_packages(_pkgs("libfoo", "zlib"), "foo", CVE_ID)] == ["libfoo"]
        assert [p.package_name for p in select_packages(_pkgs("libfoo", "zlib"), "libfoo-extra", CVE_ID)] == [
            "libfoo"
        ]

    def test_not_found_in_package(self, caplog):
        with caplog.at_level(logging.ERROR):
            assert select_packages(_pkgs("libfoo", "zlib"), "bar", CVE_ID) == []
        assert f"Given CVE ID {CVE_ID} not found in the given package" in caplog.text
