"""cveinfo — look up a CVE and print its NVD summary and Debian patch status.

This package provides the core logic for fetching, caching, parsing, and
reporting on a single CVE from the NVD CVE API and the Debian Security
Tracker.
"""

__version__ = "0.3.0"
