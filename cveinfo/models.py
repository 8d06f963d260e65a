"""Result types shared by the clients and the report layer."""

from dataclasses import dataclass, field


@dataclass
class VulnerabilityRecord:
    """Summary of a single CVE as published by the NVD.

    Every field except ``cve_id`` is optional because the upstream schema
    varies with the age and type of the CVE.

    Attributes:
        cve_id: The CVE identifier (e.g., CVE-2024-12345).
        description: English description text.
        vector_string: CVSS v3.1 vector string.
        severity: CVSS v3.1 base severity (LOW, MEDIUM, HIGH, CRITICAL).
        score: CVSS v3.1 base score.
    """

    cve_id: str
    description: str | None = None
    vector_string: str | None = None
    severity: str | None = None
    score: float | None = None

    @property
    def has_cvss(self) -> bool:
        return self.vector_string is not None or self.severity is not None or self.score is not None


@dataclass
class CodenameInfo:
    """Patch status of a package in one Debian release."""

    name: str
    status: str | None = None
    fixed_version: str | None = None


@dataclass
class TrackerInfo:
    """Debian Security Tracker data for one package affected by a CVE.

    Attributes:
        package_name: Debian source package name.
        cve_id: The queried CVE identifier.
        codenames: Per-release status, in tracker order.
    """

    package_name: str
    cve_id: str
    codenames: list[CodenameInfo] = field(default_factory=list)
