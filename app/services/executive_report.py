"""
Executive summary of a report: per-host counts, prioritized findings and fixes.

Everything is derived from the report's stored vulnerability rows. Severity
here is the normalized level, so scanner "critical" findings rank as high.
"""

from collections.abc import Iterable, Sequence

from app.models import Report, Vulnerability
from app.schemas.executive_report import (
    ExecutiveFinding,
    ExecutiveReport,
    HostSummary,
    RiskModelEntry,
    RiskPriority,
)
from app.schemas.report import ReportRead, SeverityStats
from app.schemas.vulnerability import SEVERITY_LEVELS, VulnerabilityRead

SEVERITY_RANK: dict[str, int] = {"high": 4, "medium": 3, "low": 2, "info": 1}

RISK_PRIORITY: dict[str, RiskPriority] = {
    "high": "P2",
    "medium": "P3",
    "low": "P4",
    "info": "P5",
}

RISK_MODEL: tuple[RiskModelEntry, ...] = (
    RiskModelEntry(
        priority="P2",
        severity="High",
        description="Major security flaws risking unauthorized access",
    ),
    RiskModelEntry(
        priority="P3",
        severity="Medium",
        description="Security flaws that need chaining to become exploitable",
    ),
    RiskModelEntry(
        priority="P4",
        severity="Low",
        description="Minor misconfigurations or indirect security threats",
    ),
    RiskModelEntry(
        priority="P5",
        severity="Informational",
        description="Informational findings with no direct security impact",
    ),
)

DEFAULT_FIX = (
    "Review configuration settings and apply security best practices "
    "according to vendor guidelines."
)

# (keyword in plugin name, advice); first match wins.
_FIX_BY_KEYWORD: tuple[tuple[str, str], ...] = (
    (
        "ssl",
        "Update SSL/TLS configuration and certificates to use secure protocols and cipher suites.",
    ),
    (
        "smb",
        "Configure SMB signing, disable unnecessary SMB versions, and apply latest security patches.",
    ),
    (
        "rdp",
        "Implement network-level authentication, use strong encryption, and restrict RDP access.",
    ),
    ("patch", "Apply the latest security patches and updates from the vendor."),
    ("update", "Apply the latest security patches and updates from the vendor."),
)


def severity_rank(severity: str | None) -> int:
    return SEVERITY_RANK.get((severity or "").lower(), 0)


def risk_priority(severity: str | None) -> RiskPriority:
    return RISK_PRIORITY.get((severity or "").lower(), "P5")


def recommended_fix(plugin_name: str | None, cve: str | None) -> str:
    """Generic remediation advice from the plugin name, else from the CVE."""
    name = (plugin_name or "").lower()
    for keyword, advice in _FIX_BY_KEYWORD:
        if keyword in name:
            return advice
    if cve and cve.upper().startswith("CVE-"):
        return (
            f"Apply security patch for {cve}. "
            "Consult vendor advisories for specific remediation steps."
        )
    return DEFAULT_FIX


def host_summaries(vulnerabilities: Iterable[Vulnerability]) -> list[HostSummary]:
    """Group by IP address; hosts with the most findings first, ties by IP."""
    counts: dict[str, dict[str, int]] = {}
    for v in vulnerabilities:
        host = counts.setdefault(v.ip_address, dict.fromkeys((*SEVERITY_LEVELS, "total"), 0))
        if v.severity in SEVERITY_LEVELS:
            host[v.severity] += 1
        host["total"] += 1
    ordered = sorted(counts.items(), key=lambda item: (-item[1]["total"], item[0]))
    return [
        HostSummary(host_number=i, ip_address=ip, **host)
        for i, (ip, host) in enumerate(ordered, start=1)
    ]


def prioritized_findings(vulnerabilities: Iterable[Vulnerability]) -> list[ExecutiveFinding]:
    """Findings ordered by severity (highest first), then IP address and CVE."""
    ordered = sorted(
        vulnerabilities,
        key=lambda v: (-severity_rank(v.severity), v.ip_address, v.cve),
    )
    return [
        ExecutiveFinding(
            **VulnerabilityRead.model_validate(v).model_dump(),
            serial_number=i,
            risk_priority=risk_priority(v.severity),
            recommended_fix=recommended_fix(v.plugin_name, v.cve),
        )
        for i, v in enumerate(ordered, start=1)
    ]


def build_executive_report(
    report: Report,
    vulnerabilities: Sequence[Vulnerability],
    stats: SeverityStats,
) -> ExecutiveReport:
    return ExecutiveReport(
        report=ReportRead.model_validate(report),
        stats=stats,
        host_summaries=host_summaries(vulnerabilities),
        findings=prioritized_findings(vulnerabilities),
        risk_model=list(RISK_MODEL),
    )
