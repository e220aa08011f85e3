"""Pydantic schemas for the executive summary of one report."""

from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.report import ReportRead, SeverityStats
from app.schemas.vulnerability import VulnerabilityRead

RiskPriority = Literal["P1", "P2", "P3", "P4", "P5"]


class HostSummary(BaseModel):
    """Vulnerability counts of one scanned host, keyed by IP address."""

    host_number: int = Field(..., ge=1, description="1-based position, most affected host first.")
    ip_address: str
    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0
    total: int = 0


class ExecutiveFinding(VulnerabilityRead):
    """A report vulnerability with its priority and remediation advice."""

    serial_number: int = Field(..., ge=1)
    risk_priority: RiskPriority
    recommended_fix: str


class RiskModelEntry(BaseModel):
    priority: RiskPriority
    severity: str
    description: str


class ExecutiveReport(BaseModel):
    """Everything needed to render an executive summary of one report."""

    report: ReportRead
    stats: SeverityStats
    host_summaries: list[HostSummary] = Field(default_factory=list)
    findings: list[ExecutiveFinding] = Field(default_factory=list)
    risk_model: list[RiskModelEntry] = Field(default_factory=list)


class ExecutiveReportResponse(BaseModel):
    success: bool = True
    data: ExecutiveReport
