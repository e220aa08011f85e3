"""Pydantic request/response schemas."""

from app.schemas.errors import ErrorResponse
from app.schemas.executive_report import (
    ExecutiveFinding,
    ExecutiveReport,
    ExecutiveReportResponse,
    HostSummary,
)
from app.schemas.health import HealthEnv, HealthResponse
from app.schemas.report import (
    ReportCreate,
    ReportDetailResponse,
    ReportListResponse,
    ReportQuery,
    ReportRead,
    ReportStats,
    ReportStatsResponse,
    ReportUploadResponse,
    ReportUploadResult,
    SeverityStats,
)
from app.schemas.vulnerability import (
    DirectUploadResponse,
    SeverityLevel,
    VulnerabilityCreate,
    VulnerabilityListResponse,
    VulnerabilityQuery,
    VulnerabilityRead,
    VulnerabilityRecord,
)

__all__ = [
    "DirectUploadResponse",
    "ErrorResponse",
    "ExecutiveFinding",
    "ExecutiveReport",
    "ExecutiveReportResponse",
    "HealthEnv",
    "HealthResponse",
    "HostSummary",
    "ReportCreate",
    "ReportDetailResponse",
    "ReportListResponse",
    "ReportQuery",
    "ReportRead",
    "ReportStats",
    "ReportStatsResponse",
    "ReportUploadResponse",
    "ReportUploadResult",
    "SeverityLevel",
    "SeverityStats",
    "VulnerabilityCreate",
    "VulnerabilityListResponse",
    "VulnerabilityQuery",
    "VulnerabilityRead",
    "VulnerabilityRecord",
]
