"""Pydantic schemas for reports: creation, upload results, listing and detail responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.vulnerability import VulnerabilityRead

ReportStatus = Literal["processing", "completed", "failed"]


class ReportCreate(BaseModel):
    """Report row created before the uploaded file is processed."""

    name: str = Field(..., min_length=1, max_length=255, description="Report name.")
    description: str | None = Field(default=None, description="Free-text description.")
    file_name: str = Field(..., min_length=1, max_length=255, description="Uploaded file name.")
    file_size: int = Field(..., ge=0, description="Uploaded file size in bytes.")
    status: ReportStatus = "processing"


class ReportRead(BaseModel):
    """Persisted report as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    file_name: str
    file_size: int
    status: str
    total_vulnerabilities: int = 0
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    info_count: int = 0
    upload_date: datetime | None = None
    processed_date: datetime | None = None


class ReportUploadResult(BaseModel):
    """Outcome of processing one uploaded file into a report."""

    report_id: int = Field(..., description="ID of the created report.")
    inserted: int = Field(..., ge=0, description="Rows persisted.")
    skipped: int = Field(..., ge=0, description="Rows rejected by validation.")
    errors: list[str] = Field(
        default_factory=list,
        description="First validation messages, one per skipped row.",
    )


class ReportUploadResponse(BaseModel):
    """Response body of the report-oriented upload."""

    success: bool = True
    message: str = "Upload processed successfully"
    data: ReportUploadResult


class ReportQuery(BaseModel):
    """Paging, filtering and sorting for the report listing."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    status: Literal["all", "processing", "completed", "failed"] = "all"
    search: str = ""
    sort: Literal["upload_date", "name", "total_vulnerabilities"] = "upload_date"
    order: Literal["asc", "desc"] = "desc"


class ReportListResponse(BaseModel):
    """One page of reports plus paging totals."""

    success: bool = True
    data: list[ReportRead] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)


class SeverityStats(BaseModel):
    """Vulnerability counts of one report by severity."""

    total: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0


class ReportDetailResponse(BaseModel):
    """A report with its vulnerabilities and severity counts."""

    report: ReportRead
    vulnerabilities: list[VulnerabilityRead] = Field(default_factory=list)
    stats: SeverityStats


class ReportStats(BaseModel):
    """Counts of reports by status and of all report vulnerabilities."""

    total: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0
    total_vulnerabilities: int = 0


class ReportStatsResponse(BaseModel):
    success: bool = True
    stats: ReportStats
