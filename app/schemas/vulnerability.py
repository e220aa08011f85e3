"""Pydantic schemas for vulnerability records: ingestion shapes, reads and listing queries."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Severity levels stored by the report-oriented upload after normalization.
SeverityLevel = Literal["high", "medium", "low", "info"]

SEVERITY_LEVELS: tuple[str, ...] = ("high", "medium", "low", "info")


class VulnerabilityRecord(BaseModel):
    """
    One row mapped from a scan export, exactly as read from the CSV.

    Fields are not coerced or validated; a missing column leaves the field None
    and it is up to the store to accept or reject the row.
    """

    ip_address: str | None = Field(default=None, description="Source IP of the scanned host.")
    cve: str | None = Field(
        default=None,
        description="CVE identifier, or the scanner Plugin ID when no CVE is given.",
    )
    severity: str | None = Field(default=None, description="Scanner-provided severity label.")
    plugin_name: str | None = Field(default=None, description="Scanner-specific finding name.")
    description: str | None = Field(default=None, description="Free-text description.")


class VulnerabilityCreate(BaseModel):
    """Validated vulnerability for the report-oriented upload."""

    ip_address: str = Field(..., min_length=1, description="Source IP of the scanned host.")
    cve: str = Field(..., min_length=1, description="CVE identifier or Plugin ID.")
    severity: SeverityLevel = Field(..., description="Normalized severity level.")
    plugin_name: str = Field(default="", description="Scanner-specific finding name.")
    description: str = Field(default="", description="Free-text description.")

    @field_validator("ip_address", "cve")
    @classmethod
    def strip_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must be non-empty")
        return v.strip()


class VulnerabilityRead(BaseModel):
    """Persisted vulnerability as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    ip_address: str
    cve: str
    severity: str
    plugin_name: str | None = None
    description: str | None = None
    report_id: int | None = None
    created_at: datetime | None = None


class VulnerabilityQuery(BaseModel):
    """Paging, filtering and sorting for the vulnerability listing."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    severity: Literal["all", "high", "medium", "low", "info"] = "all"
    search: str = ""
    report_id: int | None = None
    sort: Literal["created_at", "severity", "ip_address", "cve"] = "created_at"
    order: Literal["asc", "desc"] = "desc"


class VulnerabilityListResponse(BaseModel):
    """One page of vulnerabilities plus paging totals."""

    success: bool = True
    data: list[VulnerabilityRead] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)


class DirectUploadResponse(BaseModel):
    """Response after inserting all rows of a CSV upload in one batch."""

    message: str = "Upload successful"
    inserted: int = Field(..., ge=0, description="Number of rows inserted.")
