"""Report business logic: turn an uploaded scan CSV into a report with its vulnerabilities."""

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING

import pydantic
from fastapi import UploadFile

from app.core.errors import (
    DatabaseError,
    FileUploadError,
    NotFoundError,
    ValidationError,
    log_error,
)
from app.schemas.executive_report import ExecutiveReport
from app.schemas.report import (
    ReportCreate,
    ReportDetailResponse,
    ReportListResponse,
    ReportQuery,
    ReportRead,
    ReportStats,
    ReportUploadResult,
    SeverityStats,
)
from app.schemas.vulnerability import (
    SEVERITY_LEVELS,
    SeverityLevel,
    VulnerabilityCreate,
    VulnerabilityRead,
)
from app.services.csv_parser import decode_csv_bytes, parse_csv
from app.services.executive_report import build_executive_report
from app.services.report_store import ReportStore
from app.services.store_errors import StoreError
from app.services.vulnerability_store import VulnerabilityStore

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

CSV_CONTENT_TYPE = "text/csv"
REPORT_VULNERABILITY_LIMIT = 1000

# Severity aliases (case-insensitive) -> stored level; anything else is "medium".
_SEVERITY_ALIASES: dict[str, SeverityLevel] = {
    "critical": "high",
    "high": "high",
    "medium": "medium",
    "moderate": "medium",
    "low": "low",
    "minor": "low",
    "info": "info",
    "informational": "info",
    "none": "info",
}
_DEFAULT_SEVERITY: SeverityLevel = "medium"


def default_report_name(today: date | None = None) -> str:
    """Name used when an upload does not provide one, e.g. 'Nessus Scan - 7/21/2025'."""
    d = today or date.today()
    return f"Nessus Scan - {d.month}/{d.day}/{d.year}"


def default_report_description(file_name: str) -> str:
    return f"Uploaded from {file_name}"


def normalize_severity(raw: str | None) -> SeverityLevel:
    """Map a scanner severity/risk label to high, medium, low or info."""
    if not raw or not raw.strip():
        return _DEFAULT_SEVERITY
    return _SEVERITY_ALIASES.get(raw.strip().lower(), _DEFAULT_SEVERITY)


def transform_row(row: Mapping[str, str]) -> dict[str, str]:
    """
    Shape a CSV row for VulnerabilityCreate, accepting alternate column names.

    Falls back IP Address -> IP, CVE -> Plugin ID, Severity -> Risk,
    Plugin Name -> Name and Description -> Synopsis.
    """
    return {
        "ip_address": row.get("IP Address") or row.get("IP") or "",
        "cve": row.get("CVE") or row.get("Plugin ID") or "",
        "severity": normalize_severity(row.get("Severity") or row.get("Risk")),
        "plugin_name": row.get("Plugin Name") or row.get("Name") or "",
        "description": row.get("Description") or row.get("Synopsis") or "",
    }


def severity_counts(severities: Iterable[str]) -> SeverityStats:
    stats = SeverityStats()
    for severity in severities:
        stats.total += 1
        if severity in SEVERITY_LEVELS:
            setattr(stats, severity, getattr(stats, severity) + 1)
    return stats


def _validation_message(error: pydantic.ValidationError) -> str:
    parts = []
    for err in error.errors():
        field = ".".join(str(loc) for loc in err.get("loc", ())) or "value"
        parts.append(f"{field}: {err.get('msg', 'invalid')}")
    return "; ".join(parts) or "Invalid data"


class ReportService:
    """Report operations over the report and vulnerability stores."""

    def __init__(
        self,
        reports: ReportStore,
        vulnerabilities: VulnerabilityStore,
        settings: "Settings",
    ) -> None:
        self.reports = reports
        self.vulnerabilities = vulnerabilities
        self.settings = settings

    async def process_upload(
        self,
        file: UploadFile | None,
        report_name: str,
        report_description: str | None,
    ) -> ReportUploadResult:
        """
        Parse an uploaded CSV into a new report and persist its valid rows.

        The report is created first with status 'processing'; rows that fail
        validation are skipped and listed in errors. On any failure after the
        report exists it is marked 'failed'. File and validation problems are
        re-raised as-is; anything else becomes a generic FileUploadError.
        """
        report_id: int | None = None
        try:
            if file is None:
                raise FileUploadError("No file provided")
            file_name = file.filename or ""
            # Reject on the declared size before buffering the body.
            self._validate_file(file_name, file.content_type, getattr(file, "size", None) or 0)
            content = await file.read()
            self._check_size(len(content))

            report = self.reports.create(
                self._build_report(report_name, report_description, file_name, len(content))
            )
            report_id = report.id

            rows = parse_csv(decode_csv_bytes(content))
            if not rows:
                raise FileUploadError("CSV file is empty")

            valid, errors = self._validate_rows(rows)
            inserted = 0
            if valid:
                inserted = len(self.vulnerabilities.insert_many(valid, report_id=report_id))

            self.reports.update_status(
                report_id,
                "completed",
                processed_date=datetime.now(timezone.utc),
                counts=severity_counts(v.severity for v in valid),
            )
            logger.info(
                "Processed upload %r into report %s: inserted=%s skipped=%s",
                file_name,
                report_id,
                inserted,
                len(errors),
            )
            return ReportUploadResult(
                report_id=report_id,
                inserted=inserted,
                skipped=len(errors),
                errors=errors[: self.settings.MAX_ERROR_MESSAGES],
            )
        except Exception as e:
            if report_id is not None:
                try:
                    self.reports.update_status(report_id, "failed")
                except StoreError as update_error:
                    log_error(update_error, "ReportService.process_upload.update_status")
            log_error(e, "ReportService.process_upload")
            if isinstance(e, (FileUploadError, ValidationError)):
                raise
            raise FileUploadError("Failed to process CSV file") from e

    def _check_size(self, size: int) -> None:
        max_bytes = self.settings.MAX_UPLOAD_FILE_BYTES
        if size > max_bytes:
            raise FileUploadError(
                f"File size exceeds {max_bytes // (1024 * 1024)}MB limit"
            )

    def _validate_file(self, file_name: str, content_type: str | None, size: int) -> None:
        self._check_size(size)
        if not file_name.lower().endswith(".csv") and content_type != CSV_CONTENT_TYPE:
            raise FileUploadError("File must be a CSV")

    @staticmethod
    def _build_report(
        name: str,
        description: str | None,
        file_name: str,
        file_size: int,
    ) -> ReportCreate:
        try:
            return ReportCreate(
                name=name,
                description=description,
                file_name=file_name,
                file_size=file_size,
                status="processing",
            )
        except pydantic.ValidationError as e:
            details = {
                ".".join(str(loc) for loc in err["loc"]): err["msg"]
                for err in e.errors()
            }
            raise ValidationError("Invalid report data", details) from e

    @staticmethod
    def _validate_rows(
        rows: list[dict[str, str]],
    ) -> tuple[list[VulnerabilityCreate], list[str]]:
        """Validate each transformed row; returns valid rows and one message per rejected row."""
        valid: list[VulnerabilityCreate] = []
        errors: list[str] = []
        for i, row in enumerate(rows):
            try:
                valid.append(VulnerabilityCreate.model_validate(transform_row(row)))
            except pydantic.ValidationError as e:
                errors.append(f"Row {i + 1}: {_validation_message(e)}")
        return valid, errors

    def get_reports(self, query: ReportQuery) -> ReportListResponse:
        try:
            rows, total = self.reports.find_many(query)
        except StoreError as e:
            log_error(e, "ReportService.get_reports")
            raise DatabaseError(e.message) from e
        return ReportListResponse(
            data=[ReportRead.model_validate(r) for r in rows],
            total=total,
            page=query.page,
            total_pages=math.ceil(total / query.limit),
        )

    def get_report(self, report_id: int) -> ReportDetailResponse:
        """Return a report with its vulnerabilities (newest first) and severity counts."""
        try:
            report = self.reports.find_by_id(report_id)
            if report is None:
                raise NotFoundError("Report", report_id)
            vulns = self.vulnerabilities.find_by_report(
                report_id, limit=REPORT_VULNERABILITY_LIMIT
            )
        except StoreError as e:
            log_error(e, "ReportService.get_report")
            raise DatabaseError(e.message) from e
        return ReportDetailResponse(
            report=ReportRead.model_validate(report),
            vulnerabilities=[VulnerabilityRead.model_validate(v) for v in vulns],
            stats=severity_counts(v.severity for v in vulns),
        )

    def delete_report(self, report_id: int) -> None:
        try:
            deleted = self.reports.delete(report_id)
        except StoreError as e:
            log_error(e, "ReportService.delete_report")
            raise DatabaseError(e.message) from e
        if not deleted:
            raise NotFoundError("Report", report_id)
        logger.info("Deleted report %s", report_id)

    def get_report_stats(self) -> ReportStats:
        try:
            return self.reports.stats()
        except StoreError as e:
            log_error(e, "ReportService.get_report_stats")
            raise DatabaseError("Failed to fetch report statistics") from e

    def get_executive_report(self, report_id: int) -> ExecutiveReport:
        """Return per-host counts and prioritized findings over all of a report's rows."""
        try:
            report = self.reports.find_by_id(report_id)
            if report is None:
                raise NotFoundError("Report", report_id)
            vulns = self.vulnerabilities.find_by_report(report_id, limit=None)
        except StoreError as e:
            log_error(e, "ReportService.get_executive_report")
            raise DatabaseError(e.message) from e
        return build_executive_report(
            report, vulns, severity_counts(v.severity for v in vulns)
        )
