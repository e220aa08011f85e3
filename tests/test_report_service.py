"""Unit tests for app.services.report_service: row transforms, upload processing and report queries."""

import asyncio
import unittest
from dataclasses import dataclass
from datetime import date
from unittest.mock import MagicMock

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.errors import DatabaseError, FileUploadError, NotFoundError, ValidationError
from app.models import Base, Report, Vulnerability
from app.schemas.report import ReportQuery
from app.services.report_service import (
    ReportService,
    default_report_description,
    default_report_name,
    normalize_severity,
    severity_counts,
    transform_row,
)
from app.services.report_store import ReportStore
from app.services.store_errors import StoreError
from app.services.vulnerability_store import VulnerabilityStore

HEADER = "IP Address,CVE,Plugin ID,Severity,Plugin Name,Description\n"


@dataclass
class _Upload:
    """Minimal stand-in for an uploaded multipart file."""

    filename: str
    data: bytes
    content_type: str | None = "text/csv"

    async def read(self) -> bytes:
        return self.data


@dataclass
class _SizedUpload(_Upload):
    """Upload that declares its size up front, like a spooled multipart file."""

    size: int | None = None
    read_called: bool = False

    async def read(self) -> bytes:
        self.read_called = True
        return self.data


def _upload(text: str, filename: str = "scan.csv", content_type: str | None = "text/csv") -> _Upload:
    return _Upload(filename=filename, data=text.encode("utf-8"), content_type=content_type)


class TestNormalizeSeverity(unittest.TestCase):
    def test_known_labels(self) -> None:
        cases = {
            "Critical": "high",
            "HIGH": "high",
            "Medium": "medium",
            "moderate": "medium",
            "Low": "low",
            "minor": "low",
            "Info": "info",
            "Informational": "info",
            "None": "info",
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(normalize_severity(raw), expected)

    def test_unknown_and_empty_default_to_medium(self) -> None:
        self.assertEqual(normalize_severity("urgent"), "medium")
        self.assertEqual(normalize_severity(""), "medium")
        self.assertEqual(normalize_severity(None), "medium")

    def test_surrounding_whitespace_ignored(self) -> None:
        self.assertEqual(normalize_severity("  low "), "low")


class TestTransformRow(unittest.TestCase):
    def test_primary_columns(self) -> None:
        row = {
            "IP Address": "10.0.0.1",
            "CVE": "CVE-2024-0001",
            "Plugin ID": "1",
            "Severity": "High",
            "Plugin Name": "P",
            "Description": "D",
        }
        self.assertEqual(
            transform_row(row),
            {
                "ip_address": "10.0.0.1",
                "cve": "CVE-2024-0001",
                "severity": "high",
                "plugin_name": "P",
                "description": "D",
            },
        )

    def test_alternate_columns(self) -> None:
        row = {"IP": "10.0.0.9", "Plugin ID": "19506", "Risk": "Low", "Name": "N", "Synopsis": "S"}
        self.assertEqual(
            transform_row(row),
            {
                "ip_address": "10.0.0.9",
                "cve": "19506",
                "severity": "low",
                "plugin_name": "N",
                "description": "S",
            },
        )

    def test_missing_everything(self) -> None:
        out = transform_row({})
        self.assertEqual(out["ip_address"], "")
        self.assertEqual(out["cve"], "")
        self.assertEqual(out["severity"], "medium")


class TestDefaultsAndCounts(unittest.TestCase):
    def test_default_report_name(self) -> None:
        self.assertEqual(default_report_name(date(2025, 7, 1)), "Nessus Scan - 7/1/2025")

    def test_default_report_description(self) -> None:
        self.assertEqual(default_report_description("a.csv"), "Uploaded from a.csv")

    def test_severity_counts(self) -> None:
        stats = severity_counts(["high", "high", "info", "low", "unexpected"])
        self.assertEqual(stats.total, 5)
        self.assertEqual(stats.high, 2)
        self.assertEqual(stats.medium, 0)
        self.assertEqual(stats.low, 1)
        self.assertEqual(stats.info, 1)


class _StoreTestCase(unittest.TestCase):
    """Service wired to real stores on an in-memory SQLite database."""

    max_upload_bytes = 10 * 1024 * 1024
    max_errors = 10

    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        self.db = self.SessionLocal()
        settings = Settings(
            _env_file=None,
            MAX_UPLOAD_FILE_BYTES=self.max_upload_bytes,
            MAX_ERROR_MESSAGES=self.max_errors,
        )
        self.service = ReportService(ReportStore(self.db), VulnerabilityStore(self.db), settings)

    def tearDown(self) -> None:
        self.db.close()

    def _process(self, upload: _Upload | None, name: str = "Weekly", description: str | None = None):
        return asyncio.run(self.service.process_upload(upload, name, description))

    def _reports(self) -> list[Report]:
        with self.SessionLocal() as db:
            return list(db.execute(select(Report).order_by(Report.id)).scalars())

    def _vulnerabilities(self) -> list[Vulnerability]:
        with self.SessionLocal() as db:
            return list(db.execute(select(Vulnerability).order_by(Vulnerability.id)).scalars())


class TestProcessUpload(_StoreTestCase):
    def test_creates_completed_report_with_rows(self) -> None:
        text = HEADER + "10.0.0.1,CVE-2024-0001,1,High,P1,D1\n10.0.0.2,,19506,Low,P2,D2\n"
        result = self._process(_upload(text), name="Weekly", description="desc")
        self.assertEqual(result.inserted, 2)
        self.assertEqual(result.skipped, 0)
        report = self._reports()[0]
        self.assertEqual(result.report_id, report.id)
        self.assertEqual(report.status, "completed")
        self.assertIsNotNone(report.processed_date)
        self.assertEqual(report.file_size, len(text.encode("utf-8")))
        self.assertEqual((report.high_count, report.low_count), (1, 1))
        self.assertEqual([v.cve for v in self._vulnerabilities()], ["CVE-2024-0001", "19506"])

    def test_missing_file(self) -> None:
        with self.assertRaises(FileUploadError) as ctx:
            self._process(None)
        self.assertEqual(ctx.exception.message, "File Upload Error: No file provided")
        self.assertEqual(self._reports(), [])

    def test_wrong_type_rejected_before_report_created(self) -> None:
        with self.assertRaises(FileUploadError):
            self._process(_upload(HEADER, filename="scan.xml", content_type="application/xml"))
        self.assertEqual(self._reports(), [])

    def test_empty_name_is_validation_error(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self._process(_upload(HEADER + "10.0.0.1,CVE-1,1,High,P,D\n"), name="")
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertIn("name", ctx.exception.details)
        self.assertEqual(self._reports(), [])

    def test_header_only_marks_report_failed(self) -> None:
        with self.assertRaises(FileUploadError) as ctx:
            self._process(_upload(HEADER))
        self.assertEqual(ctx.exception.message, "File Upload Error: CSV file is empty")
        self.assertEqual([r.status for r in self._reports()], ["failed"])

    def test_all_rows_invalid_completes_with_nothing_inserted(self) -> None:
        result = self._process(_upload(HEADER + ",,,High,P,D\n"))
        self.assertEqual(result.inserted, 0)
        self.assertEqual(result.skipped, 1)
        self.assertEqual(self._reports()[0].status, "completed")

    def test_store_failure_marks_report_failed(self) -> None:
        self.service.vulnerabilities = MagicMock()
        self.service.vulnerabilities.insert_many.side_effect = StoreError("connection reset")
        with self.assertRaises(FileUploadError) as ctx:
            self._process(_upload(HEADER + "10.0.0.1,CVE-1,1,High,P,D\n"))
        self.assertEqual(ctx.exception.message, "File Upload Error: Failed to process CSV file")
        self.assertEqual(self._reports()[0].status, "failed")

    def test_failure_to_mark_failed_is_logged(self) -> None:
        self.service.reports = MagicMock(wraps=self.service.reports)
        self.service.reports.update_status.side_effect = StoreError("gone")
        with self.assertLogs("app.core.errors", level="ERROR") as logs:
            with self.assertRaises(FileUploadError):
                self._process(_upload(HEADER + "10.0.0.1,CVE-1,1,High,P,D\n"))
        self.assertTrue(any("update_status" in line for line in logs.output))


class TestProcessUploadLimits(_StoreTestCase):
    max_upload_bytes = 64
    max_errors = 2

    def test_file_too_large(self) -> None:
        with self.assertRaises(FileUploadError) as ctx:
            self._process(_upload(HEADER + "10.0.0.1,CVE-1,1,High,P,D\n" * 5))
        self.assertIn("File size exceeds", ctx.exception.message)

    def test_declared_size_rejected_before_read(self) -> None:
        upload = _SizedUpload(filename="scan.csv", data=b"", size=10_000)
        with self.assertRaises(FileUploadError) as ctx:
            self._process(upload)
        self.assertIn("File size exceeds", ctx.exception.message)
        self.assertFalse(upload.read_called)
        self.assertEqual(self._reports(), [])

    def test_error_messages_truncated(self) -> None:
        text = "IP,CVE\n,a\n,b\n,c\n"
        result = self._process(_upload(text))
        self.assertEqual(result.skipped, 3)
        self.assertEqual(len(result.errors), 2)


class TestReportQueries(_StoreTestCase):
    def _seed(self) -> list[int]:
        ids = []
        for name, rows in (("Alpha", 2), ("Beta", 1), ("Gamma", 3)):
            text = HEADER + "".join(
                f"10.0.0.{i},CVE-2024-000{i},{i},High,P,D\n" for i in range(rows)
            )
            ids.append(self._process(_upload(text, filename=f"{name.lower()}.csv"), name=name).report_id)
        return ids

    def test_get_reports_paging_and_sort(self) -> None:
        self._seed()
        page = self.service.get_reports(ReportQuery(limit=2, sort="name", order="asc"))
        self.assertEqual(page.total, 3)
        self.assertEqual(page.total_pages, 2)
        self.assertEqual([r.name for r in page.data], ["Alpha", "Beta"])

    def test_get_reports_search_and_status(self) -> None:
        self._seed()
        page = self.service.get_reports(ReportQuery(search="gam"))
        self.assertEqual([r.name for r in page.data], ["Gamma"])
        page = self.service.get_reports(ReportQuery(status="failed"))
        self.assertEqual(page.total, 0)

    def test_get_report_with_stats(self) -> None:
        ids = self._seed()
        detail = self.service.get_report(ids[2])
        self.assertEqual(detail.report.name, "Gamma")
        self.assertEqual(len(detail.vulnerabilities), 3)
        self.assertEqual(detail.stats.total, 3)
        self.assertEqual(detail.stats.high, 3)

    def test_get_unknown_report(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            self.service.get_report(999)
        self.assertEqual(ctx.exception.message, "Report with id '999' not found")

    def test_delete_report_removes_its_vulnerabilities(self) -> None:
        ids = self._seed()
        self.service.delete_report(ids[0])
        self.assertEqual(len(self._reports()), 2)
        self.assertEqual(len(self._vulnerabilities()), 4)
        with self.assertRaises(NotFoundError):
            self.service.delete_report(ids[0])

    def test_report_stats(self) -> None:
        self._seed()
        stats = self.service.get_report_stats()
        self.assertEqual(stats.total, 3)
        self.assertEqual(stats.completed, 3)
        self.assertEqual(stats.total_vulnerabilities, 6)

    def test_store_error_becomes_database_error(self) -> None:
        self.service.reports = MagicMock()
        self.service.reports.find_many.side_effect = StoreError("timeout")
        with self.assertRaises(DatabaseError) as ctx:
            self.service.get_reports(ReportQuery())
        self.assertEqual(ctx.exception.message, "Database Error: timeout")
        self.assertEqual(ctx.exception.status_code, 500)

class TestReportStatusDomain(_StoreTestCase):
    def test_unknown_status_rejected_by_store(self) -> None:
        report_id = self._process(_upload(HEADER + "10.0.0.1,CVE-1,1,High,P,D\n")).report_id
        with self.assertRaises(StoreError):
            self.service.reports.update_status(report_id, "archived")
        self.assertEqual(self._reports()[0].status, "completed")



if __name__ == "__main__":
    unittest.main()
