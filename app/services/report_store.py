"""Store access for reports: create, status updates, listing, stats and delete."""

import logging
from datetime import datetime

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Report, Vulnerability
from app.schemas.report import ReportCreate, ReportQuery, ReportStats, SeverityStats
from app.services.store_errors import StoreError

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "upload_date": Report.upload_date,
    "name": Report.name,
    "total_vulnerabilities": Report.total_vulnerabilities,
}


class ReportStore:
    """Report operations on one request-scoped session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, data: ReportCreate) -> Report:
        report = Report(**data.model_dump())
        try:
            self.db.add(report)
            self.db.commit()
            self.db.refresh(report)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError.from_sqlalchemy(e) from e
        return report

    def find_by_id(self, report_id: int) -> Report | None:
        try:
            return self.db.get(Report, report_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError.from_sqlalchemy(e) from e

    def find_many(self, query: ReportQuery) -> tuple[list[Report], int]:
        """Return one page of reports matching the query, and the total match count."""
        stmt = select(Report)
        if query.status != "all":
            stmt = stmt.where(Report.status == query.status)
        if query.search:
            pattern = f"%{query.search}%"
            stmt = stmt.where(
                or_(
                    Report.name.ilike(pattern),
                    Report.file_name.ilike(pattern),
                    Report.description.ilike(pattern),
                )
            )
        column = _SORT_COLUMNS[query.sort]
        ordering = column.asc() if query.order == "asc" else column.desc()
        try:
            total = self.db.execute(
                select(func.count()).select_from(stmt.subquery())
            ).scalar_one()
            rows = self.db.execute(
                stmt.order_by(ordering, Report.id.desc())
                .offset((query.page - 1) * query.limit)
                .limit(query.limit)
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError.from_sqlalchemy(e) from e
        return list(rows), total

    def update_status(
        self,
        report_id: int,
        status: str,
        processed_date: datetime | None = None,
        counts: SeverityStats | None = None,
    ) -> Report | None:
        """Set status (and optionally processed date and severity totals); None if the report is gone."""
        try:
            report = self.db.get(Report, report_id)
            if report is None:
                return None
            report.status = status
            if processed_date is not None:
                report.processed_date = processed_date
            if counts is not None:
                report.total_vulnerabilities = counts.total
                report.high_count = counts.high
                report.medium_count = counts.medium
                report.low_count = counts.low
                report.info_count = counts.info
            self.db.commit()
            self.db.refresh(report)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError.from_sqlalchemy(e) from e
        logger.debug("Report %s status -> %s", report_id, status)
        return report

    def delete(self, report_id: int) -> bool:
        """Delete a report and its vulnerabilities. Returns False if it did not exist."""
        try:
            report = self.db.get(Report, report_id)
            if report is None:
                return False
            self.db.execute(
                delete(Vulnerability).where(Vulnerability.report_id == report_id)
            )
            self.db.delete(report)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError.from_sqlalchemy(e) from e
        return True

    def stats(self) -> ReportStats:
        """Count reports per status and sum their vulnerability totals."""
        try:
            rows = self.db.execute(
                select(
                    Report.status,
                    func.count(Report.id),
                    func.coalesce(func.sum(Report.total_vulnerabilities), 0),
                ).group_by(Report.status)
            ).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError.from_sqlalchemy(e) from e
        stats = ReportStats()
        for status, count, vulns in rows:
            stats.total += count
            stats.total_vulnerabilities += int(vulns)
            if status in ("processing", "completed", "failed"):
                setattr(stats, status, count)
        return stats
