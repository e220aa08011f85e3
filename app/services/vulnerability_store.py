"""Store access for vulnerability rows: batch insert, count and listing."""

import logging
from collections.abc import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Vulnerability
from app.schemas.vulnerability import (
    VulnerabilityCreate,
    VulnerabilityQuery,
    VulnerabilityRecord,
)
from app.services.store_errors import StoreError

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "created_at": Vulnerability.created_at,
    "severity": Vulnerability.severity,
    "ip_address": Vulnerability.ip_address,
    "cve": Vulnerability.cve,
}


class VulnerabilityStore:
    """Vulnerability operations on one request-scoped session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def insert_many(
        self,
        records: Sequence[VulnerabilityRecord | VulnerabilityCreate],
        report_id: int | None = None,
    ) -> list[Vulnerability]:
        """
        Insert all records in one transaction and return the created rows.

        Nothing is committed if any row is rejected; the store's message is
        raised as StoreError.
        """
        rows = [
            Vulnerability(**record.model_dump(), report_id=report_id)
            for record in records
        ]
        try:
            self.db.add_all(rows)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError.from_sqlalchemy(e) from e
        logger.debug("Inserted %s vulnerabilities (report_id=%s)", len(rows), report_id)
        return rows

    def count(self) -> int:
        """Return the exact number of stored vulnerabilities."""
        try:
            return self.db.execute(
                select(func.count()).select_from(Vulnerability)
            ).scalar_one()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError.from_sqlalchemy(e) from e

    def find_many(self, query: VulnerabilityQuery) -> tuple[list[Vulnerability], int]:
        """Return one page of vulnerabilities matching the query, and the total match count."""
        stmt = select(Vulnerability)
        if query.severity != "all":
            stmt = stmt.where(Vulnerability.severity == query.severity)
        if query.report_id is not None:
            stmt = stmt.where(Vulnerability.report_id == query.report_id)
        if query.search:
            pattern = f"%{query.search}%"
            stmt = stmt.where(
                or_(
                    Vulnerability.ip_address.ilike(pattern),
                    Vulnerability.cve.ilike(pattern),
                    Vulnerability.plugin_name.ilike(pattern),
                    Vulnerability.description.ilike(pattern),
                )
            )
        column = _SORT_COLUMNS[query.sort]
        ordering = column.asc() if query.order == "asc" else column.desc()
        try:
            total = self.db.execute(
                select(func.count()).select_from(stmt.subquery())
            ).scalar_one()
            rows = self.db.execute(
                stmt.order_by(ordering, Vulnerability.id.desc())
                .offset((query.page - 1) * query.limit)
                .limit(query.limit)
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError.from_sqlalchemy(e) from e
        return list(rows), total

    def find_by_report(self, report_id: int, limit: int | None = 1000) -> list[Vulnerability]:
        """Return up to limit (all when None) vulnerabilities of one report, newest first."""
        try:
            rows = self.db.execute(
                select(Vulnerability)
                .where(Vulnerability.report_id == report_id)
                .order_by(Vulnerability.created_at.desc(), Vulnerability.id.desc())
                .limit(limit)
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError.from_sqlalchemy(e) from e
        return list(rows)
