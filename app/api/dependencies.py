"""FastAPI dependency providers for the store layer and services."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.services.report_service import ReportService
from app.services.report_store import ReportStore
from app.services.vulnerability_store import VulnerabilityStore


def get_vulnerability_store(
    db: Annotated[Session, Depends(get_db)],
) -> VulnerabilityStore:
    return VulnerabilityStore(db)


def get_report_store(db: Annotated[Session, Depends(get_db)]) -> ReportStore:
    return ReportStore(db)


def get_report_service(
    reports: Annotated[ReportStore, Depends(get_report_store)],
    vulnerabilities: Annotated[VulnerabilityStore, Depends(get_vulnerability_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ReportService:
    """Build the report service for one request; both stores share the request's session."""
    return ReportService(reports, vulnerabilities, settings)


VulnerabilityStoreDep = Annotated[VulnerabilityStore, Depends(get_vulnerability_store)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
