"""Reports endpoints: list, stats, detail and delete."""

from typing import Literal

from fastapi import APIRouter, Query

from app.api.dependencies import ReportServiceDep
from app.schemas.errors import ErrorResponse
from app.schemas.executive_report import ExecutiveReportResponse
from app.schemas.report import (
    ReportDetailResponse,
    ReportListResponse,
    ReportQuery,
    ReportStatsResponse,
)

router = APIRouter()


@router.get("", response_model=ReportListResponse)
def list_reports(
    service: ReportServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Literal["all", "processing", "completed", "failed"] = Query("all"),
    search: str = Query(""),
    sort: Literal["upload_date", "name", "total_vulnerabilities"] = Query("upload_date"),
    order: Literal["asc", "desc"] = Query("desc"),
) -> ReportListResponse:
    """Return one page of reports, newest upload first by default."""
    query = ReportQuery(
        page=page, limit=limit, status=status, search=search, sort=sort, order=order
    )
    return service.get_reports(query)


@router.get("/stats", response_model=ReportStatsResponse)
def get_report_stats(service: ReportServiceDep) -> ReportStatsResponse:
    return ReportStatsResponse(stats=service.get_report_stats())


@router.get(
    "/{report_id}",
    response_model=ReportDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_report(report_id: int, service: ReportServiceDep) -> ReportDetailResponse:
    """Return a report with its vulnerabilities and per-severity counts."""
    return service.get_report(report_id)


@router.get(
    "/{report_id}/executive",
    response_model=ExecutiveReportResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_executive_report(report_id: int, service: ReportServiceDep) -> ExecutiveReportResponse:
    """
    Return an executive summary of a report.

    Hosts are listed most affected first; findings are ordered by severity
    and carry a risk priority and a recommended fix.
    """
    return ExecutiveReportResponse(data=service.get_executive_report(report_id))


@router.delete("/{report_id}", responses={404: {"model": ErrorResponse}})
def delete_report(report_id: int, service: ReportServiceDep) -> dict[str, str]:
    """Delete a report and all of its vulnerabilities."""
    service.delete_report(report_id)
    return {"message": "Report deleted successfully"}
