"""Vulnerabilities endpoint: paged, filterable listing of stored rows."""

import logging
import math
from typing import Literal

from fastapi import APIRouter, Query

from app.api.dependencies import VulnerabilityStoreDep
from app.core.errors import DatabaseError
from app.schemas.vulnerability import (
    VulnerabilityListResponse,
    VulnerabilityQuery,
    VulnerabilityRead,
)
from app.services.store_errors import StoreError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=VulnerabilityListResponse)
def list_vulnerabilities(
    store: VulnerabilityStoreDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    severity: Literal["all", "high", "medium", "low", "info"] = Query("all"),
    search: str = Query(""),
    report_id: int | None = Query(None),
    sort: Literal["created_at", "severity", "ip_address", "cve"] = Query("created_at"),
    order: Literal["asc", "desc"] = Query("desc"),
) -> VulnerabilityListResponse:
    """
    Return one page of vulnerabilities.

    `search` matches IP address, CVE, plugin name and description
    (case-insensitive); `report_id` restricts to one report's rows.
    """
    query = VulnerabilityQuery(
        page=page,
        limit=limit,
        severity=severity,
        search=search,
        report_id=report_id,
        sort=sort,
        order=order,
    )
    try:
        rows, total = store.find_many(query)
    except StoreError as e:
        logger.error("Vulnerability listing failed: %s", e.message)
        raise DatabaseError(e.message) from e
    return VulnerabilityListResponse(
        data=[VulnerabilityRead.model_validate(r) for r in rows],
        total=total,
        page=page,
        total_pages=math.ceil(total / limit),
    )
