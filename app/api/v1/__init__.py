"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import health, reports, scan, vulnerabilities

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(scan.router, prefix="/scan", tags=["scan"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(vulnerabilities.router, prefix="/vulnerabilities", tags=["vulnerabilities"])
