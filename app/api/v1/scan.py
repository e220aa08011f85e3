"""Scan upload endpoints: direct CSV insert and report-oriented upload."""

import logging

from fastapi import APIRouter, Request, UploadFile
from fastapi.responses import JSONResponse

from app.api.dependencies import ReportServiceDep, VulnerabilityStoreDep
from app.core.errors import handle_api_error
from app.schemas.errors import ErrorResponse
from app.schemas.report import ReportUploadResponse
from app.schemas.vulnerability import DirectUploadResponse
from app.services.csv_parser import decode_csv_bytes, parse_csv
from app.services.record_mapper import map_rows
from app.services.report_service import default_report_description, default_report_name
from app.services.store_errors import StoreError

logger = logging.getLogger(__name__)

router = APIRouter()

CSV_FILE_REQUIRED = "CSV file is required"
NO_FILE_PROVIDED = "No file provided"
GENERIC_UPLOAD_ERROR = "Something went wrong"


def _is_upload_file(obj: object) -> bool:
    """True if obj is an uploaded file (UploadFile or file-like with filename and read)."""
    if isinstance(obj, UploadFile):
        return True
    return (
        hasattr(obj, "read")
        and callable(getattr(obj, "read", None))
        and hasattr(obj, "filename")
    )


def _form_text(value: object) -> str | None:
    """Return a form text field, or None when absent, blank or not text."""
    if isinstance(value, str) and value.strip():
        return value
    return None


@router.post(
    "/upload",
    response_model=DirectUploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_csv(request: Request, store: VulnerabilityStoreDep):
    """
    Insert every row of an uploaded CSV as one batch.

    Send `multipart/form-data` with a field named `file`. Rows are mapped from
    the Nessus columns `IP Address`, `CVE` (or `Plugin ID`), `Severity`,
    `Plugin Name` and `Description` without validation; the store decides
    whether the batch is accepted.
    """
    try:
        form = await request.form()
        file = form.get("file")
        if file is None or not _is_upload_file(file):
            return JSONResponse(status_code=400, content={"error": CSV_FILE_REQUIRED})

        text = decode_csv_bytes(await file.read())
        records = map_rows(parse_csv(text))

        try:
            inserted = store.insert_many(records)
        except StoreError as e:
            logger.error("Vulnerability insert rejected: %s", e.message)
            return JSONResponse(status_code=500, content={"error": e.message})

        return DirectUploadResponse(inserted=len(inserted))
    except Exception:
        logger.exception("Upload error")
        return JSONResponse(status_code=500, content={"error": GENERIC_UPLOAD_ERROR})


@router.post(
    "/upload-v2",
    response_model=ReportUploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_report(request: Request, service: ReportServiceDep):
    """
    Create a report from an uploaded CSV.

    Send `multipart/form-data` with `file` and optionally `reportName` and
    `reportDescription`. Without a name the report is called
    "Nessus Scan - <date>"; without a description it is "Uploaded from <file>".
    Rows failing validation are skipped and listed in `data.errors`.
    """
    try:
        form = await request.form()
        file = form.get("file")
        if file is None or not _is_upload_file(file):
            return JSONResponse(status_code=400, content={"error": NO_FILE_PROVIDED})

        report_name = _form_text(form.get("reportName")) or default_report_name()
        report_description = _form_text(form.get("reportDescription")) or (
            default_report_description(file.filename or "")
        )
        result = await service.process_upload(file, report_name, report_description)
        return ReportUploadResponse(data=result)
    except Exception as e:
        return handle_api_error(e)
