"""Candidate CSV upload relays to the n8n user-creation workflow."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from ...platform.config import settings
from ...schemas.upload import BulkCsvUploadRequest
from ..webhooks.client import FilePart, WebhookClient, get_webhook_client
from ..webhooks.config import active_webhooks, bulk_candidates_url
from .service import (
    DEFAULT_UPLOAD_FILENAME,
    InvalidTestConfiguration,
    bulk_candidates_payload,
    count_candidate_rows,
    decode_csv,
    new_batch_id,
    parse_candidate_rows,
    parse_test_configuration,
    user_creation_fields,
)

logger = logging.getLogger("parikshan.uploads")

MISSING_BULK_FIELDS = "Missing required data: csvContent, companyId, or adminUserId"

router = APIRouter(tags=["Uploads"])


def _field(form, name: str) -> str | None:
    value = form.get(name)
    if value is None or isinstance(value, UploadFile):
        return None
    value = str(value).strip()
    return value or None


def _csv_file(form) -> UploadFile | None:
    for name in ("csvFile", "file"):
        value = form.get(name)
        if isinstance(value, UploadFile):
            return value
    return None


def _too_large() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"CSV file exceeds {settings.CSV_MAX_UPLOAD_BYTES} bytes",
    )


async def _relay_multipart(request: Request, client: WebhookClient) -> JSONResponse:
    webhook_url = active_webhooks().user_creation
    if not webhook_url:
        raise HTTPException(status_code=500, detail="N8N webhook URL not configured")

    form = await request.form()
    csv_file = _csv_file(form)
    if csv_file is None:
        raise HTTPException(status_code=400, detail="No CSV file uploaded")

    admin_user_id = _field(form, "adminUserId")
    company_id = _field(form, "companyId")
    company_name = _field(form, "companyName")
    industry = _field(form, "industry")
    filename = _field(form, "filename") or csv_file.filename or DEFAULT_UPLOAD_FILENAME

    if not company_id or not admin_user_id:
        raise HTTPException(status_code=400, detail="Missing required data: companyId or adminUserId")

    try:
        test_configuration = parse_test_configuration(_field(form, "testConfiguration"))
    except InvalidTestConfiguration as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    # size is None when the multipart part carried no length
    if csv_file.size is not None and csv_file.size > settings.CSV_MAX_UPLOAD_BYTES:
        raise _too_large()
    content = await csv_file.read()
    if len(content) > settings.CSV_MAX_UPLOAD_BYTES:
        raise _too_large()

    candidates_processed = count_candidate_rows(decode_csv(content))
    batch_id = new_batch_id()
    logger.info(
        "Processing CSV admin_user_id=%s company_id=%s filename=%s size=%d rows=%d batch_id=%s",
        admin_user_id,
        company_id,
        filename,
        len(content),
        candidates_processed,
        batch_id,
    )

    fields = user_creation_fields(
        admin_user_id=admin_user_id,
        company_id=company_id,
        company_name=company_name,
        industry=industry,
        filename=filename,
        batch_id=batch_id,
        test_configuration=test_configuration,
    )
    upload = FilePart(
        field_name="file",
        filename=csv_file.filename or DEFAULT_UPLOAD_FILENAME,
        content=content,
        content_type=csv_file.content_type or "text/csv",
    )
    try:
        response = await run_in_threadpool(client.post_form, webhook_url, fields, upload=upload)
    except httpx.HTTPError as exc:
        logger.exception("CSV upload relay failed batch_id=%s", batch_id)
        raise HTTPException(status_code=500, detail={"error": "Upload failed", "details": str(exc)})

    if not response.is_success:
        logger.error("N8N error status=%s body=%s", response.status_code, response.text)
        raise HTTPException(
            status_code=500,
            detail={"error": f"Webhook failed: {response.status_code}", "details": response.text},
        )

    return JSONResponse(
        status_code=200,
        content={
            "success": True,
            "message": "CSV processed successfully",
            "admin_user_id": admin_user_id,
            "company_name": company_name,
            "batch_id": batch_id,
            "candidates_processed": candidates_processed,
            "webhook_response": response.text,
        },
    )


async def _relay_json(request: Request, client: WebhookClient) -> JSONResponse:
    webhook_url = bulk_candidates_url()
    if not webhook_url:
        raise HTTPException(status_code=500, detail="N8N webhook URL not configured")

    try:
        raw = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(raw, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    try:
        body = BulkCsvUploadRequest.model_validate(raw)
    except ValidationError:
        body = None
    if body is None or not body.has_required_fields:
        raise HTTPException(status_code=400, detail=MISSING_BULK_FIELDS)

    company_id = body.companyId.strip()
    admin_user_id = body.adminUserId.strip()

    candidates = parse_candidate_rows(body.csvContent, company_id)
    payload = bulk_candidates_payload(
        candidates=candidates,
        company_id=company_id,
        admin_user_id=admin_user_id,
        company_name=body.companyName,
        industry=body.industry,
        filename=body.filename,
    )
    logger.info("Sending %d candidates to bulk webhook company_id=%s", len(candidates), company_id)

    try:
        response = await run_in_threadpool(client.post_json, webhook_url, payload)
    except httpx.HTTPError as exc:
        logger.exception("Bulk candidate relay failed company_id=%s", company_id)
        raise HTTPException(status_code=500, detail=str(exc))
    if not response.is_success:
        logger.error("N8N webhook failed status=%s body=%s", response.status_code, response.text)
        raise HTTPException(
            status_code=500,
            detail=f"N8N webhook failed: {response.status_code} - {response.text}",
        )

    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED,
        content={
            "success": True,
            "message": "CSV upload initiated successfully",
            "candidates_count": len(candidates),
            "admin_user_id": admin_user_id,
            "company_name": body.companyName or "",
        },
    )


@router.post("/csv-upload")
async def csv_upload(request: Request, client: WebhookClient = Depends(get_webhook_client)):
    """Relay an admin's candidate CSV (multipart) to the user-creation workflow."""
    return await _relay_multipart(request, client)


@router.post("/n8n/csv-upload")
async def n8n_csv_upload(request: Request, client: WebhookClient = Depends(get_webhook_client)):
    """Multipart relay with test configuration; JSON bodies use the bulk-candidate webhook."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        return await _relay_json(request, client)
    return await _relay_multipart(request, client)
