"""Assessment submission: eligibility, submit RPC, evaluation webhook, reset."""

from __future__ import annotations

import json
import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models.candidate import Candidate
from ...models.company import Company
from ...models.profile import Profile
from ...models.submission_log import TestSubmissionLog
from ..webhooks.client import DeliveryResult, WebhookClient
from ..webhooks.config import active_webhooks
from .procedures import AssessmentProcedures, ProcedureError

logger = logging.getLogger(__name__)

DEFAULT_RESET_REASON = "Admin reset for re-evaluation"
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_idempotency_key(candidate_id: str) -> str:
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{candidate_id}-{int(time.time() * 1000)}-{suffix}"


def client_ip(forwarded_for: Optional[str], client_host: Optional[str]) -> str:
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return client_host or "unknown"


def build_submission_metadata(
    submission_data: Optional[Dict[str, Any]],
    *,
    idempotency_key: str,
    user_agent: Optional[str],
    ip_address: str,
) -> Dict[str, Any]:
    metadata = dict(submission_data or {})
    metadata.update(
        {
            "idempotency_key": idempotency_key,
            "submitted_via": "web_portal",
            "user_agent": user_agent or "",
            "ip_address": ip_address,
        }
    )
    return metadata


def _form_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if value is None:
        return ""
    return str(value)


def evaluation_fields(
    candidate: Candidate,
    company: Optional[Company],
    *,
    user_id: str,
    submission_attempt: int,
    submission_id: str,
    idempotency_key: str,
    submission_data: Optional[Dict[str, Any]],
) -> Dict[str, str]:
    """Multipart fields for the test-evaluation workflow."""
    fields = {
        "candidate_id": candidate.id,
        "user_id": user_id,
        "full_name": candidate.full_name or "",
        "email": candidate.email or "",
        "company_name": company.name if company else "",
        "company_industry": company.industry if company else "",
        "submission_attempt": str(submission_attempt),
        "submission_id": submission_id,
        "idempotency_key": idempotency_key,
        "test_completed_at": utcnow().isoformat(),
        "action": "test_evaluation",
    }
    for key, value in (submission_data or {}).items():
        fields[key] = _form_value(value)
    return fields


def record_webhook_delivery(db: Session, submission_id: str, result: DeliveryResult) -> None:
    log = db.query(TestSubmissionLog).filter(TestSubmissionLog.id == submission_id).first()
    if not log:
        logger.warning("Submission log not found submission_id=%s", submission_id)
        return
    log.webhook_status = "success" if result.success else "failed"
    log.webhook_response = result.as_log_payload()
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to record webhook delivery submission_id=%s", submission_id)


def submit_assessment(
    db: Session,
    procedures: AssessmentProcedures,
    client: WebhookClient,
    *,
    candidate_id: str,
    user_id: str,
    submission_data: Optional[Dict[str, Any]],
    user_agent: Optional[str],
    ip_address: str,
) -> Dict[str, Any]:
    candidate = (
        db.query(Candidate)
        .filter(Candidate.id == candidate_id, Candidate.user_id == user_id)
        .first()
    )
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found or access denied")

    try:
        eligibility = procedures.check_submission_eligibility(candidate_id)
    except ProcedureError:
        raise HTTPException(status_code=500, detail="Failed to check submission eligibility")
    if not eligibility.can_submit:
        raise HTTPException(
            status_code=409,
            detail={
                "error": eligibility.reason,
                "current_status": eligibility.current_status,
                "submission_count": eligibility.submission_count,
            },
        )

    idempotency_key = new_idempotency_key(candidate_id)
    metadata = build_submission_metadata(
        submission_data,
        idempotency_key=idempotency_key,
        user_agent=user_agent,
        ip_address=ip_address,
    )
    try:
        outcome = procedures.submit_assessment(candidate_id, metadata)
    except ProcedureError:
        raise HTTPException(status_code=500, detail="Failed to submit assessment")
    if not outcome.success or not outcome.submission_id:
        raise HTTPException(status_code=409, detail=outcome.message or "Submission rejected")

    company = db.query(Company).filter(Company.id == candidate.company_id).first()
    submission_attempt = eligibility.submission_count + 1
    fields = evaluation_fields(
        candidate,
        company,
        user_id=user_id,
        submission_attempt=submission_attempt,
        submission_id=outcome.submission_id,
        idempotency_key=idempotency_key,
        submission_data=submission_data,
    )
    result = client.post_form_with_retry(
        active_webhooks().test_evaluation,
        fields,
        headers={
            "X-Idempotency-Key": idempotency_key,
            "X-Submission-Attempt": str(submission_attempt),
        },
        context=f"candidate_id={candidate_id} submission_id={outcome.submission_id}",
    )
    record_webhook_delivery(db, outcome.submission_id, result)

    logger.info(
        "Assessment submitted candidate_id=%s submission_id=%s attempt=%d webhook_sent=%s attempts=%d",
        candidate_id,
        outcome.submission_id,
        submission_attempt,
        result.success,
        result.attempts,
    )
    return {
        "success": True,
        "message": outcome.message,
        "submission_id": outcome.submission_id,
        "webhook_sent": result.success,
    }


def submission_state(procedures: AssessmentProcedures, candidate: Candidate) -> Dict[str, Any]:
    try:
        eligibility = procedures.check_submission_eligibility(candidate.id)
    except ProcedureError:
        raise HTTPException(status_code=500, detail="Failed to check submission eligibility")
    return {
        "can_submit": eligibility.can_submit,
        "reason": eligibility.reason,
        "current_status": eligibility.current_status,
        "submission_count": eligibility.submission_count,
        "last_submitted_at": candidate.last_submitted_at,
        "is_locked": eligibility.current_status == "submitted" and not eligibility.can_submit,
    }


def reset_assessment(
    db: Session,
    procedures: AssessmentProcedures,
    *,
    candidate_id: str,
    admin_user_id: str,
    reset_reason: Optional[str],
) -> Dict[str, Any]:
    admin = db.query(Profile).filter(Profile.id == admin_user_id).first()
    if not admin or not admin.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")

    reason = reset_reason or DEFAULT_RESET_REASON
    try:
        outcome = procedures.reset_candidate_assessment(candidate_id, admin_user_id, reason)
    except ProcedureError:
        raise HTTPException(status_code=500, detail="Failed to reset assessment")
    if not outcome.success:
        raise HTTPException(status_code=400, detail=outcome.message)

    candidate = db.query(Candidate).filter(Candidate.id == candidate_id).first()
    logger.info(
        "Assessment reset candidate_id=%s name=%s email=%s reset_by=%s reason=%s",
        candidate_id,
        candidate.full_name if candidate else None,
        candidate.email if candidate else None,
        admin_user_id,
        reason,
    )
    return {
        "success": True,
        "message": outcome.message,
        "candidate_id": candidate_id,
        "reset_by": admin_user_id,
        "reset_reason": reason,
    }
