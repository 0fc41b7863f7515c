import json
import logging
from typing import Any, Dict

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ...models.candidate import Candidate
from ...models.profile import Profile
from ...platform.database import get_db
from ...platform.security import get_current_profile
from ...schemas.submission import (
    ResetAssessmentRequest,
    SubmissionStateResponse,
    SubmitAssessmentRequest,
    SubmitAssessmentResponse,
)
from ..webhooks.client import WebhookClient, get_webhook_client
from ..webhooks.config import active_webhooks
from .procedures import AssessmentProcedures, get_procedures
from .service import client_ip, reset_assessment, submission_state, submit_assessment

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Submissions"])


@router.post("/submit-assessment", response_model=SubmitAssessmentResponse)
def submit_assessment_endpoint(
    data: SubmitAssessmentRequest,
    request: Request,
    db: Session = Depends(get_db),
    procedures: AssessmentProcedures = Depends(get_procedures),
    client: WebhookClient = Depends(get_webhook_client),
    current_profile: Profile = Depends(get_current_profile),
):
    if not data.candidate_id or not data.user_id:
        raise HTTPException(status_code=400, detail="candidate_id and user_id are required")
    if data.user_id != current_profile.id:
        raise HTTPException(status_code=403, detail="Cannot submit on behalf of another user")

    return submit_assessment(
        db,
        procedures,
        client,
        candidate_id=data.candidate_id,
        user_id=data.user_id,
        submission_data=data.submission_data,
        user_agent=request.headers.get("user-agent"),
        ip_address=client_ip(
            request.headers.get("x-forwarded-for"),
            request.client.host if request.client else None,
        ),
    )


@router.get("/candidates/{candidate_id}/submission-state", response_model=SubmissionStateResponse)
def get_submission_state(
    candidate_id: str,
    db: Session = Depends(get_db),
    procedures: AssessmentProcedures = Depends(get_procedures),
    current_profile: Profile = Depends(get_current_profile),
):
    candidate = (
        db.query(Candidate)
        .filter(Candidate.id == candidate_id, Candidate.user_id == current_profile.id)
        .first()
    )
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found or access denied")
    return submission_state(procedures, candidate)


@router.post("/reset-candidate-assessment")
def reset_candidate_assessment(
    data: ResetAssessmentRequest,
    db: Session = Depends(get_db),
    procedures: AssessmentProcedures = Depends(get_procedures),
    current_profile: Profile = Depends(get_current_profile),
):
    if not data.candidate_id or not data.admin_user_id:
        raise HTTPException(status_code=400, detail="candidate_id and admin_user_id are required")
    if data.admin_user_id != current_profile.id:
        raise HTTPException(status_code=403, detail="Admin access required")

    candidate = db.query(Candidate).filter(Candidate.id == data.candidate_id).first()
    if current_profile.is_admin and (not candidate or candidate.company_id != current_profile.company_id):
        raise HTTPException(status_code=404, detail="Candidate not found")

    return reset_assessment(
        db,
        procedures,
        candidate_id=data.candidate_id,
        admin_user_id=data.admin_user_id,
        reset_reason=data.reset_reason,
    )


@router.post("/n8n/submit-test")
def submit_test(
    payload: Dict[str, Any] = Body(...),
    client: WebhookClient = Depends(get_webhook_client),
):
    """Forward a completed test to the evaluation workflow as JSON."""
    webhook_url = active_webhooks().test_evaluation
    logger.info(
        "Test submission candidate_id=%s company_name=%s sections_completed=%s total_answers=%s",
        payload.get("candidate_id"),
        payload.get("company_name"),
        payload.get("sections_completed"),
        payload.get("total_answers"),
    )
    headers = {
        "Accept": "application/json",
        "X-Candidate-ID": str(payload.get("candidate_id") or ""),
        "X-Company-ID": str(payload.get("company_id") or ""),
        "X-User-ID": str(payload.get("user_id") or ""),
        "X-Submission-Time": str(payload.get("submission_timestamp") or ""),
        "X-Test-Status": "completed",
    }
    try:
        response = client.post_json(webhook_url, payload, headers=headers)
    except httpx.HTTPError as exc:
        logger.exception("Test submission relay failed")
        raise HTTPException(status_code=500, detail=str(exc))
    if not response.is_success:
        logger.error("Evaluation webhook error status=%s body=%s", response.status_code, response.text)
        raise HTTPException(
            status_code=500,
            detail=f"Production webhook failed: {response.status_code} - {response.text}",
        )

    try:
        webhook_response = response.json()
    except json.JSONDecodeError:
        webhook_response = response.text
    return {
        "success": True,
        "message": "Test submitted successfully for evaluation",
        "webhook_response": webhook_response,
        "webhook_url": webhook_url,
    }
