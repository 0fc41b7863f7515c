"""Endpoints called by n8n workflows and the test-taking client."""

import hmac
import logging

import httpx
from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from ...models.candidate import Candidate
from ...models.enums import TestStatus
from ...models.evaluation import Evaluation
from ...models.answer import Answer
from ...models.profile import Profile
from ...platform.config import settings
from ...platform.database import get_db
from ...platform.security import get_current_profile
from ...schemas.answer import SaveAnswerRequest
from ...schemas.candidate import CandidateCreateRequest
from ...schemas.evaluation import EvaluationResultIn
from ..test_sessions.service import ensure_section_open, utcnow
from ..webhooks.client import WebhookClient, get_webhook_client
from ..webhooks.config import candidate_webhook_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/n8n", tags=["n8n"])


@router.post("/create-candidate")
def create_candidate(
    data: CandidateCreateRequest,
    db: Session = Depends(get_db),
    client: WebhookClient = Depends(get_webhook_client),
    current_profile: Profile = Depends(get_current_profile),
):
    company_id = data.company_id or current_profile.company_id
    if not company_id:
        raise HTTPException(status_code=400, detail="company_id is required")

    existing = db.query(Candidate).filter(Candidate.email == data.email).first()
    if not existing:
        db.add(
            Candidate(
                email=data.email,
                full_name=data.full_name,
                user_id=data.user_id,
                company_id=company_id,
                test_status=TestStatus.PENDING,
            )
        )
        try:
            db.commit()
        except Exception as exc:
            db.rollback()
            logger.error("Error creating candidate email=%s error=%s", data.email, exc)
            raise HTTPException(status_code=500, detail="Failed to create candidate")

    webhook_url = candidate_webhook_url()
    if webhook_url:
        payload = {
            "email": data.email,
            "full_name": data.full_name,
            "user_id": data.user_id,
            "company_id": company_id,
            "action": "create_candidate",
        }
        try:
            client.post_json(webhook_url, payload)
        except httpx.HTTPError as exc:
            # Notification only; the candidate row is already stored
            logger.error("Error calling candidate webhook email=%s error=%s", data.email, exc)

    return {"success": True}


@router.post("/save-answer")
def save_answer(
    data: SaveAnswerRequest,
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
):
    candidate = (
        db.query(Candidate)
        .filter(Candidate.id == data.candidate_id, Candidate.user_id == current_profile.id)
        .first()
    )
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found or access denied")
    ensure_section_open(db, candidate.id, data.section_id)

    answer = (
        db.query(Answer)
        .filter(Answer.candidate_id == data.candidate_id, Answer.question_id == data.question_id)
        .first()
    )
    if answer is None:
        answer = Answer(candidate_id=data.candidate_id, question_id=data.question_id)
        db.add(answer)
    answer.section_id = data.section_id
    answer.answer_data = data.answer_data
    answer.time_taken_seconds = data.time_taken_seconds
    answer.submitted_at = utcnow()
    try:
        db.commit()
    except Exception as exc:
        db.rollback()
        logger.error("Error saving answer candidate_id=%s question_id=%s error=%s", data.candidate_id, data.question_id, exc)
        raise HTTPException(status_code=500, detail="Failed to save answer")
    return {"success": True}


def _verify_callback_secret(provided: str | None) -> None:
    expected = settings.N8N_CALLBACK_SECRET
    if not expected:
        return
    if not hmac.compare_digest(provided or "", expected):
        raise HTTPException(status_code=401, detail="Invalid callback secret")


@router.post("/evaluation-result")
def evaluation_result(
    data: EvaluationResultIn,
    db: Session = Depends(get_db),
    x_n8n_secret: str | None = Header(default=None, alias="X-N8N-Secret"),
):
    _verify_callback_secret(x_n8n_secret)
    if not data.candidate_id:
        raise HTTPException(status_code=400, detail="candidate_id is required")

    evaluation = db.query(Evaluation).filter(Evaluation.candidate_id == data.candidate_id).first()
    if evaluation is None:
        evaluation = Evaluation(candidate_id=data.candidate_id)
        db.add(evaluation)
    evaluation.total_score = data.total_score
    evaluation.section_scores = data.section_scores if data.section_scores is not None else {}
    evaluation.evaluation_data = data.evaluation_data if data.evaluation_data is not None else {}
    evaluation.pdf_report_url = data.pdf_report_url
    evaluation.evaluation_status = data.evaluation_status
    evaluation.updated_at = utcnow()
    try:
        db.commit()
    except Exception as exc:
        db.rollback()
        logger.error("Error saving evaluation candidate_id=%s error=%s", data.candidate_id, exc)
        raise HTTPException(status_code=500, detail="Failed to save evaluation")

    logger.info(
        "Evaluation stored candidate_id=%s status=%s total_score=%s",
        data.candidate_id,
        data.evaluation_status,
        data.total_score,
    )
    return {"success": True}
