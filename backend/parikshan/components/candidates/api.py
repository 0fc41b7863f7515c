from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ...models.candidate import Candidate
from ...models.evaluation import Evaluation
from ...models.profile import Profile
from ...models.question import Question
from ...platform.database import get_db
from ...platform.security import get_current_profile, require_admin
from ...schemas.candidate import CandidateProfileUpdate, CandidateResponse, CandidateStats
from ...schemas.evaluation import EvaluationResponse
from ...schemas.question import QuestionResponse
from .service import candidate_for_profile, candidate_stats, company_candidate, readable_candidate

router = APIRouter(tags=["Candidates"])


def _require_company(profile: Profile) -> str:
    if not profile.company_id:
        raise HTTPException(status_code=404, detail="Company not found")
    return profile.company_id


@router.get("/candidates", response_model=List[CandidateResponse])
def list_candidates(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_admin),
):
    company_id = _require_company(current_profile)
    return (
        db.query(Candidate)
        .filter(Candidate.company_id == company_id)
        .order_by(Candidate.created_at.desc())
        .all()
    )


@router.get("/candidates/stats", response_model=CandidateStats)
def get_candidate_stats(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_admin),
):
    return candidate_stats(db, _require_company(current_profile))


@router.get("/candidates/me", response_model=CandidateResponse)
def get_my_candidate(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
):
    return candidate_for_profile(db, current_profile)


@router.patch("/candidates/me", response_model=CandidateResponse)
def update_my_candidate(
    data: CandidateProfileUpdate,
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
):
    candidate = candidate_for_profile(db, current_profile)
    updates = data.model_dump(exclude_unset=True)
    if "phone" in updates:
        updates["phone"] = (updates["phone"] or "").strip() or None
    for k, v in updates.items():
        setattr(candidate, k, v)
    try:
        db.commit()
        db.refresh(candidate)
    except Exception:
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update profile")
    return candidate


@router.delete("/candidates/{candidate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_candidate(
    candidate_id: str,
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_admin),
):
    candidate = company_candidate(db, current_profile, candidate_id)
    try:
        db.delete(candidate)
        db.commit()
    except Exception:
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to delete candidate")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/candidates/{candidate_id}/questions", response_model=List[QuestionResponse])
def list_candidate_questions(
    candidate_id: str,
    section_id: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
):
    candidate = readable_candidate(db, current_profile, candidate_id)
    query = db.query(Question).filter(Question.candidate_id == candidate.id)
    if section_id:
        query = query.filter(Question.section_id == section_id)
    return query.order_by(Question.question_number.asc()).all()


@router.get("/evaluations", response_model=List[EvaluationResponse])
def list_evaluations(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_admin),
):
    company_id = _require_company(current_profile)
    return (
        db.query(Evaluation)
        .join(Candidate, Candidate.id == Evaluation.candidate_id)
        .filter(Candidate.company_id == company_id)
        .order_by(Evaluation.updated_at.desc())
        .all()
    )
