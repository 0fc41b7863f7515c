from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models.candidate import Candidate
from ...models.enums import TestStatus
from ...models.profile import Profile


def candidate_for_profile(db: Session, profile: Profile) -> Candidate:
    """The candidate row linked to the caller's auth user."""
    candidate = db.query(Candidate).filter(Candidate.user_id == profile.id).first()
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return candidate


def company_candidate(db: Session, profile: Profile, candidate_id: str) -> Candidate:
    candidate = (
        db.query(Candidate)
        .filter(Candidate.id == candidate_id, Candidate.company_id == profile.company_id)
        .first()
    )
    if not candidate or not profile.company_id:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return candidate


def readable_candidate(db: Session, profile: Profile, candidate_id: str) -> Candidate:
    """Candidate visible to the caller: its own record, or one of its company's as admin."""
    candidate = db.query(Candidate).filter(Candidate.id == candidate_id).first()
    if candidate and candidate.user_id == profile.id:
        return candidate
    if candidate and profile.is_admin and profile.company_id and candidate.company_id == profile.company_id:
        return candidate
    raise HTTPException(status_code=404, detail="Candidate not found")


def candidate_stats(db: Session, company_id: str) -> dict:
    total = db.query(Candidate).filter(Candidate.company_id == company_id).count()
    completed = (
        db.query(Candidate)
        .filter(Candidate.company_id == company_id, Candidate.test_status == TestStatus.COMPLETED)
        .count()
    )
    completion_rate = round(completed / total * 100) if total else 0
    return {"total": total, "completed": completed, "completion_rate": completion_rate}
