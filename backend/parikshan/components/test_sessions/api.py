from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...models.profile import Profile
from ...platform.database import get_db
from ...platform.security import get_current_profile
from ...schemas.test_session import TestSessionResponse
from ..candidates.service import candidate_for_profile
from .service import complete_session, get_session, serialize_session, start_session

router = APIRouter(prefix="/test-sessions", tags=["Test Sessions"])


@router.post("/{section_id}/start", response_model=TestSessionResponse)
def start_section(
    section_id: str,
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
):
    candidate = candidate_for_profile(db, current_profile)
    return serialize_session(start_session(db, candidate, section_id))


@router.get("/{section_id}", response_model=TestSessionResponse)
def get_section_session(
    section_id: str,
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
):
    candidate = candidate_for_profile(db, current_profile)
    return serialize_session(get_session(db, candidate, section_id))


@router.post("/{section_id}/complete", response_model=TestSessionResponse)
def complete_section(
    section_id: str,
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
):
    candidate = candidate_for_profile(db, current_profile)
    return serialize_session(complete_session(db, candidate, section_id))
