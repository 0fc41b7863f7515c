"""Timed section sessions: start, remaining time, completion and expiry."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models.candidate import Candidate
from ...models.enums import TestStatus
from ...models.section import Section
from ...models.test_session import TestSession, TestSessionStatus
from ...platform.config import settings

logger = logging.getLogger(__name__)

EXPIRED_DETAIL = "Section time expired and was auto-submitted"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Return datetime as timezone-aware UTC for subtraction."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def time_limit_seconds(session: TestSession) -> int:
    minutes = session.section.time_limit_minutes if session.section else None
    return (minutes or settings.DEFAULT_SECTION_TIME_LIMIT_MINUTES) * 60


def elapsed_seconds(session: TestSession) -> int:
    if not session.started_at:
        return 0
    return max(0, int((utcnow() - ensure_utc(session.started_at)).total_seconds()))


def time_remaining_seconds(session: TestSession) -> int:
    if session.status != TestSessionStatus.IN_PROGRESS.value:
        return 0
    return max(0, time_limit_seconds(session) - elapsed_seconds(session))


def format_remaining(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{secs:02d}"


def serialize_session(session: TestSession) -> Dict[str, Any]:
    remaining = time_remaining_seconds(session)
    return {
        "id": session.id,
        "candidate_id": session.candidate_id,
        "section_id": session.section_id,
        "attempt": session.attempt or 1,
        "status": session.status,
        "started_at": session.started_at,
        "completed_at": session.completed_at,
        "total_time_seconds": session.total_time_seconds,
        "time_limit_seconds": time_limit_seconds(session),
        "time_remaining_seconds": remaining,
        "time_remaining_display": format_remaining(remaining),
        "time_warning": session.status == TestSessionStatus.IN_PROGRESS.value
        and remaining < settings.TIME_WARNING_SECONDS,
    }


def latest_session(db: Session, candidate_id: str, section_id: str) -> TestSession | None:
    return (
        db.query(TestSession)
        .filter(TestSession.candidate_id == candidate_id, TestSession.section_id == section_id)
        .order_by(TestSession.attempt.desc())
        .first()
    )


def expire_if_timed_out(session: TestSession, db: Session) -> bool:
    """Close an in-progress session whose time has run out. Returns True when expired."""
    if session.status == TestSessionStatus.EXPIRED.value:
        return True
    if session.status != TestSessionStatus.IN_PROGRESS.value:
        return False
    if time_remaining_seconds(session) > 0:
        return False
    session.status = TestSessionStatus.EXPIRED.value
    session.completed_at = utcnow()
    session.total_time_seconds = time_limit_seconds(session)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to close expired session")
    logger.info(
        "Section session expired candidate_id=%s section_id=%s attempt=%s",
        session.candidate_id,
        session.section_id,
        session.attempt,
    )
    return True


def start_session(db: Session, candidate: Candidate, section_id: str) -> TestSession:
    section = db.query(Section).filter(Section.id == section_id).first()
    if not section:
        raise HTTPException(status_code=404, detail="Section not found")

    current = latest_session(db, candidate.id, section_id)
    if current is not None:
        if current.status == TestSessionStatus.IN_PROGRESS.value and not expire_if_timed_out(current, db):
            return current
        # A finished section is only reopened after an admin reset.
        if not candidate.can_resubmit:
            if current.status == TestSessionStatus.EXPIRED.value:
                raise HTTPException(status_code=409, detail=EXPIRED_DETAIL)
            raise HTTPException(status_code=409, detail="Section already completed")

    session = TestSession(
        candidate_id=candidate.id,
        section_id=section_id,
        attempt=(current.attempt or 1) + 1 if current else 1,
        started_at=utcnow(),
        status=TestSessionStatus.IN_PROGRESS.value,
    )
    db.add(session)
    if candidate.test_status in (None, TestStatus.PENDING, TestStatus.QUESTIONS_GENERATED):
        candidate.test_status = TestStatus.IN_PROGRESS
    try:
        db.commit()
        db.refresh(session)
    except Exception:
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to start section")
    logger.info(
        "Section session started candidate_id=%s section_id=%s attempt=%s",
        candidate.id,
        section_id,
        session.attempt,
    )
    return session


def get_session(db: Session, candidate: Candidate, section_id: str) -> TestSession:
    session = latest_session(db, candidate.id, section_id)
    if not session:
        raise HTTPException(status_code=404, detail="Section not started")
    expire_if_timed_out(session, db)
    return session


def complete_session(db: Session, candidate: Candidate, section_id: str) -> TestSession:
    session = latest_session(db, candidate.id, section_id)
    if not session:
        raise HTTPException(status_code=404, detail="Section not started")
    if expire_if_timed_out(session, db):
        raise HTTPException(status_code=409, detail=EXPIRED_DETAIL)
    if session.status == TestSessionStatus.COMPLETED.value:
        return session

    session.status = TestSessionStatus.COMPLETED.value
    session.completed_at = utcnow()
    session.total_time_seconds = min(elapsed_seconds(session), time_limit_seconds(session))
    try:
        db.commit()
        db.refresh(session)
    except Exception:
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to complete section")
    return session


def ensure_section_open(db: Session, candidate_id: str, section_id: str) -> None:
    """Reject answers for a section whose timed session has expired."""
    session = latest_session(db, candidate_id, section_id)
    if session is not None and expire_if_timed_out(session, db):
        raise HTTPException(status_code=409, detail="Section time has expired")
