import logging

from .celery_app import celery_app
from ..components.questions.service import (
    CandidateNotFound,
    generate_questions_for_candidate,
    generate_questions_for_pending as _generate_for_pending,
)
from ..platform.database import SessionLocal

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    name="parikshan.tasks.question_tasks.generate_questions",
)
def generate_questions(self, candidate_id: str):
    """Copy question templates into questions for one candidate."""
    db = SessionLocal()
    try:
        return generate_questions_for_candidate(db, candidate_id)
    except CandidateNotFound:
        logger.warning("Question generation skipped, candidate not found candidate_id=%s", candidate_id)
        return {"candidate_id": candidate_id, "error": "Candidate not found"}
    except Exception as exc:
        logger.error("Question generation task failed candidate_id=%s error=%s", candidate_id, exc)
        raise self.retry(exc=exc)
    finally:
        db.close()


@celery_app.task(name="parikshan.tasks.question_tasks.generate_questions_for_pending")
def generate_questions_for_pending():
    db = SessionLocal()
    try:
        results = _generate_for_pending(db)
    finally:
        db.close()
    return {
        "status": "ok",
        "candidates": len(results),
        "failed": sum(1 for r in results if "error" in r),
    }
