"""Template-based question generation.

Copies each section's ``question_templates`` into per-candidate ``questions``
rows. Sections that already hold questions for the candidate are left alone,
so re-running is safe.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ...models.candidate import Candidate
from ...models.enums import TestStatus
from ...models.question import Question, QuestionTemplate
from ...models.section import Section

logger = logging.getLogger(__name__)


class CandidateNotFound(LookupError):
    pass


def _question_from_template(template: QuestionTemplate, candidate: Candidate, section: Section) -> Question:
    return Question(
        template_id=template.id,
        section_id=section.id,
        candidate_id=candidate.id,
        company_id=candidate.company_id,
        question_number=template.question_number,
        question_text=template.question_text,
        question_type=template.question_type,
        options=template.options,
        time_limit_seconds=template.time_to_answer_seconds,
        metadata_=template.metadata_,
        created_by_flow=False,
    )


def generate_questions_for_candidate(db: Session, candidate_id: str) -> Dict[str, Any]:
    candidate = db.query(Candidate).filter(Candidate.id == candidate_id).first()
    if not candidate:
        raise CandidateNotFound(candidate_id)
    logger.info("Generating questions candidate_id=%s email=%s", candidate.id, candidate.email)

    created: Dict[str, int] = {}
    skipped: List[str] = []
    sections = db.query(Section).order_by(Section.display_order.asc()).all()
    for section in sections:
        existing = (
            db.query(Question)
            .filter(Question.candidate_id == candidate.id, Question.section_id == section.id)
            .count()
        )
        if existing:
            logger.info(
                "Questions already exist candidate_id=%s section=%s count=%d",
                candidate.id,
                section.name,
                existing,
            )
            skipped.append(section.id)
            continue

        templates = (
            db.query(QuestionTemplate)
            .filter(QuestionTemplate.section_id == section.id)
            .order_by(QuestionTemplate.question_number.asc())
            .all()
        )
        if not templates:
            continue
        for template in templates:
            db.add(_question_from_template(template, candidate, section))
        created[section.id] = len(templates)

    candidate.test_status = TestStatus.QUESTIONS_GENERATED
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Question generation failed candidate_id=%s", candidate.id)
        raise

    total = sum(created.values())
    logger.info(
        "Generated questions candidate_id=%s sections=%d questions=%d skipped=%d",
        candidate.id,
        len(created),
        total,
        len(skipped),
    )
    return {
        "candidate_id": candidate.id,
        "questions_created": total,
        "sections_created": created,
        "sections_skipped": skipped,
    }


def generate_questions_for_pending(db: Session) -> List[Dict[str, Any]]:
    pending_ids = [
        row.id
        for row in db.query(Candidate.id).filter(Candidate.test_status == TestStatus.PENDING).all()
    ]
    logger.info("Found %d pending candidates", len(pending_ids))
    results = []
    for candidate_id in pending_ids:
        try:
            results.append(generate_questions_for_candidate(db, candidate_id))
        except Exception as exc:
            # One bad candidate must not stop the batch
            logger.error("Question generation failed candidate_id=%s error=%s", candidate_id, exc)
            results.append({"candidate_id": candidate_id, "error": str(exc)})
    return results
