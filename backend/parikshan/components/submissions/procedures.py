"""Gateway to the Supabase stored procedures that own submission state.

The eligibility, submit and reset rules live in Postgres
(``check_submission_eligibility``, ``submit_assessment`` and
``reset_candidate_assessment``). This module only calls them and maps the
first result row onto a small dataclass.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...platform.database import get_db

logger = logging.getLogger(__name__)


class ProcedureError(RuntimeError):
    """Raised when a stored procedure fails or returns no row."""


@dataclass
class Eligibility:
    can_submit: bool
    reason: str
    current_status: str
    submission_count: int


@dataclass
class SubmitOutcome:
    success: bool
    message: str
    submission_id: str | None


@dataclass
class ResetOutcome:
    success: bool
    message: str


class AssessmentProcedures:
    def __init__(self, db: Session):
        self.db = db

    def _call(self, sql: str, params: dict[str, Any], *, commit: bool = False):
        try:
            row = self.db.execute(text(sql), params).mappings().first()
            if commit:
                self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Stored procedure failed sql=%s error=%s", sql, exc)
            raise ProcedureError(str(exc)) from exc
        if row is None:
            raise ProcedureError(f"No result from {sql}")
        return row

    def check_submission_eligibility(self, candidate_id: str) -> Eligibility:
        row = self._call(
            "SELECT * FROM check_submission_eligibility(CAST(:candidate_uuid AS uuid))",
            {"candidate_uuid": candidate_id},
        )
        return Eligibility(
            can_submit=bool(row["can_submit"]),
            reason=row["reason"] or "",
            current_status=str(row["current_status"] or ""),
            submission_count=int(row["submission_count"] or 0),
        )

    def submit_assessment(self, candidate_id: str, submission_metadata: dict[str, Any]) -> SubmitOutcome:
        row = self._call(
            "SELECT * FROM submit_assessment(CAST(:candidate_uuid AS uuid), CAST(:submission_metadata AS jsonb))",
            {"candidate_uuid": candidate_id, "submission_metadata": json.dumps(submission_metadata)},
            commit=True,
        )
        submission_id = row["submission_id"]
        return SubmitOutcome(
            success=bool(row["success"]),
            message=row["message"] or "",
            submission_id=str(submission_id) if submission_id is not None else None,
        )

    def reset_candidate_assessment(self, candidate_id: str, admin_user_id: str, reset_reason: str) -> ResetOutcome:
        row = self._call(
            "SELECT * FROM reset_candidate_assessment("
            "CAST(:candidate_uuid AS uuid), CAST(:admin_user_id AS uuid), :reset_reason)",
            {"candidate_uuid": candidate_id, "admin_user_id": admin_user_id, "reset_reason": reset_reason},
            commit=True,
        )
        return ResetOutcome(success=bool(row["success"]), message=row["message"] or "")


def get_procedures(db: Session = Depends(get_db)) -> AssessmentProcedures:
    return AssessmentProcedures(db)
