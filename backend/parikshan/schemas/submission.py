from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class SubmitAssessmentRequest(BaseModel):
    candidate_id: Optional[str] = None
    user_id: Optional[str] = None
    submission_data: Optional[Dict[str, Any]] = None


class SubmitAssessmentResponse(BaseModel):
    success: bool = True
    message: str
    submission_id: str
    webhook_sent: bool


class ResetAssessmentRequest(BaseModel):
    candidate_id: Optional[str] = None
    admin_user_id: Optional[str] = None
    reset_reason: Optional[str] = None


class SubmissionStateResponse(BaseModel):
    can_submit: bool
    reason: str
    current_status: str
    submission_count: int
    last_submitted_at: Optional[datetime] = None
    is_locked: bool
