from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator


class EvaluationResultIn(BaseModel):
    """Callback body posted by the n8n evaluation workflow."""

    candidate_id: Optional[str] = None
    total_score: Optional[Any] = None
    section_scores: Optional[Any] = None
    evaluation_data: Optional[Any] = None
    pdf_report_url: Optional[str] = None
    evaluation_status: str = "completed"

    @field_validator("total_score", mode="before")
    @classmethod
    def _parse_score(cls, value):
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None


class EvaluationResponse(BaseModel):
    id: str
    candidate_id: str
    total_score: Optional[float] = None
    section_scores: Optional[Any] = None
    evaluation_data: Optional[Any] = None
    pdf_report_url: Optional[str] = None
    evaluation_status: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
