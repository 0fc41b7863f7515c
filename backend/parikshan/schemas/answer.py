from typing import Any, Optional

from pydantic import BaseModel, Field


class SaveAnswerRequest(BaseModel):
    candidate_id: str
    question_id: str
    section_id: str
    answer_data: Any
    time_taken_seconds: Optional[int] = Field(default=None, ge=0)
