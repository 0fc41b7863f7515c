from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field

from ..models.enums import QuestionType


class QuestionResponse(BaseModel):
    id: str
    question_number: int
    question_text: str
    question_type: QuestionType
    options: Optional[Any] = None
    time_limit_seconds: Optional[int] = None
    section_id: str
    metadata: Optional[Any] = Field(default=None, validation_alias=AliasChoices("metadata_", "metadata"))

    model_config = {"from_attributes": True}


class SectionResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    display_order: Optional[int] = None
    time_limit_minutes: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
