from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ..models.enums import TestStatus


class CandidateProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=50)
    profile_data: Optional[Dict[str, Any]] = None

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v: Optional[str]) -> str:
        # omit the field to keep the current name
        if v is None or not v.strip():
            raise ValueError("full_name cannot be empty")
        return v.strip()


class CandidateCreateRequest(BaseModel):
    email: EmailStr
    full_name: str = Field(min_length=1, max_length=200)
    user_id: Optional[str] = None
    company_id: Optional[str] = None


class CandidateResponse(BaseModel):
    id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    test_status: Optional[TestStatus] = None
    company_id: str
    user_id: Optional[str] = None
    profile_data: Optional[Any] = None
    submission_count: Optional[int] = None
    last_submitted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CandidateStats(BaseModel):
    total: int
    completed: int
    completion_rate: int
