from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class ContactRequestCreate(BaseModel):
    company_name: str = Field(min_length=1, max_length=200)
    contact_person: str = Field(min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=50)
    company_size: Optional[str] = None
    industry: Optional[str] = None
    preferred_plan: Optional[str] = None
    additional_notes: Optional[str] = Field(default=None, max_length=5000)


class ContactRequestResponse(BaseModel):
    id: str
    company_name: str
    contact_person: str
    email: str
    status: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
