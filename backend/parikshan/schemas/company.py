from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CompanyOnboard(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    industry: str = Field(min_length=1, max_length=200)


class CompanyResponse(BaseModel):
    id: str
    name: str
    industry: str
    email: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
