from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role_id: str
    role_name: Optional[str] = None
    company_id: Optional[str] = None
    phone: Optional[str] = None
    profile_data: Optional[Any] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
