from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from ..platform.database import Base, generate_uuid


class ContactRequest(Base):
    __tablename__ = "contact_requests"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    company_name = Column(String, nullable=False)
    contact_person = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    company_size = Column(String, nullable=True)
    industry = Column(String, nullable=True)
    preferred_plan = Column(String, nullable=True)
    additional_notes = Column(Text, nullable=True)
    status = Column(String, default="new")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
