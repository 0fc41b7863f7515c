from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from ..platform.database import Base, generate_uuid

ADMIN_ROLE = "admin"
CANDIDATE_ROLE = "candidate"


class Role(Base):
    __tablename__ = "roles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
