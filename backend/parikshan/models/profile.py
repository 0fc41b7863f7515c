from sqlalchemy import JSON, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..platform.database import Base
from .role import ADMIN_ROLE


class Profile(Base):
    """One row per Supabase auth user; ``id`` equals ``auth.users.id``."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)
    email = Column(String, nullable=False, index=True)
    full_name = Column(String, nullable=True)
    role_id = Column(String(36), ForeignKey("roles.id"), nullable=False)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=True, index=True)
    phone = Column(String, nullable=True)
    profile_data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    role = relationship("Role", lazy="joined")
    company = relationship("Company", back_populates="profiles")

    @property
    def role_name(self) -> str | None:
        return self.role.name if self.role else None

    @property
    def is_admin(self) -> bool:
        return self.role_name == ADMIN_ROLE
