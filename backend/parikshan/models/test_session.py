import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..platform.database import Base, generate_uuid


class TestSessionStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    EXPIRED = "expired"


class TestSession(Base):
    """One timed attempt at a section by a candidate."""

    __test__ = False
    __tablename__ = "test_sessions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    candidate_id = Column(String(36), ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True)
    section_id = Column(String(36), ForeignKey("sections.id"), nullable=False)
    attempt = Column(Integer, default=1)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(String, default=TestSessionStatus.IN_PROGRESS.value)
    total_time_seconds = Column(Integer, nullable=True)

    candidate = relationship("Candidate", back_populates="test_sessions")
    section = relationship("Section", lazy="joined")
