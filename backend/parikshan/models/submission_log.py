from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from ..platform.database import Base, generate_uuid


class TestSubmissionLog(Base):
    """Written by the submit_assessment procedure; webhook columns updated by the API."""

    __test__ = False
    __tablename__ = "test_submission_logs"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    candidate_id = Column(String(36), ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True)
    submission_attempt = Column(Integer, nullable=False)
    submission_metadata = Column(JSON, nullable=True)
    submitted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    webhook_status = Column(String, nullable=True)
    webhook_response = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
