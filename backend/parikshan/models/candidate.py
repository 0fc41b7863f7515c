from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..platform.database import Base, generate_uuid
from .enums import TestStatus, pg_enum


class Candidate(Base):
    __tablename__ = "candidates"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    # Set once n8n has issued credentials and the candidate has an auth user
    user_id = Column(String(36), nullable=True, index=True)
    email = Column(String, nullable=False, index=True)
    full_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    profile_data = Column(JSON, nullable=True)
    test_status = Column(pg_enum(TestStatus, "test_status"), default=TestStatus.PENDING)
    test_configuration = Column(JSON, nullable=True)
    credentials_sent = Column(Boolean, default=False)
    download_url = Column(String, nullable=True)

    # Submission bookkeeping, maintained by the submit/reset stored procedures
    submission_count = Column(Integer, default=0)
    last_submitted_at = Column(DateTime(timezone=True), nullable=True)
    can_resubmit = Column(Boolean, default=False)
    locked_by = Column(String(36), nullable=True)
    lock_reason = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    company = relationship("Company", back_populates="candidates")
    questions = relationship("Question", back_populates="candidate", cascade="all, delete-orphan")
    answers = relationship("Answer", cascade="all, delete-orphan")
    evaluation = relationship("Evaluation", uselist=False, cascade="all, delete-orphan")
    test_sessions = relationship("TestSession", back_populates="candidate", cascade="all, delete-orphan")
    submission_logs = relationship("TestSubmissionLog", cascade="all, delete-orphan")
