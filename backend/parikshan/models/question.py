from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..platform.database import Base, generate_uuid
from .enums import DifficultyLevel, QuestionType, pg_enum


class QuestionTemplate(Base):
    __tablename__ = "question_templates"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    section_id = Column(String(36), ForeignKey("sections.id"), nullable=True, index=True)
    question_number = Column(Integer, nullable=False)
    question_text = Column(Text, nullable=False)
    question_type = Column(pg_enum(QuestionType, "question_type"), nullable=False)
    options = Column(JSON, nullable=True)
    correct_answer = Column(String, nullable=True)
    difficulty_level = Column(pg_enum(DifficultyLevel, "difficulty_level"), nullable=True)
    industry_context = Column(String, nullable=True)
    is_template = Column(Boolean, default=True)
    # "metadata" is reserved on declarative classes
    metadata_ = Column("metadata", JSON, nullable=True)
    relevance_tag = Column(String, nullable=True)
    scale_dimension = Column(String, nullable=False, default="")
    scoring_logic = Column(JSON, nullable=True)
    test_category = Column(String, nullable=True)
    test_name = Column(String, nullable=True)
    time_to_answer_seconds = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Question(Base):
    """A question personalized for one candidate (by n8n or from a template)."""

    __tablename__ = "questions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    candidate_id = Column(String(36), ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False)
    section_id = Column(String(36), ForeignKey("sections.id"), nullable=False, index=True)
    template_id = Column(String(36), ForeignKey("question_templates.id"), nullable=True)
    question_number = Column(Integer, nullable=False)
    question_text = Column(Text, nullable=False)
    question_type = Column(pg_enum(QuestionType, "question_type"), nullable=False)
    options = Column(JSON, nullable=True)
    time_limit_seconds = Column(Integer, nullable=True)
    metadata_ = Column("metadata", JSON, nullable=True)
    created_by_flow = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    candidate = relationship("Candidate", back_populates="questions")
