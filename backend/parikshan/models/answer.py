from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from ..platform.database import Base, generate_uuid


class Answer(Base):
    __tablename__ = "answers"
    __table_args__ = (
        UniqueConstraint("candidate_id", "question_id", name="answers_candidate_id_question_id_key"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    candidate_id = Column(String(36), ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(String(36), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    section_id = Column(String(36), ForeignKey("sections.id"), nullable=False)
    answer_data = Column(JSON, nullable=False)
    time_taken_seconds = Column(Integer, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
