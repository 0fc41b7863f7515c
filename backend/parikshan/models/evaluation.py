from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, String
from sqlalchemy.sql import func

from ..platform.database import Base, generate_uuid


class Evaluation(Base):
    __tablename__ = "evaluations"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    candidate_id = Column(
        String(36), ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    total_score = Column(Float, nullable=True)
    section_scores = Column(JSON, nullable=True)
    evaluation_data = Column(JSON, nullable=True)
    pdf_report_url = Column(String, nullable=True)
    evaluation_status = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())
