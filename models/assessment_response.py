from sqlalchemy import Column, String, JSON
from db.session import Base


class AssessmentResponse(Base):
    """Submitted answers for an assessment. Never updated once stored."""

    __tablename__ = "assessment_responses"

    id = Column(String(64), primary_key=True, index=True)
    job_id = Column(String(64), nullable=False, index=True)
    candidate_id = Column(String(64), nullable=False, index=True)
    responses = Column(JSON, nullable=False, default=dict)
    submitted_at = Column(String(50), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<AssessmentResponse {self.id} - JobID {self.job_id} CandID {self.candidate_id}>"
