"""
Assessment model: the questionnaire attached to a job (at most one per job).
Sections and their questions are kept as one ordered JSON document.
"""
from sqlalchemy import Column, String, Text, JSON
from db.session import Base


class Assessment(Base):
    __tablename__ = "assessments"

    id = Column(String(64), primary_key=True, index=True)
    job_id = Column(String(64), nullable=False, unique=True, index=True)
    title = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    sections = Column(JSON, nullable=False, default=list)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<Assessment {self.id} for Job {self.job_id}>"
