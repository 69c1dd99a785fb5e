"""
Candidate model: Stores candidate information and current pipeline stage.
`job_id` references a Job but is not enforced as a foreign key.
"""
from sqlalchemy import Column, String, Text
from db.session import Base


class Candidate(Base):
    __tablename__ = "candidates"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    stage = Column(String(20), nullable=False, default="applied", index=True)
    job_id = Column(String(64), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(String(50), nullable=False, index=True)
    updated_at = Column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<Candidate {self.id} - {self.name} ({self.stage})>"
