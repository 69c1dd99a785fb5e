"""
TimelineEntry model: append-only history of stage changes and notes per candidate.
"""
from sqlalchemy import Column, String, Text
from db.session import Base


class TimelineEntry(Base):
    __tablename__ = "timeline"

    id = Column(String(64), primary_key=True, index=True)
    candidate_id = Column(String(64), nullable=False, index=True)
    action = Column(String(20), nullable=False)
    from_stage = Column(String(20), nullable=True)
    to_stage = Column(String(20), nullable=True)
    timestamp = Column(String(50), nullable=False, index=True)
    notes = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<TimelineEntry {self.id} {self.action} for Candidate {self.candidate_id}>"
