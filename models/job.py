"""
Job model: Stores job postings.
`order` is the manual ranking maintained by the reorder operation.
"""
from sqlalchemy import Column, Integer, String, Text, JSON
from db.session import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(64), primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="active", index=True)
    tags = Column(JSON, nullable=False, default=list)
    order = Column(Integer, nullable=False, default=0, index=True)
    description = Column(Text, nullable=True)
    requirements = Column(JSON, nullable=True)
    location = Column(String(255), nullable=True)
    type = Column(String(20), nullable=True)
    created_at = Column(String(50), nullable=False, index=True)
    updated_at = Column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<Job {self.id} - {self.title}>"
