"""
Candidate performance tracking model.

A candidate profile carries its aggregated performance metrics and a
per-skill snapshot, as rendered by the performance tracking dashboard.
"""

import enum
from sqlalchemy import Column, String, Integer, Float, DateTime, Enum
from app.core.database import Base, JSONType, new_id, utcnow, enum_values


class CandidateStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    REJECTED = "rejected"
    HIRED = "hired"
    ON_HOLD = "on_hold"


class CandidateProfile(Base):
    __tablename__ = "candidate_profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    location = Column(String, nullable=True)
    status = Column(
        Enum(CandidateStatus, values_callable=enum_values, native_enum=False),
        nullable=False,
        default=CandidateStatus.ACTIVE,
        index=True
    )

    # Performance metrics
    overall_score = Column(Float, nullable=False, default=0.0)  # 0-10
    total_assessments = Column(Integer, nullable=False, default=0)
    completed_assessments = Column(Integer, nullable=False, default=0)
    success_rate = Column(Float, nullable=False, default=0.0)  # percent
    rank = Column(Integer, nullable=True)
    percentile = Column(Float, nullable=True)

    # [{"skill_name": "React", "category": "technical", "level": 8.5, "trend": "improving"}]
    skills = Column(JSONType, nullable=False, default=list)
    strengths = Column(JSONType, nullable=False, default=list)
    recommendations = Column(JSONType, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<CandidateProfile(id={self.id}, name='{self.name}', status={self.status})>"
