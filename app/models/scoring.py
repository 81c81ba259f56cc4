"""
Candidate scoring system models.

ScoringCriteria defines the weighted rubric; CandidateScore stores each
candidate's per-criterion scores plus the derived overall score, rank and
percentile.
"""

import enum
from sqlalchemy import Column, String, Integer, Float, Text, DateTime, Enum
from app.core.database import Base, JSONType, new_id, utcnow, enum_values


class CriteriaCategory(str, enum.Enum):
    TECHNICAL = "technical"
    SOFT = "soft"
    EXPERIENCE = "experience"
    EDUCATION = "education"


class ScoringCriteria(Base):
    __tablename__ = "scoring_criteria"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False, unique=True)
    category = Column(Enum(CriteriaCategory, values_callable=enum_values, native_enum=False), nullable=False)
    weight = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False, default=10.0)
    description = Column(Text, nullable=True)


class CandidateScore(Base):
    __tablename__ = "candidate_scores"

    id = Column(String(36), primary_key=True, default=new_id)
    candidate_id = Column(String, nullable=False, unique=True, index=True)
    candidate_name = Column(String, nullable=False)
    candidate_email = Column(String, nullable=False)

    # The headline score (0-max_score) and its standing among candidates
    overall_score = Column(Float, nullable=False, default=0.0, index=True)
    max_score = Column(Float, nullable=False, default=10.0)
    percentile = Column(Float, nullable=False, default=0.0)
    rank = Column(Integer, nullable=True)

    # {"Technical Skills": 9.2, "Communication": 8.5}
    category_scores = Column(JSONType, nullable=False, default=dict)
    # [{"criteria_id", "criteria_name", "score", "max_score", "weight", "weighted_score", "comments"}]
    detailed_scores = Column(JSONType, nullable=False, default=list)

    strengths = Column(JSONType, nullable=False, default=list)
    weaknesses = Column(JSONType, nullable=False, default=list)
    recommendations = Column(JSONType, nullable=False, default=list)

    assessment_count = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<CandidateScore(candidate_id={self.candidate_id}, overall_score={self.overall_score})>"
