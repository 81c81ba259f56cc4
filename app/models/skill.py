"""
Skill assessment matrix models.
"""

import enum
from sqlalchemy import Column, String, Float, Text, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from app.core.database import Base, JSONType, new_id, utcnow, enum_values


class SkillLevel(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class SkillTrend(str, enum.Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class SkillCategory(Base):
    __tablename__ = "skill_categories"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    icon = Column(String, nullable=True)
    color = Column(String, nullable=True)

    assessments = relationship("SkillAssessment", back_populates="category", cascade="all, delete-orphan")


class SkillAssessment(Base):
    __tablename__ = "skill_assessments"

    id = Column(String(36), primary_key=True, default=new_id)
    skill_id = Column(String, nullable=False, index=True)
    skill_name = Column(String, nullable=False)
    category_id = Column(String(36), ForeignKey("skill_categories.id", ondelete="CASCADE"), nullable=False, index=True)
    category_name = Column(String, nullable=False)
    candidate_id = Column(String, nullable=False, index=True)
    candidate_name = Column(String, nullable=False)
    assessment_type = Column(String, nullable=False)

    score = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False, default=10.0)
    level = Column(Enum(SkillLevel, values_callable=enum_values, native_enum=False), nullable=False)
    trend = Column(
        Enum(SkillTrend, values_callable=enum_values, native_enum=False),
        nullable=False,
        default=SkillTrend.STABLE
    )
    confidence_score = Column(Float, nullable=False, default=0.0)

    strengths = Column(JSONType, nullable=False, default=list)
    weaknesses = Column(JSONType, nullable=False, default=list)
    recommendations = Column(JSONType, nullable=False, default=list)

    last_assessed = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    category = relationship("SkillCategory", back_populates="assessments")
