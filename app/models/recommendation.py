"""
AI recommendation, insight and prediction models.

These rows are produced upstream by the AI analytics pipeline and rendered
by the recommendations dashboard. The only mutation made here is marking a
recommendation as applied.
"""

import enum
from sqlalchemy import Column, String, Float, Boolean, Text, DateTime, Enum
from app.core.database import Base, JSONType, new_id, utcnow, enum_values


class RecommendationType(str, enum.Enum):
    ASSESSMENT = "assessment"
    CANDIDATE = "candidate"
    SKILL_GAP = "skill_gap"
    IMPROVEMENT = "improvement"


class Priority(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class InsightCategory(str, enum.Enum):
    PERFORMANCE = "performance"
    TREND = "trend"
    PREDICTION = "prediction"
    ANOMALY = "anomaly"


class PredictionType(str, enum.Enum):
    CANDIDATE_SUCCESS = "candidate_success"
    ASSESSMENT_DIFFICULTY = "assessment_difficulty"
    COMPLETION_TIME = "completion_time"
    SKILL_MASTERY = "skill_mastery"


class AIRecommendation(Base):
    __tablename__ = "ai_recommendations"

    id = Column(String(36), primary_key=True, default=new_id)
    type = Column(Enum(RecommendationType, values_callable=enum_values, native_enum=False), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    confidence = Column(Float, nullable=False)  # 0-1
    priority = Column(Enum(Priority, values_callable=enum_values, native_enum=False), nullable=False, index=True)

    # Free-form context, e.g. {"candidate_id": ..., "required_skills": [...]}
    data = Column(JSONType, nullable=False, default=dict)

    is_applied = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<AIRecommendation(id={self.id}, type={self.type}, applied={self.is_applied})>"


class AIInsight(Base):
    __tablename__ = "ai_insights"

    id = Column(String(36), primary_key=True, default=new_id)
    category = Column(Enum(InsightCategory, values_callable=enum_values, native_enum=False), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    metrics = Column(JSONType, nullable=False, default=dict)          # name -> number
    recommendations = Column(JSONType, nullable=False, default=list)  # list of strings
    confidence = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class AIPrediction(Base):
    __tablename__ = "ai_predictions"

    id = Column(String(36), primary_key=True, default=new_id)
    prediction_type = Column(Enum(PredictionType, values_callable=enum_values, native_enum=False), nullable=False, index=True)
    target_id = Column(String, nullable=False)
    target_name = Column(String, nullable=False)
    prediction = Column(Float, nullable=False)
    confidence = Column(Float, nullable=False)

    # [{"factor": "Technical Score", "weight": 0.35, "value": 9.2}, ...]
    factors = Column(JSONType, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
