"""
CRUD operations for AI recommendations, insights and predictions.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from app.models.recommendation import (
    AIRecommendation,
    AIInsight,
    AIPrediction,
    RecommendationType,
    Priority,
    InsightCategory,
    PredictionType,
)
from app.schemas.recommendation import RecommendationCreateRequest


def create_recommendation(db: Session, data: RecommendationCreateRequest) -> AIRecommendation:
    recommendation = AIRecommendation(**data.model_dump(), is_applied=False)
    db.add(recommendation)
    db.commit()
    db.refresh(recommendation)
    return recommendation


def get_recommendation(db: Session, recommendation_id: str) -> Optional[AIRecommendation]:
    return db.query(AIRecommendation).filter(AIRecommendation.id == recommendation_id).first()


def get_recommendations(
    db: Session,
    type: Optional[RecommendationType] = None,
    priority: Optional[Priority] = None,
    is_applied: Optional[bool] = None
) -> List[AIRecommendation]:
    """Recommendations newest first, optionally filtered"""
    query = db.query(AIRecommendation)

    if type:
        query = query.filter(AIRecommendation.type == type)
    if priority:
        query = query.filter(AIRecommendation.priority == priority)
    if is_applied is not None:
        query = query.filter(AIRecommendation.is_applied == is_applied)

    return query.order_by(AIRecommendation.created_at.desc()).all()


def mark_applied(db: Session, recommendation_id: str) -> Optional[AIRecommendation]:
    """
    Mark a recommendation as applied.

    Returns:
        Updated recommendation, or None if it doesn't exist
    """
    recommendation = get_recommendation(db, recommendation_id)
    if not recommendation:
        return None

    recommendation.is_applied = True
    db.commit()
    db.refresh(recommendation)
    return recommendation


def get_insights(db: Session, category: Optional[InsightCategory] = None) -> List[AIInsight]:
    query = db.query(AIInsight)
    if category:
        query = query.filter(AIInsight.category == category)
    return query.order_by(AIInsight.created_at.desc()).all()


def get_predictions(db: Session, prediction_type: Optional[PredictionType] = None) -> List[AIPrediction]:
    query = db.query(AIPrediction)
    if prediction_type:
        query = query.filter(AIPrediction.prediction_type == prediction_type)
    return query.order_by(AIPrediction.created_at.desc()).all()
