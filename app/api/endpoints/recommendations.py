import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.crud import recommendation as recommendation_crud
from app.models.recommendation import RecommendationType, Priority, InsightCategory, PredictionType
from app.schemas.recommendation import (
    AIAnalyticsResponse,
    InsightResponse,
    PredictionResponse,
    RecommendationCreateRequest,
    RecommendationResponse,
)
from app.services.analytics import recommendation_statistics

router = APIRouter(prefix="/ai", tags=["AI Recommendations"])
logger = logging.getLogger(__name__)


@router.get("/analytics", response_model=AIAnalyticsResponse)
def get_ai_analytics(db: Session = Depends(get_db)):
    """
    Everything the AI recommendations dashboard shows in one call:
    recommendations, insights, predictions and recommendation statistics.
    """
    recommendations = recommendation_crud.get_recommendations(db)

    return {
        "recommendations": recommendations,
        "insights": recommendation_crud.get_insights(db),
        "predictions": recommendation_crud.get_predictions(db),
        "statistics": recommendation_statistics(recommendations),
    }


@router.get("/recommendations", response_model=List[RecommendationResponse])
def list_recommendations(
    type: Optional[RecommendationType] = None,
    priority: Optional[Priority] = None,
    is_applied: Optional[bool] = None,
    db: Session = Depends(get_db)
):
    return recommendation_crud.get_recommendations(db, type=type, priority=priority, is_applied=is_applied)


@router.post("/recommendations", status_code=201, response_model=RecommendationResponse)
def create_recommendation(request: RecommendationCreateRequest, db: Session = Depends(get_db)):
    try:
        recommendation = recommendation_crud.create_recommendation(db, request)
        logger.info(f"Created {recommendation.type.value} recommendation {recommendation.id}")
        return recommendation
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating recommendation: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create recommendation: {str(e)}")


@router.post("/recommendations/{recommendation_id}/apply", response_model=RecommendationResponse)
def apply_recommendation(recommendation_id: str, db: Session = Depends(get_db)):
    recommendation = recommendation_crud.mark_applied(db, recommendation_id)

    if not recommendation:
        raise HTTPException(status_code=404, detail="Recommendation not found")

    logger.info(f"Applied recommendation {recommendation_id}")
    return recommendation


@router.get("/insights", response_model=List[InsightResponse])
def list_insights(category: Optional[InsightCategory] = None, db: Session = Depends(get_db)):
    return recommendation_crud.get_insights(db, category=category)


@router.get("/predictions", response_model=List[PredictionResponse])
def list_predictions(prediction_type: Optional[PredictionType] = None, db: Session = Depends(get_db)):
    return recommendation_crud.get_predictions(db, prediction_type=prediction_type)
