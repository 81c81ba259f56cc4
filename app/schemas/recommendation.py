from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional
from datetime import datetime

from app.models.recommendation import RecommendationType, Priority, InsightCategory, PredictionType


class RecommendationCreateRequest(BaseModel):
    type: RecommendationType
    title: str = Field(..., min_length=1, max_length=200)
    description: str
    confidence: float = Field(..., ge=0, le=1)
    priority: Priority = Priority.MEDIUM
    data: Dict[str, Any] = Field(default_factory=dict)


class RecommendationResponse(BaseModel):
    id: str
    type: RecommendationType
    title: str
    description: str
    confidence: float
    priority: Priority
    data: Dict[str, Any]
    is_applied: bool
    created_at: datetime

    class Config:
        from_attributes = True


class InsightResponse(BaseModel):
    id: str
    category: InsightCategory
    title: str
    description: str
    metrics: Dict[str, float]
    recommendations: List[str]
    confidence: float
    created_at: datetime

    class Config:
        from_attributes = True


class PredictionFactor(BaseModel):
    factor: str
    weight: float
    value: float


class PredictionResponse(BaseModel):
    id: str
    prediction_type: PredictionType
    target_id: str
    target_name: str
    prediction: float
    confidence: float
    factors: List[PredictionFactor]
    created_at: datetime

    class Config:
        from_attributes = True


class RecommendationStatistics(BaseModel):
    total_recommendations: int
    applied_recommendations: int
    average_confidence: float
    application_rate: float = Field(..., description="Share of recommendations applied (0-1)")


class AIAnalyticsResponse(BaseModel):
    recommendations: List[RecommendationResponse]
    insights: List[InsightResponse]
    predictions: List[PredictionResponse]
    statistics: RecommendationStatistics
