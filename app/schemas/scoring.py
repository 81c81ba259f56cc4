from pydantic import BaseModel, Field
from typing import List, Dict, Optional
from datetime import datetime

from app.models.scoring import CriteriaCategory


class ScoringCriteriaCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    category: CriteriaCategory
    weight: float = Field(..., gt=0)
    max_score: float = Field(10.0, gt=0)
    description: Optional[str] = None


class ScoringCriteriaResponse(ScoringCriteriaCreateRequest):
    id: str

    class Config:
        from_attributes = True


class DetailedScore(BaseModel):
    criteria_id: str
    criteria_name: str
    score: float = Field(..., ge=0)
    max_score: float = Field(10.0, gt=0)
    weight: float = Field(0.0, ge=0)
    weighted_score: float = 0.0
    comments: Optional[str] = None


class CandidateScoreCreateRequest(BaseModel):
    candidate_id: str
    candidate_name: str
    candidate_email: str
    detailed_scores: List[DetailedScore] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    assessment_count: int = Field(0, ge=0)


class CandidateScoreResponse(BaseModel):
    id: str
    candidate_id: str
    candidate_name: str
    candidate_email: str
    overall_score: float
    max_score: float
    percentile: float
    rank: Optional[int] = None
    category_scores: Dict[str, float]
    detailed_scores: List[DetailedScore]
    strengths: List[str]
    weaknesses: List[str]
    recommendations: List[str]
    last_updated: datetime
    assessment_count: int

    class Config:
        from_attributes = True


class ScoringStatistics(BaseModel):
    total_candidates: int
    average_score: float
    highest_score: float
    lowest_score: float
    score_distribution: Dict[str, int]
    category_averages: Dict[str, float]


class ScoringSystemResponse(BaseModel):
    criteria: List[ScoringCriteriaResponse]
    candidates: List[CandidateScoreResponse]
    statistics: ScoringStatistics
