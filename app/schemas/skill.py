from pydantic import BaseModel, Field
from typing import List, Dict, Optional
from datetime import datetime

from app.models.skill import SkillLevel, SkillTrend


class SkillCategoryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None


class SkillCategoryResponse(SkillCategoryCreateRequest):
    id: str

    class Config:
        from_attributes = True


class SkillAssessmentCreateRequest(BaseModel):
    skill_id: str
    skill_name: str
    category_id: str
    candidate_id: str
    candidate_name: str
    assessment_type: str
    score: float = Field(..., ge=0, le=10)
    max_score: float = Field(10.0, gt=0)
    level: SkillLevel
    trend: SkillTrend = SkillTrend.STABLE
    confidence_score: float = Field(0.0, ge=0, le=1)
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    last_assessed: Optional[datetime] = None


class SkillAssessmentResponse(BaseModel):
    id: str
    skill_id: str
    skill_name: str
    category_id: str
    category_name: str
    candidate_id: str
    candidate_name: str
    assessment_type: str
    score: float
    max_score: float
    level: SkillLevel
    trend: SkillTrend
    last_assessed: datetime
    confidence_score: float
    strengths: List[str]
    weaknesses: List[str]
    recommendations: List[str]

    class Config:
        from_attributes = True


class TopPerformer(BaseModel):
    skill_name: str
    candidate_name: str
    score: float


class SkillGap(BaseModel):
    skill_name: str
    gap_percentage: int
    recommended_action: str


class SkillMatrixResponse(BaseModel):
    categories: List[SkillCategoryResponse]
    assessments: List[SkillAssessmentResponse]
    average_scores: Dict[str, float]
    skill_distribution: Dict[str, Dict[str, float]]
    top_performers: List[TopPerformer]
    skill_gaps: List[SkillGap]
