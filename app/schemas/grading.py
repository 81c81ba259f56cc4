"""
Pydantic schemas for the interview grading endpoint and grading service.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class DiagramNode(BaseModel):
    id: str
    label: str
    type: Optional[str] = None


class DiagramEdge(BaseModel):
    source: str
    target: str
    label: Optional[str] = None


class DiagramGraph(BaseModel):
    """System design diagram drawn by the candidate"""
    nodes: List[DiagramNode] = Field(default_factory=list)
    edges: List[DiagramEdge] = Field(default_factory=list)


class GradeInterviewRequest(BaseModel):
    """Body of POST /api/grade-interview (camelCase keys from the frontend)"""
    problemDescription: str = Field(..., min_length=1)
    rubric: str = Field(..., min_length=1)
    transcript: str
    diagramJson: DiagramGraph
    assessment_id: str = Field(..., min_length=1)


class GradingResult(BaseModel):
    """
    Normalized grading output.

    Pillar scores are clamped to 0-10; overall_score is the mean of the five
    pillars and is always computed locally, never taken from the model.
    """
    reliability: float = Field(..., ge=0, le=10)
    scalability: float = Field(..., ge=0, le=10)
    availability: float = Field(..., ge=0, le=10)
    communication: float = Field(..., ge=0, le=10)
    trade_off_analysis: float = Field(..., ge=0, le=10)
    suspicion: float = Field(0.0, ge=0, le=10)
    overall_score: float = Field(..., ge=0, le=10)
    summary: str
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)


class AssessmentCreateRequest(BaseModel):
    id: Optional[str] = None
    applicant_email: str = Field(..., min_length=3)
    problem_id: str = Field(..., min_length=1)
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


class AssessmentResponse(BaseModel):
    id: str
    applicant_email: str
    problem_id: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AssessmentResultResponse(BaseModel):
    """Latest grading result for an assessment, as shown on the results page"""
    id: str
    assessment_id: str
    applicant_email: str
    problem_id: str
    reliability: float
    scalability: float
    availability: float
    communication: float
    trade_off_analysis: float
    suspicion: float
    overall_score: float
    summary: str
    strengths: List[str]
    weaknesses: List[str]
    transcript: Optional[str] = None
    diagram: Optional[dict] = None
    completed_at: datetime


class ScoreRangeCount(BaseModel):
    range: str
    count: int


class DailyAssessmentActivity(BaseModel):
    date: str  # ISO date
    day: str  # Short weekday name, e.g. "Mon"
    started: int
    completed: int


class AssessmentTopPerformer(BaseModel):
    email: str
    score: float
    date: Optional[datetime] = None


class AssessmentAnalyticsResponse(BaseModel):
    """Admin overview across all design assessments"""
    total_assessments: int
    completed_assessments: int
    completion_rate: int
    average_score: float
    score_distribution: List[ScoreRangeCount]
    recent_activity: List[DailyAssessmentActivity]
    top_performers: List[AssessmentTopPerformer]
