"""
Pydantic schemas for candidate performance tracking.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, EmailStr
from app.models.candidate import CandidateStatus
from app.models.skill import SkillTrend


class SkillSnapshotCategory(str, Enum):
    TECHNICAL = "technical"
    SOFT = "soft"
    DOMAIN = "domain"
    LANGUAGE = "language"


class CandidateSkill(BaseModel):
    skill_name: str
    category: SkillSnapshotCategory
    level: float = Field(..., ge=0, le=10)
    trend: SkillTrend = SkillTrend.STABLE


class PerformanceMetrics(BaseModel):
    overall_score: float = Field(0.0, ge=0, le=10)
    total_assessments: int = Field(0, ge=0)
    completed_assessments: int = Field(0, ge=0)
    success_rate: float = Field(0.0, ge=0, le=100)
    rank: Optional[int] = Field(None, ge=1)
    percentile: Optional[float] = Field(None, ge=0, le=100)


class CandidateProfileBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    location: Optional[str] = None
    status: CandidateStatus = CandidateStatus.ACTIVE


class CandidateProfileResponse(CandidateProfileBase):
    id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CandidatePerformanceCreateRequest(BaseModel):
    profile: CandidateProfileBase
    metrics: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    skills: List[CandidateSkill] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class CandidatePerformanceResponse(BaseModel):
    """Profile, metrics and skill snapshot for one candidate"""
    profile: CandidateProfileResponse
    metrics: PerformanceMetrics
    skills: List[CandidateSkill]
    strengths: List[str]
    recommendations: List[str]
