"""
Database models package.
"""

from app.models.assessment import DesignAssessment, DesignAssessmentResult
from app.models.audit import AuditTrailEntry, AuditActionType, AuditTargetType, AuditSeverity, AuditStatus
from app.models.candidate import CandidateProfile, CandidateStatus
from app.models.recommendation import (
    AIRecommendation,
    AIInsight,
    AIPrediction,
    RecommendationType,
    Priority,
    InsightCategory,
    PredictionType,
)
from app.models.report import (
    ReportTemplate,
    GeneratedReport,
    ReportSchedule,
    ReportType,
    ReportFrequency,
    ReportFormat,
    ReportStatus,
)
from app.models.scoring import ScoringCriteria, CandidateScore, CriteriaCategory
from app.models.skill import SkillCategory, SkillAssessment, SkillLevel, SkillTrend

__all__ = [
    "DesignAssessment", "DesignAssessmentResult",
    "AuditTrailEntry", "AuditActionType", "AuditTargetType", "AuditSeverity", "AuditStatus",
    "CandidateProfile", "CandidateStatus",
    "AIRecommendation", "AIInsight", "AIPrediction",
    "RecommendationType", "Priority", "InsightCategory", "PredictionType",
    "ReportTemplate", "GeneratedReport", "ReportSchedule",
    "ReportType", "ReportFrequency", "ReportFormat", "ReportStatus",
    "ScoringCriteria", "CandidateScore", "CriteriaCategory",
    "SkillCategory", "SkillAssessment", "SkillLevel", "SkillTrend",
]
