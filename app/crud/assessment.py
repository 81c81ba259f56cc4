"""
CRUD operations for design assessments and their grading results.
"""

from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from app.models.assessment import DesignAssessment, DesignAssessmentResult
from app.schemas.grading import AssessmentCreateRequest, GradeInterviewRequest, GradingResult


def create_assessment(db: Session, data: AssessmentCreateRequest) -> DesignAssessment:
    assessment = DesignAssessment(**data.model_dump(exclude_none=True))
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    return assessment


def get_assessment(db: Session, assessment_id: str) -> Optional[DesignAssessment]:
    return db.query(DesignAssessment).filter(DesignAssessment.id == assessment_id).first()


def save_result(db: Session, request: GradeInterviewRequest, result: GradingResult) -> DesignAssessmentResult:
    """Persist a grading result together with the material that was graded"""
    row = DesignAssessmentResult(
        assessment_id=request.assessment_id,
        **result.model_dump(),
        transcript=request.transcript,
        diagram=request.diagramJson.model_dump(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def get_latest_result(db: Session, assessment_id: str) -> Optional[DesignAssessmentResult]:
    return (
        db.query(DesignAssessmentResult)
        .filter(DesignAssessmentResult.assessment_id == assessment_id)
        .order_by(DesignAssessmentResult.created_at.desc())
        .first()
    )


def get_assessments(db: Session) -> List[DesignAssessment]:
    return db.query(DesignAssessment).order_by(DesignAssessment.created_at.desc()).all()


def get_latest_scores(db: Session) -> Dict[str, float]:
    """Overall score of the most recent grading run, keyed by assessment id"""
    results = (
        db.query(DesignAssessmentResult.assessment_id, DesignAssessmentResult.overall_score)
        .order_by(DesignAssessmentResult.created_at)
        .all()
    )
    # Later rows overwrite earlier ones
    return {assessment_id: score for assessment_id, score in results}
