import logging
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db, utcnow
from app.crud import assessment as assessment_crud
from app.schemas.grading import (
    AssessmentAnalyticsResponse,
    AssessmentCreateRequest,
    AssessmentResponse,
    AssessmentResultResponse,
)
from app.services import analytics

router = APIRouter(prefix="/assessments", tags=["Assessments"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=AssessmentResponse)
def create_assessment(request: AssessmentCreateRequest, db: Session = Depends(get_db)):
    if request.id and assessment_crud.get_assessment(db, request.id):
        raise HTTPException(status_code=409, detail="Assessment already exists")

    assessment = assessment_crud.create_assessment(db, request)
    logger.info(f"Registered assessment {assessment.id} for {assessment.applicant_email}")
    return assessment


@router.get("/analytics", response_model=AssessmentAnalyticsResponse)
def get_assessment_analytics(db: Session = Depends(get_db)):
    """
    Overview for the admin dashboard: completion, score distribution,
    the last 7 days of activity and the top 5 performers.
    """
    assessments = assessment_crud.get_assessments(db)
    latest_scores = assessment_crud.get_latest_scores(db)
    return analytics.assessment_overview(assessments, latest_scores, today=utcnow().date())


@router.get("/{assessment_id}/results", response_model=AssessmentResultResponse)
def get_assessment_results(assessment_id: str, db: Session = Depends(get_db)):
    """
    Latest grading result for an assessment, as shown on the results page.

    completed_at is the session's end time, or when the result was graded if
    the session has no end time.
    """
    assessment = assessment_crud.get_assessment(db, assessment_id)
    result = assessment_crud.get_latest_result(db, assessment_id)

    if not assessment or not result:
        raise HTTPException(status_code=404, detail="Assessment results not found")

    return AssessmentResultResponse(
        id=result.id,
        assessment_id=assessment.id,
        applicant_email=assessment.applicant_email,
        problem_id=assessment.problem_id,
        reliability=result.reliability,
        scalability=result.scalability,
        availability=result.availability,
        communication=result.communication,
        trade_off_analysis=result.trade_off_analysis,
        suspicion=result.suspicion,
        overall_score=result.overall_score,
        summary=result.summary,
        strengths=result.strengths or [],
        weaknesses=result.weaknesses or [],
        transcript=result.transcript,
        diagram=result.diagram,
        completed_at=assessment.ended_at or result.created_at,
    )
