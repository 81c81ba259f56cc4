"""
Interview grading proxy.

Called directly by the assessment frontend, so responses carry permissive
CORS headers and failures come back as {"error": ...} rather than the
usual {"detail": ...}.
"""

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.crud import assessment as assessment_crud
from app.schemas.grading import GradeInterviewRequest
from app.services.grading_service import GradingService, get_grading_service

router = APIRouter(tags=["Interview Grading"])
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@router.options("/grade-interview")
def grade_interview_preflight():
    return JSONResponse(content={}, headers=CORS_HEADERS)


@router.post("/grade-interview")
async def grade_interview(
    request: GradeInterviewRequest,
    db: Session = Depends(get_db),
    grader: GradingService = Depends(get_grading_service)
):
    """
    Grade a system design interview.

    The grader scores the five pillars (reliability, scalability, availability,
    communication, trade_off_analysis) plus a suspicion score; overall_score
    is the mean of the pillars, computed here. The result is stored against
    assessment_id and returned; it is still returned if storing it fails.
    """
    logger.info(
        f"Grading assessment {request.assessment_id}: "
        f"transcript {len(request.transcript)} chars, {len(request.diagramJson.nodes)} diagram nodes"
    )

    try:
        result = await grader.grade_interview(request)

        # Result is returned even when it cannot be stored
        try:
            assessment_crud.save_result(db, request, result)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Could not store grading result for {request.assessment_id}: {e}")

        return JSONResponse(content=result.model_dump(), headers=CORS_HEADERS)

    except Exception as e:
        db.rollback()
        logger.error(f"Error grading interview {request.assessment_id}: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": str(e) or "Failed to grade interview"},
            headers=CORS_HEADERS,
        )
