import logging
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.crud import scoring as scoring_crud
from app.schemas.scoring import (
    CandidateScoreCreateRequest,
    CandidateScoreResponse,
    ScoringCriteriaCreateRequest,
    ScoringCriteriaResponse,
    ScoringSystemResponse,
)
from app.services.analytics import scoring_statistics
from app.services.csv_export import candidate_score_rows, csv_response, export_filename, to_csv

router = APIRouter(prefix="/scoring", tags=["Candidate Scoring"])
logger = logging.getLogger(__name__)


def _scoring_system(db: Session) -> dict:
    candidates = scoring_crud.get_candidate_scores(db)
    return {
        "criteria": scoring_crud.get_criteria(db),
        "candidates": candidates,
        "statistics": scoring_statistics(candidates),
    }


@router.get("", response_model=ScoringSystemResponse)
def get_scoring_system(db: Session = Depends(get_db)):
    """Criteria, ranked candidate scores and score statistics"""
    return _scoring_system(db)


@router.post("/criteria", status_code=201, response_model=ScoringCriteriaResponse)
def create_criteria(request: ScoringCriteriaCreateRequest, db: Session = Depends(get_db)):
    if scoring_crud.get_criteria_by_name(db, request.name):
        raise HTTPException(status_code=400, detail=f"Scoring criteria '{request.name}' already exists")

    criteria = scoring_crud.create_criteria(db, request)
    logger.info(f"Created scoring criteria {criteria.name} (weight {criteria.weight})")
    return criteria


@router.post("/candidates", status_code=201, response_model=CandidateScoreResponse)
def create_candidate_score(request: CandidateScoreCreateRequest, db: Session = Depends(get_db)):
    """
    Store a candidate's per-criterion scores.

    The overall score is the criteria-weighted average of the detailed
    scores; every candidate's rank and percentile are refreshed.
    """
    if scoring_crud.get_candidate_score(db, request.candidate_id):
        raise HTTPException(status_code=409, detail="Candidate already has a score; use /scoring/recalculate")

    try:
        score = scoring_crud.create_candidate_score(db, request)
        logger.info(f"Scored candidate {score.candidate_id}: {score.overall_score} (rank {score.rank})")
        return score
    except Exception as e:
        db.rollback()
        logger.error(f"Error scoring candidate {request.candidate_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to score candidate: {str(e)}")


@router.post("/recalculate", response_model=ScoringSystemResponse)
def recalculate_scores(db: Session = Depends(get_db)):
    """Recompute weighted scores, ranks and percentiles against the current criteria"""
    try:
        scoring_crud.recalculate(db)
    except Exception as e:
        db.rollback()
        logger.error(f"Error recalculating scores: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to recalculate scores: {str(e)}")

    return _scoring_system(db)


@router.get("/export")
def export_scores(db: Session = Depends(get_db)):
    header, rows = candidate_score_rows(scoring_crud.get_candidate_scores(db))
    return csv_response(to_csv(header, rows), export_filename("candidate_scores"))
