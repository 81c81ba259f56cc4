import logging
from typing import List, Literal, Optional
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.crud import candidate as candidate_crud
from app.models.candidate import CandidateProfile, CandidateStatus
from app.schemas.candidate import (
    CandidatePerformanceCreateRequest,
    CandidatePerformanceResponse,
    CandidateProfileResponse,
    PerformanceMetrics,
)
from app.services.csv_export import candidate_performance_rows, csv_response, export_filename, to_csv

router = APIRouter(prefix="/candidates/performance", tags=["Candidate Performance"])
logger = logging.getLogger(__name__)

SortBy = Literal["score", "name", "date"]


def to_performance_response(profile: CandidateProfile) -> CandidatePerformanceResponse:
    """Split a stored profile into the dashboard's profile/metrics/skills shape"""
    return CandidatePerformanceResponse(
        profile=CandidateProfileResponse.model_validate(profile),
        metrics=PerformanceMetrics.model_validate(profile, from_attributes=True),
        skills=profile.skills or [],
        strengths=profile.strengths or [],
        recommendations=profile.recommendations or [],
    )


@router.get("", response_model=List[CandidatePerformanceResponse])
def list_candidate_performance(
    status: Optional[CandidateStatus] = None,
    sort_by: SortBy = "score",
    db: Session = Depends(get_db)
):
    """
    Candidate performance, optionally filtered by status.

    sort_by: score (highest first, default), name (A-Z) or date (last updated first)
    """
    profiles = candidate_crud.get_multi(db, status=status, sort_by=sort_by)
    return [to_performance_response(p) for p in profiles]


@router.get("/export")
def export_candidate_performance(
    status: Optional[CandidateStatus] = None,
    sort_by: SortBy = "score",
    db: Session = Depends(get_db)
):
    profiles = candidate_crud.get_multi(db, status=status, sort_by=sort_by)
    header, rows = candidate_performance_rows(profiles)
    return csv_response(to_csv(header, rows), export_filename("candidate_performance"))


@router.post("", status_code=201, response_model=CandidatePerformanceResponse)
def create_candidate_performance(request: CandidatePerformanceCreateRequest, db: Session = Depends(get_db)):
    try:
        profile = candidate_crud.create(db, request)
        logger.info(f"Created candidate profile {profile.id}: {profile.name}")
        return to_performance_response(profile)
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating candidate profile: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create candidate profile: {str(e)}")


@router.get("/{candidate_id}", response_model=CandidatePerformanceResponse)
def get_candidate_performance(candidate_id: str, db: Session = Depends(get_db)):
    profile = candidate_crud.get_by_id(db, candidate_id)

    if not profile:
        raise HTTPException(status_code=404, detail="Candidate not found")

    return to_performance_response(profile)
