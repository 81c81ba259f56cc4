"""
CRUD operations for candidate performance profiles.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from app.models.candidate import CandidateProfile, CandidateStatus
from app.schemas.candidate import CandidatePerformanceCreateRequest

SORT_FIELDS = ("score", "name", "date")


def create(db: Session, data: CandidatePerformanceCreateRequest) -> CandidateProfile:
    profile = CandidateProfile(
        **data.profile.model_dump(),
        **data.metrics.model_dump(),
        skills=[skill.model_dump(mode="json") for skill in data.skills],
        strengths=data.strengths,
        recommendations=data.recommendations,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def get_by_id(db: Session, candidate_id: str) -> Optional[CandidateProfile]:
    return db.query(CandidateProfile).filter(CandidateProfile.id == candidate_id).first()


def get_multi(
    db: Session,
    status: Optional[CandidateStatus] = None,
    sort_by: str = "score"
) -> List[CandidateProfile]:
    """
    Candidate profiles with optional status filter.

    sort_by:
        score: overall score, highest first (default)
        name: alphabetical
        date: most recently updated first
    """
    query = db.query(CandidateProfile)

    if status:
        query = query.filter(CandidateProfile.status == status)

    if sort_by == "name":
        query = query.order_by(CandidateProfile.name.asc())
    elif sort_by == "date":
        query = query.order_by(CandidateProfile.updated_at.desc())
    else:
        query = query.order_by(CandidateProfile.overall_score.desc(), CandidateProfile.name.asc())

    return query.all()
