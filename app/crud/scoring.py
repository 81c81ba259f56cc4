"""
CRUD operations for the candidate scoring system.

Overall scores, ranks and percentiles are always derived here from the
detailed per-criterion scores and the current criteria weights.
"""

import logging
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from app.models.scoring import ScoringCriteria, CandidateScore
from app.schemas.scoring import ScoringCriteriaCreateRequest, CandidateScoreCreateRequest
from app.services.analytics import apply_criteria_weights, weighted_overall_score, rank_scores

logger = logging.getLogger(__name__)


def create_criteria(db: Session, data: ScoringCriteriaCreateRequest) -> ScoringCriteria:
    criteria = ScoringCriteria(**data.model_dump())
    db.add(criteria)
    db.commit()
    db.refresh(criteria)
    return criteria


def get_criteria(db: Session) -> List[ScoringCriteria]:
    return db.query(ScoringCriteria).order_by(ScoringCriteria.weight.desc(), ScoringCriteria.name).all()


def get_criteria_by_name(db: Session, name: str) -> Optional[ScoringCriteria]:
    return db.query(ScoringCriteria).filter(ScoringCriteria.name == name).first()


def get_candidate_scores(db: Session) -> List[CandidateScore]:
    """Candidate scores in rank order"""
    return (
        db.query(CandidateScore)
        .order_by(CandidateScore.overall_score.desc(), CandidateScore.candidate_name.asc())
        .all()
    )


def get_candidate_score(db: Session, candidate_id: str) -> Optional[CandidateScore]:
    return db.query(CandidateScore).filter(CandidateScore.candidate_id == candidate_id).first()


def _category_scores(detailed_scores: List[Dict]) -> Dict[str, float]:
    """Per-criterion score on the 0-10 scale, keyed by criterion name"""
    scores = {}
    for detail in detailed_scores:
        max_score = float(detail.get("max_score") or 10)
        scores[detail["criteria_name"]] = round(float(detail.get("score") or 0) / max_score * 10, 2)
    return scores


def _score_candidate(score: CandidateScore, criteria: List[ScoringCriteria]) -> None:
    details = apply_criteria_weights(score.detailed_scores or [], criteria)
    score.detailed_scores = details
    score.category_scores = _category_scores(details)
    score.overall_score = weighted_overall_score(details, scale=score.max_score or 10.0)


def _rerank(db: Session) -> List[CandidateScore]:
    scores = get_candidate_scores(db)
    standings = rank_scores([s.overall_score for s in scores])
    for score, standing in zip(scores, standings):
        score.rank = standing["rank"]
        score.percentile = standing["percentile"]
    return scores


def create_candidate_score(db: Session, data: CandidateScoreCreateRequest) -> CandidateScore:
    """
    Store a candidate's detailed scores, derive their overall score and
    refresh every candidate's rank and percentile.
    """
    score = CandidateScore(
        candidate_id=data.candidate_id,
        candidate_name=data.candidate_name,
        candidate_email=data.candidate_email,
        detailed_scores=[d.model_dump() for d in data.detailed_scores],
        strengths=data.strengths,
        weaknesses=data.weaknesses,
        recommendations=data.recommendations,
        assessment_count=data.assessment_count,
        max_score=10.0,
    )
    _score_candidate(score, get_criteria(db))
    db.add(score)
    db.flush()

    _rerank(db)
    db.commit()
    db.refresh(score)
    return score


def recalculate(db: Session) -> List[CandidateScore]:
    """
    Recompute every candidate's weighted scores against the current criteria,
    then re-rank.
    """
    criteria = get_criteria(db)
    scores = db.query(CandidateScore).all()

    for score in scores:
        _score_candidate(score, criteria)
    db.flush()

    ranked = _rerank(db)
    db.commit()
    logger.info(f"Recalculated {len(ranked)} candidate scores against {len(criteria)} criteria")
    return get_candidate_scores(db)
