import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.crud import skill as skill_crud
from app.schemas.skill import (
    SkillAssessmentCreateRequest,
    SkillAssessmentResponse,
    SkillCategoryCreateRequest,
    SkillCategoryResponse,
    SkillMatrixResponse,
)
from app.services import analytics
from app.services.csv_export import csv_response, export_filename, skill_matrix_rows, to_csv

router = APIRouter(prefix="/skills", tags=["Skill Matrix"])
logger = logging.getLogger(__name__)


@router.get("/matrix", response_model=SkillMatrixResponse)
def get_skill_matrix(
    category_id: Optional[str] = None,
    candidate_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Skill assessment matrix with per-category averages, level distribution,
    top performer per skill and skills below the target score.
    """
    assessments = skill_crud.get_assessments(db, category_id=category_id, candidate_id=candidate_id)

    return {
        "categories": skill_crud.get_categories(db),
        "assessments": assessments,
        "average_scores": analytics.average_scores_by_category(assessments),
        "skill_distribution": analytics.level_distribution(assessments),
        "top_performers": analytics.top_performers(assessments),
        "skill_gaps": analytics.skill_gaps(assessments, settings.SKILL_TARGET_SCORE),
    }


@router.get("/matrix/export")
def export_skill_matrix(
    category_id: Optional[str] = None,
    candidate_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    assessments = skill_crud.get_assessments(db, category_id=category_id, candidate_id=candidate_id)
    header, rows = skill_matrix_rows(assessments)
    return csv_response(to_csv(header, rows), export_filename("skill_assessment_matrix"))


@router.post("/categories", status_code=201, response_model=SkillCategoryResponse)
def create_category(request: SkillCategoryCreateRequest, db: Session = Depends(get_db)):
    try:
        category = skill_crud.create_category(db, request)
        logger.info(f"Created skill category {category.id}: {category.name}")
        return category
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating skill category: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create skill category: {str(e)}")


@router.post("/assessments", status_code=201, response_model=SkillAssessmentResponse)
def create_assessment(request: SkillAssessmentCreateRequest, db: Session = Depends(get_db)):
    category = skill_crud.get_category(db, request.category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Skill category not found")

    assessment = skill_crud.create_assessment(db, category, request)
    logger.info(f"Recorded {assessment.skill_name} assessment for candidate {assessment.candidate_id}")
    return assessment
