"""
CRUD operations for the skill assessment matrix.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from app.models.skill import SkillCategory, SkillAssessment
from app.schemas.skill import SkillCategoryCreateRequest, SkillAssessmentCreateRequest


def create_category(db: Session, data: SkillCategoryCreateRequest) -> SkillCategory:
    category = SkillCategory(**data.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def get_category(db: Session, category_id: str) -> Optional[SkillCategory]:
    return db.query(SkillCategory).filter(SkillCategory.id == category_id).first()


def get_categories(db: Session) -> List[SkillCategory]:
    return db.query(SkillCategory).order_by(SkillCategory.name).all()


def create_assessment(db: Session, category: SkillCategory, data: SkillAssessmentCreateRequest) -> SkillAssessment:
    fields = data.model_dump(exclude_none=True)
    fields["category_name"] = category.name
    assessment = SkillAssessment(**fields)
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    return assessment


def get_assessments(
    db: Session,
    category_id: Optional[str] = None,
    candidate_id: Optional[str] = None
) -> List[SkillAssessment]:
    """Skill assessments, most recently assessed first"""
    query = db.query(SkillAssessment)
    if category_id:
        query = query.filter(SkillAssessment.category_id == category_id)
    if candidate_id:
        query = query.filter(SkillAssessment.candidate_id == candidate_id)
    return query.order_by(SkillAssessment.last_assessed.desc()).all()
