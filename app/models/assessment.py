"""
System design assessment models.

A DesignAssessment is a candidate's interview session; each grading run
against it stores a DesignAssessmentResult with the pillar scores returned
by the grading service.
"""

from sqlalchemy import Column, String, Float, Text, DateTime
from app.core.database import Base, JSONType, new_id, utcnow


class DesignAssessment(Base):
    __tablename__ = "design_assessments"

    id = Column(String(36), primary_key=True, default=new_id)
    applicant_email = Column(String, nullable=False, index=True)
    problem_id = Column(String, nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=True)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class DesignAssessmentResult(Base):
    __tablename__ = "design_assessment_results"

    id = Column(String(36), primary_key=True, default=new_id)

    # Not a foreign key: grading may run before the session is registered
    assessment_id = Column(String, nullable=False, index=True)

    # Pillar scores (0-10)
    reliability = Column(Float, nullable=False)
    scalability = Column(Float, nullable=False)
    availability = Column(Float, nullable=False)
    communication = Column(Float, nullable=False)
    trade_off_analysis = Column(Float, nullable=False)
    suspicion = Column(Float, nullable=False, default=0.0)
    overall_score = Column(Float, nullable=False, index=True)

    summary = Column(Text, nullable=False)
    strengths = Column(JSONType, nullable=False, default=list)
    weaknesses = Column(JSONType, nullable=False, default=list)

    transcript = Column(Text, nullable=True)
    diagram = Column(JSONType, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<DesignAssessmentResult(assessment_id={self.assessment_id}, overall_score={self.overall_score})>"
