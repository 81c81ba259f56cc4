"""
CRUD operations for report templates, generated reports and schedules.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import utcnow
from app.models.report import (
    ReportTemplate,
    GeneratedReport,
    ReportSchedule,
    ReportFrequency,
    ReportStatus,
)
from app.schemas.report import ReportTemplateCreateRequest
from app.services.report_builder import compute_next_run, report_title


# ============================================================
# Templates
# ============================================================

def create_template(db: Session, data: ReportTemplateCreateRequest) -> ReportTemplate:
    template = ReportTemplate(**data.model_dump())
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


def get_template(db: Session, template_id: str) -> Optional[ReportTemplate]:
    return db.query(ReportTemplate).filter(ReportTemplate.id == template_id).first()


def get_templates(db: Session, is_active: Optional[bool] = None) -> List[ReportTemplate]:
    query = db.query(ReportTemplate)
    if is_active is not None:
        query = query.filter(ReportTemplate.is_active == is_active)
    return query.order_by(ReportTemplate.name).all()


# ============================================================
# Generated reports
# ============================================================

def create_report(
    db: Session,
    template: ReportTemplate,
    parameters: Optional[Dict[str, Any]] = None,
    generated_at: Optional[datetime] = None
) -> GeneratedReport:
    """Create a report in GENERATING state for a template"""
    generated_at = generated_at or utcnow()
    report = GeneratedReport(
        template_id=template.id,
        template_name=template.name,
        title=report_title(template.name, generated_at),
        type=template.type,
        format=template.format,
        status=ReportStatus.GENERATING,
        parameters={**(template.parameters or {}), **(parameters or {})},
        generated_at=generated_at,
        download_count=0,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


def get_report(db: Session, report_id: str) -> Optional[GeneratedReport]:
    return db.query(GeneratedReport).filter(GeneratedReport.id == report_id).first()


def get_reports(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    status: Optional[ReportStatus] = None
) -> List[GeneratedReport]:
    """Generated reports, newest first"""
    query = db.query(GeneratedReport)
    if status:
        query = query.filter(GeneratedReport.status == status)
    return query.order_by(GeneratedReport.generated_at.desc()).offset(skip).limit(limit).all()


def mark_completed(db: Session, report: GeneratedReport, file_url: str, file_size: int) -> GeneratedReport:
    report.status = ReportStatus.COMPLETED
    report.file_url = file_url
    report.file_size = file_size
    report.error_message = None
    report.expires_at = report.generated_at + timedelta(days=settings.REPORT_RETENTION_DAYS)
    db.commit()
    db.refresh(report)
    return report


def mark_failed(db: Session, report: GeneratedReport, error_message: str) -> GeneratedReport:
    report.status = ReportStatus.FAILED
    report.error_message = error_message
    db.commit()
    db.refresh(report)
    return report


def increment_download_count(db: Session, report: GeneratedReport) -> GeneratedReport:
    report.download_count = (report.download_count or 0) + 1
    db.commit()
    db.refresh(report)
    return report


def delete_report(db: Session, report: GeneratedReport) -> None:
    db.delete(report)
    db.commit()


# ============================================================
# Schedules
# ============================================================

def create_schedule(
    db: Session,
    template: ReportTemplate,
    recipients: List[str],
    frequency: Optional[ReportFrequency] = None,
    is_active: bool = True
) -> ReportSchedule:
    """
    Schedule a template.

    Raises:
        ValueError: If the effective frequency is on_demand
    """
    frequency = frequency or template.frequency
    schedule = ReportSchedule(
        template_id=template.id,
        template_name=template.name,
        frequency=frequency,
        next_run=compute_next_run(frequency, utcnow()),
        recipients=list(recipients),
        is_active=is_active,
    )
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    return schedule


def get_schedules(db: Session, is_active: Optional[bool] = None) -> List[ReportSchedule]:
    query = db.query(ReportSchedule)
    if is_active is not None:
        query = query.filter(ReportSchedule.is_active == is_active)
    return query.order_by(ReportSchedule.next_run).all()


def get_due_schedules(db: Session, now: Optional[datetime] = None) -> List[ReportSchedule]:
    now = now or utcnow()
    return (
        db.query(ReportSchedule)
        .filter(ReportSchedule.is_active.is_(True), ReportSchedule.next_run <= now)
        .order_by(ReportSchedule.next_run)
        .all()
    )


def advance_schedule(db: Session, schedule: ReportSchedule, ran_at: Optional[datetime] = None) -> ReportSchedule:
    """
    Record a run and move next_run forward.

    next_run steps from its previous value so runs stay on their original
    cadence; slots missed while the worker was down are skipped, not replayed.
    """
    ran_at = ran_at or utcnow()
    next_run = schedule.next_run
    if next_run.tzinfo is None:
        # SQLite hands back naive datetimes
        next_run = next_run.replace(tzinfo=timezone.utc)
    while next_run <= ran_at:
        next_run = compute_next_run(schedule.frequency, next_run)

    schedule.last_run = ran_at
    schedule.next_run = next_run
    db.commit()
    db.refresh(schedule)
    return schedule
