"""
Reporting endpoints: templates, generated reports and schedules.

Report files are rendered asynchronously by the Celery worker; a report is
downloadable once its status is COMPLETED.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.storage import StorageError, get_content_type, storage
from app.crud import audit as audit_crud
from app.crud import report as report_crud
from app.models.audit import AuditActionType, AuditTargetType, AuditSeverity
from app.models.report import ReportFrequency, ReportStatus
from app.schemas.report import (
    GeneratedReportResponse,
    ReportGenerateRequest,
    ReportScheduleCreateRequest,
    ReportScheduleResponse,
    ReportTemplateCreateRequest,
    ReportTemplateResponse,
)
from app.tasks import report_tasks

router = APIRouter(prefix="/reports", tags=["Reports"])
logger = logging.getLogger(__name__)


# ============================================================
# Templates
# ============================================================

@router.get("/templates", response_model=List[ReportTemplateResponse])
def list_templates(is_active: Optional[bool] = None, db: Session = Depends(get_db)):
    return report_crud.get_templates(db, is_active=is_active)


@router.post("/templates", status_code=201, response_model=ReportTemplateResponse)
def create_template(request: ReportTemplateCreateRequest, db: Session = Depends(get_db)):
    try:
        template = report_crud.create_template(db, request)
        logger.info(f"Created report template {template.id}: {template.name}")
        return template
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating report template: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create report template: {str(e)}")


# ============================================================
# Schedules
# ============================================================

@router.get("/schedules", response_model=List[ReportScheduleResponse])
def list_schedules(is_active: Optional[bool] = None, db: Session = Depends(get_db)):
    return report_crud.get_schedules(db, is_active=is_active)


@router.post("/schedules", status_code=201, response_model=ReportScheduleResponse)
def create_schedule(request: ReportScheduleCreateRequest, db: Session = Depends(get_db)):
    """
    Schedule a template for recurring generation.

    frequency defaults to the template's; on_demand templates must be given
    an explicit recurring frequency.
    """
    template = report_crud.get_template(db, request.template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Report template not found")

    frequency = request.frequency or template.frequency
    if frequency == ReportFrequency.ON_DEMAND:
        raise HTTPException(status_code=400, detail="On-demand reports cannot be scheduled")

    schedule = report_crud.create_schedule(
        db,
        template,
        recipients=[str(r) for r in request.recipients],
        frequency=frequency,
        is_active=request.is_active,
    )
    logger.info(f"Scheduled template {template.id} {frequency.value}, next run {schedule.next_run}")
    return schedule


# ============================================================
# Generated reports
# ============================================================

@router.get("", response_model=List[GeneratedReportResponse])
def list_reports(
    skip: int = 0,
    limit: int = 100,
    status: Optional[ReportStatus] = None,
    db: Session = Depends(get_db)
):
    """Generated reports, newest first"""
    if limit > 100:
        limit = 100

    return report_crud.get_reports(db, skip=skip, limit=limit, status=status)


@router.post("/generate", status_code=202, response_model=GeneratedReportResponse)
def generate_report(request: ReportGenerateRequest, db: Session = Depends(get_db)):
    """
    Create a report from a template and queue rendering via Celery.

    The report is returned immediately with status=generating. Poll
    GET /reports/{report_id} until it is completed or failed.
    """
    template = report_crud.get_template(db, request.template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Report template not found")
    if not template.is_active:
        raise HTTPException(status_code=400, detail="Report template is inactive")

    report = None
    try:
        report = report_crud.create_report(db, template, parameters=request.parameters)
        audit_crud.record(
            db,
            action="Generated report",
            action_type=AuditActionType.CREATE,
            target_type=AuditTargetType.REPORT,
            target_id=report.id,
            target_name=report.title,
            details={"template_id": template.id, "format": report.format.value},
        )

        task = report_tasks.generate_report_task.delay(report.id)
        logger.info(f"Created report {report.id}: {report.title} | Celery task {task.id} queued")

        db.refresh(report)
        return report

    except Exception as e:
        db.rollback()
        logger.error(f"Error generating report from template {template.id}: {e}")
        if report is not None:
            report_crud.mark_failed(db, report, f"Report could not be queued: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to generate report: {str(e)}")


@router.get("/{report_id}", response_model=GeneratedReportResponse)
def get_report(report_id: str, db: Session = Depends(get_db)):
    report = report_crud.get_report(db, report_id)

    if not report:
        raise HTTPException(status_code=404, detail="Report not found")

    return report


@router.get("/{report_id}/download")
def download_report(report_id: str, db: Session = Depends(get_db)):
    report = report_crud.get_report(db, report_id)

    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    if report.status != ReportStatus.COMPLETED or not report.file_url:
        raise HTTPException(status_code=409, detail="Report is not ready for download")

    try:
        content = storage.download_file(report.file_url)
    except StorageError as e:
        logger.error(f"Stored file for report {report_id} unavailable: {e}")
        raise HTTPException(status_code=404, detail="Report file not found")

    report_crud.increment_download_count(db, report)

    filename = report.file_url.rsplit("/", 1)[-1]
    return StreamingResponse(
        content,
        media_type=get_content_type(filename),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/{report_id}", status_code=204)
def delete_report(report_id: str, db: Session = Depends(get_db)):
    report = report_crud.get_report(db, report_id)

    if not report:
        raise HTTPException(status_code=404, detail="Report not found")

    if report.file_url:
        storage.delete_file(report.file_url)

    audit_crud.record(
        db,
        action="Deleted report",
        action_type=AuditActionType.DELETE,
        target_type=AuditTargetType.REPORT,
        target_id=report.id,
        target_name=report.title,
        severity=AuditSeverity.MEDIUM,
        commit=False,
    )
    report_crud.delete_report(db, report)

    logger.info(f"Deleted report {report_id}")
    return None
