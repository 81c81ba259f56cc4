"""
Report generation tasks.

Rendering runs in the Celery worker: the API creates the report row in
GENERATING state and queues generate_report_task; the worker builds the
dataset, writes the file through the storage backend and marks the report
COMPLETED or FAILED. Celery Beat calls run_due_report_schedules to produce
scheduled reports and email their recipients.
"""

import logging
from typing import List, Optional

from app.core.celery_app import celery_app
from app.core.database import SessionLocal, utcnow
from app.core.storage import storage
from app.crud import audit as audit_crud
from app.crud import report as report_crud
from app.models.audit import AuditActionType, AuditTargetType, AuditSeverity, AuditStatus
from app.models.report import GeneratedReport, ReportStatus
from app.services.email_service import EmailDeliveryError, get_email_service
from app.services.report_builder import ReportGenerationError, render_report, report_filename

logger = logging.getLogger(__name__)


def render_and_store(db, report: GeneratedReport) -> GeneratedReport:
    """
    Render a GENERATING report and persist its file.

    Rendering errors leave the report FAILED with the reason in
    error_message; they are not raised.
    """
    metadata = {
        "report_id": report.id,
        "title": report.title,
        "type": report.type.value,
        "generated_at": report.generated_at.isoformat(),
        "parameters": report.parameters or {},
    }

    try:
        content, row_count = render_report(db, report.type, report.format, metadata)
        file_url = storage.save_file(content, report_filename(report.template_name, report.format, report.generated_at))
    except ReportGenerationError as e:
        logger.warning(f"Report {report.id} cannot be rendered: {e}")
        return report_crud.mark_failed(db, report, str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Report {report.id} failed: {e}")
        return report_crud.mark_failed(db, report, f"Report generation failed: {str(e)}")

    report = report_crud.mark_completed(db, report, file_url=file_url, file_size=len(content))
    logger.info(f"Report {report.id} completed: {row_count} rows stored at {file_url}")
    return report


def notify_recipients(report: GeneratedReport, recipients: List[str]) -> Optional[str]:
    """Email a completed report's recipients; delivery failures are logged"""
    if not recipients or report.status != ReportStatus.COMPLETED:
        return None

    try:
        return get_email_service().send_report_ready(recipients, report.title, report.id)
    except EmailDeliveryError as e:
        logger.error(f"Could not notify {len(recipients)} recipient(s) about report {report.id}: {e}")
        return None


@celery_app.task(name="app.tasks.report_tasks.generate_report_task", bind=True)
def generate_report_task(self, report_id: str, recipients: Optional[List[str]] = None):
    """
    Render a generated report in the background.

    Args:
        report_id: ID of a report in GENERATING state
        recipients: Optional addresses to email once the report is ready

    Returns:
        dict: report_id and final status

    Raises:
        ValueError: If the report does not exist
    """
    db = SessionLocal()
    try:
        logger.info(f"[Task {self.request.id}] Generating report {report_id}")

        report = report_crud.get_report(db, report_id)
        if not report:
            raise ValueError(f"Report {report_id} not found")

        if report.status != ReportStatus.GENERATING:
            logger.info(f"[Task {self.request.id}] Report {report_id} already {report.status.value}, skipping")
            return {"report_id": report_id, "status": report.status.value}

        report = render_and_store(db, report)
        notify_recipients(report, recipients or [])

        return {"report_id": report_id, "status": report.status.value}

    except Exception as e:
        logger.error(f"[Task {self.request.id}] Failed to generate report {report_id}: {str(e)}")
        raise
    finally:
        db.close()


@celery_app.task(name="app.tasks.report_tasks.run_due_report_schedules", bind=True)
def run_due_report_schedules(self):
    """
    Periodic task: run every active schedule whose next_run has passed.

    Each run creates a report from the schedule's template, renders it,
    emails the schedule's recipients and moves next_run forward.
    """
    db = SessionLocal()
    processed = []
    try:
        now = utcnow()
        schedules = report_crud.get_due_schedules(db, now=now)
        logger.info(f"[Task {self.request.id}] {len(schedules)} report schedule(s) due")

        for schedule in schedules:
            template = schedule.template
            if template is None or not template.is_active:
                logger.info(f"Skipping schedule {schedule.id}: template inactive or missing")
                report_crud.advance_schedule(db, schedule, ran_at=now)
                continue

            report = report_crud.create_report(db, template)
            report = render_and_store(db, report)
            notify_recipients(report, schedule.recipients or [])

            audit_crud.record(
                db,
                action="Scheduled report generated",
                action_type=AuditActionType.SYSTEM,
                target_type=AuditTargetType.REPORT,
                target_id=report.id,
                target_name=report.title,
                details={"schedule_id": schedule.id, "status": report.status.value},
                severity=AuditSeverity.LOW,
                status=AuditStatus.SUCCESS if report.status == ReportStatus.COMPLETED else AuditStatus.FAILED,
                commit=False,
            )
            report_crud.advance_schedule(db, schedule, ran_at=now)
            processed.append({"schedule_id": schedule.id, "report_id": report.id, "status": report.status.value})

        return {"processed": processed}

    except Exception as e:
        logger.error(f"[Task {self.request.id}] Report schedule run failed: {str(e)}")
        raise
    finally:
        db.close()
