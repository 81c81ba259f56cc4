"""
Report rendering and scheduling helpers.

Each report type maps to a dashboard dataset; the dataset is serialized in
the template's format and handed to the storage backend by the worker.
"""

import calendar
import json
import logging
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Session

from app.models.assessment import DesignAssessmentResult
from app.models.audit import AuditTrailEntry
from app.models.candidate import CandidateProfile
from app.models.recommendation import AIRecommendation
from app.models.report import ReportFormat, ReportFrequency, ReportType
from app.models.scoring import CandidateScore
from app.services import csv_export

logger = logging.getLogger(__name__)

# Upper bound on rows pulled into a single report
MAX_REPORT_ROWS = 10000


class ReportGenerationError(Exception):
    """Raised when a report cannot be rendered"""
    pass


def add_months(moment: datetime, months: int) -> datetime:
    """Same day-of-month `months` later, clamped to the month's last day"""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def compute_next_run(frequency: ReportFrequency, after: datetime) -> datetime:
    """
    Next run time for a schedule.

    Raises:
        ValueError: For on-demand templates, which have no schedule
    """
    if frequency == ReportFrequency.DAILY:
        return after + timedelta(days=1)
    if frequency == ReportFrequency.WEEKLY:
        return after + timedelta(days=7)
    if frequency == ReportFrequency.MONTHLY:
        return add_months(after, 1)
    if frequency == ReportFrequency.QUARTERLY:
        return add_months(after, 3)
    raise ValueError(f"Frequency '{frequency.value}' cannot be scheduled")


def report_title(template_name: str, generated_at: datetime) -> str:
    return f"{template_name} - {generated_at.strftime('%B %d, %Y')}"


def report_filename(template_name: str, fmt: ReportFormat, generated_at: datetime) -> str:
    slug = re.sub(r"[^a-z0-9]+", "_", template_name.lower()).strip("_") or "report"
    return f"{slug}_{generated_at.strftime('%Y%m%d%H%M%S')}.{fmt.value}"


def build_dataset(db: Session, report_type: ReportType) -> csv_export.Table:
    """Rows for a report type, reusing the dashboard export layouts"""
    if report_type == ReportType.CANDIDATE:
        profiles = (
            db.query(CandidateProfile)
            .order_by(CandidateProfile.overall_score.desc())
            .limit(MAX_REPORT_ROWS)
            .all()
        )
        return csv_export.candidate_performance_rows(profiles)

    if report_type == ReportType.ASSESSMENT:
        results = (
            db.query(DesignAssessmentResult)
            .order_by(DesignAssessmentResult.created_at.desc())
            .limit(MAX_REPORT_ROWS)
            .all()
        )
        return csv_export.assessment_result_rows(results)

    if report_type == ReportType.PERFORMANCE:
        scores = (
            db.query(CandidateScore)
            .order_by(CandidateScore.overall_score.desc())
            .limit(MAX_REPORT_ROWS)
            .all()
        )
        return csv_export.candidate_score_rows(scores)

    if report_type == ReportType.ANALYTICS:
        recommendations = (
            db.query(AIRecommendation)
            .order_by(AIRecommendation.created_at.desc())
            .limit(MAX_REPORT_ROWS)
            .all()
        )
        return csv_export.recommendation_rows(recommendations)

    if report_type == ReportType.CUSTOM:
        entries = (
            db.query(AuditTrailEntry)
            .order_by(AuditTrailEntry.timestamp.desc())
            .limit(MAX_REPORT_ROWS)
            .all()
        )
        return csv_export.audit_trail_rows(entries)

    raise ReportGenerationError(f"Unknown report type: {report_type}")


def serialize(header: List[str], rows: List[List[Any]], fmt: ReportFormat, metadata: Dict[str, Any]) -> bytes:
    """
    Encode a dataset in the report's format.

    Raises:
        ReportGenerationError: For formats this service does not render (pdf, excel)
    """
    if fmt == ReportFormat.CSV:
        return csv_export.to_csv(header, rows).encode("utf-8")

    if fmt == ReportFormat.JSON:
        document = {
            **metadata,
            "row_count": len(rows),
            "rows": [dict(zip(header, row)) for row in rows],
        }
        return json.dumps(document, indent=2, default=str).encode("utf-8")

    raise ReportGenerationError(f"Report format '{fmt.value}' is not supported; use csv or json")


def render_report(db: Session, report_type: ReportType, fmt: ReportFormat, metadata: Dict[str, Any]) -> Tuple[bytes, int]:
    """Build and serialize a report, returning (content, row_count)"""
    header, rows = build_dataset(db, report_type)
    content = serialize(header, rows, fmt, metadata)
    logger.info(f"Rendered {report_type.value} report as {fmt.value}: {len(rows)} rows, {len(content)} bytes")
    return content, len(rows)
