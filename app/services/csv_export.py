"""
CSV export helpers for the dashboard download buttons and CSV reports.

Each *_rows function returns (header, rows) for one dashboard; to_csv turns
that into text with proper quoting.
"""

import csv
import io
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from fastapi.responses import Response

Table = Tuple[List[str], List[List[Any]]]


def to_csv(header: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def export_filename(prefix: str, today: Optional[date] = None) -> str:
    """e.g. audit_trail_2024-01-16.csv"""
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}.csv"


def csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _enum_text(value: Any) -> str:
    return value.value if hasattr(value, "value") else str(value)


def _timestamp(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else ""


def audit_trail_rows(entries: Iterable) -> Table:
    header = ["Timestamp", "User", "Action", "Target Type", "Target", "Severity", "Status", "IP Address"]
    rows = [
        [
            _timestamp(e.timestamp),
            e.user_name,
            e.action,
            _enum_text(e.target_type),
            e.target_name,
            _enum_text(e.severity),
            _enum_text(e.status),
            e.ip_address or "",
        ]
        for e in entries
    ]
    return header, rows


def candidate_performance_rows(profiles: Iterable) -> Table:
    header = ["Name", "Email", "Overall Score", "Status", "Assessments Completed", "Success Rate", "Rank"]
    rows = [
        [
            p.name,
            p.email,
            f"{p.overall_score:.2f}",
            _enum_text(p.status),
            str(p.completed_assessments),
            f"{p.success_rate:g}%",
            f"#{p.rank}" if p.rank is not None else "",
        ]
        for p in profiles
    ]
    return header, rows


def candidate_score_rows(scores: Iterable) -> Table:
    header = ["Rank", "Candidate", "Email", "Overall Score", "Percentile", "Assessments"]
    rows = [
        [
            str(s.rank) if s.rank is not None else "",
            s.candidate_name,
            s.candidate_email,
            f"{s.overall_score:.2f}",
            f"{s.percentile:g}%",
            str(s.assessment_count),
        ]
        for s in scores
    ]
    return header, rows


def skill_matrix_rows(assessments: Iterable) -> Table:
    header = ["Skill", "Category", "Candidate", "Score", "Level", "Trend", "Last Assessed"]
    rows = [
        [
            a.skill_name,
            a.category_name,
            a.candidate_name,
            f"{a.score:g}",
            _enum_text(a.level),
            _enum_text(a.trend),
            a.last_assessed.date().isoformat() if a.last_assessed else "",
        ]
        for a in assessments
    ]
    return header, rows


def recommendation_rows(recommendations: Iterable) -> Table:
    header = ["Created", "Type", "Title", "Priority", "Confidence", "Applied"]
    rows = [
        [
            _timestamp(r.created_at),
            _enum_text(r.type),
            r.title,
            _enum_text(r.priority),
            f"{r.confidence:.2f}",
            "yes" if r.is_applied else "no",
        ]
        for r in recommendations
    ]
    return header, rows


def assessment_result_rows(results: Iterable) -> Table:
    header = [
        "Assessment", "Overall Score", "Reliability", "Scalability", "Availability",
        "Communication", "Trade-off Analysis", "Suspicion", "Graded At",
    ]
    rows = [
        [
            r.assessment_id,
            f"{r.overall_score:.1f}",
            f"{r.reliability:g}",
            f"{r.scalability:g}",
            f"{r.availability:g}",
            f"{r.communication:g}",
            f"{r.trade_off_analysis:g}",
            f"{r.suspicion:g}",
            _timestamp(r.created_at),
        ]
        for r in results
    ]
    return header, rows
