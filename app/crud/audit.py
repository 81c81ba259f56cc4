"""
CRUD operations for the audit trail.
"""

from datetime import timedelta
from typing import Any, Dict, List, Optional
from sqlalchemy import or_, func
from sqlalchemy.orm import Session, Query

from app.core.database import utcnow
from app.models.audit import (
    AuditTrailEntry,
    AuditActionType,
    AuditTargetType,
    AuditSeverity,
    AuditStatus,
)
from app.schemas.audit import AuditEntryCreateRequest, DateRange

DATE_RANGE_DAYS = {
    DateRange.LAST_24H: 1,
    DateRange.LAST_7D: 7,
    DateRange.LAST_30D: 30,
    DateRange.LAST_90D: 90,
}

# Filter value meaning "no filter", as sent by the dashboard dropdowns
ALL = "all"


def create(db: Session, entry_data: AuditEntryCreateRequest) -> AuditTrailEntry:
    entry = AuditTrailEntry(**entry_data.model_dump())
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def record(
    db: Session,
    action: str,
    action_type: AuditActionType,
    target_type: AuditTargetType,
    target_id: str,
    target_name: str,
    user_id: str = "system",
    user_name: str = "System",
    details: Optional[Dict[str, Any]] = None,
    severity: AuditSeverity = AuditSeverity.LOW,
    status: AuditStatus = AuditStatus.SUCCESS,
    commit: bool = True
) -> AuditTrailEntry:
    """
    Record an action taken by the service itself (report generation, deletes...).

    With commit=False the entry joins the caller's transaction.
    """
    entry = AuditTrailEntry(
        user_id=user_id,
        user_name=user_name,
        action=action,
        action_type=action_type,
        target_type=target_type,
        target_id=target_id,
        target_name=target_name,
        details=details or {},
        severity=severity,
        status=status,
    )
    db.add(entry)
    if commit:
        db.commit()
        db.refresh(entry)
    return entry


def get_by_id(db: Session, entry_id: str) -> Optional[AuditTrailEntry]:
    return db.query(AuditTrailEntry).filter(AuditTrailEntry.id == entry_id).first()


def _filtered_query(
    db: Session,
    date_range: DateRange = DateRange.LAST_7D,
    action_type: str = ALL,
    target_type: str = ALL,
    severity: str = ALL,
    user_id: str = ALL,
    search: Optional[str] = None
) -> Query:
    query = db.query(AuditTrailEntry)

    if date_range != DateRange.ALL:
        cutoff = utcnow() - timedelta(days=DATE_RANGE_DAYS[date_range])
        query = query.filter(AuditTrailEntry.timestamp >= cutoff)

    if action_type and action_type != ALL:
        query = query.filter(AuditTrailEntry.action_type == action_type)
    if target_type and target_type != ALL:
        query = query.filter(AuditTrailEntry.target_type == target_type)
    if severity and severity != ALL:
        query = query.filter(AuditTrailEntry.severity == severity)
    if user_id and user_id != ALL:
        query = query.filter(AuditTrailEntry.user_id == user_id)

    if search:
        term = search.strip().lower()
        query = query.filter(or_(
            func.lower(AuditTrailEntry.action).contains(term, autoescape=True),
            func.lower(AuditTrailEntry.target_name).contains(term, autoescape=True),
            func.lower(AuditTrailEntry.user_name).contains(term, autoescape=True),
        ))

    return query


def get_multi(db: Session, limit: int = 100, **filters) -> List[AuditTrailEntry]:
    """
    Retrieve audit entries, newest first.

    Args:
        db: Database session
        limit: Maximum number of entries to return
        **filters: date_range, action_type, target_type, severity, user_id, search
    """
    return (
        _filtered_query(db, **filters)
        .order_by(AuditTrailEntry.timestamp.desc())
        .limit(limit)
        .all()
    )


def summarize(db: Session, **filters) -> Dict[str, int]:
    """Counts shown on the audit trail overview cards"""
    query = _filtered_query(db, **filters)
    return {
        "total_entries": query.count(),
        "successful_actions": query.filter(AuditTrailEntry.status == AuditStatus.SUCCESS).count(),
        "high_severity": query.filter(
            AuditTrailEntry.severity.in_([AuditSeverity.HIGH, AuditSeverity.CRITICAL])
        ).count(),
        "failed_actions": query.filter(AuditTrailEntry.status == AuditStatus.FAILED).count(),
    }
