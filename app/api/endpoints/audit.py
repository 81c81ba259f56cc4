"""
Audit trail endpoints.

Filters mirror the dashboard dropdowns: each of action_type, target_type,
severity and user_id accepts "all" to disable that filter.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.crud import audit as audit_crud
from app.schemas.audit import AuditEntryCreateRequest, AuditEntryResponse, AuditSummaryResponse, DateRange
from app.services.csv_export import audit_trail_rows, csv_response, export_filename, to_csv

router = APIRouter(prefix="/audit-trail", tags=["Audit Trail"])
logger = logging.getLogger(__name__)

MAX_LIMIT = 500
EXPORT_LIMIT = 10000


def audit_filters(
    date_range: DateRange = DateRange.LAST_7D,
    action_type: str = audit_crud.ALL,
    target_type: str = audit_crud.ALL,
    severity: str = audit_crud.ALL,
    user_id: str = audit_crud.ALL,
    search: Optional[str] = None
) -> dict:
    return {
        "date_range": date_range,
        "action_type": action_type,
        "target_type": target_type,
        "severity": severity,
        "user_id": user_id,
        "search": search,
    }


@router.get("", response_model=List[AuditEntryResponse])
def list_audit_entries(
    limit: int = Query(100, ge=1),
    filters: dict = Depends(audit_filters),
    db: Session = Depends(get_db)
):
    """Audit entries, newest first (limit capped at 500)"""
    return audit_crud.get_multi(db, limit=min(limit, MAX_LIMIT), **filters)


@router.get("/summary", response_model=AuditSummaryResponse)
def get_audit_summary(filters: dict = Depends(audit_filters), db: Session = Depends(get_db)):
    return audit_crud.summarize(db, **filters)


@router.get("/export")
def export_audit_trail(filters: dict = Depends(audit_filters), db: Session = Depends(get_db)):
    entries = audit_crud.get_multi(db, limit=EXPORT_LIMIT, **filters)
    header, rows = audit_trail_rows(entries)
    logger.info(f"Exporting {len(rows)} audit entries")
    return csv_response(to_csv(header, rows), export_filename("audit_trail"))


@router.post("", status_code=201, response_model=AuditEntryResponse)
def create_audit_entry(
    request: AuditEntryCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db)
):
    """Record an audit entry; IP address and user agent default to the caller's"""
    if request.ip_address is None and http_request.client:
        request.ip_address = http_request.client.host
    if request.user_agent is None:
        request.user_agent = http_request.headers.get("user-agent")

    try:
        return audit_crud.create(db, request)
    except Exception as e:
        db.rollback()
        logger.error(f"Error recording audit entry: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to record audit entry: {str(e)}")


@router.get("/{entry_id}", response_model=AuditEntryResponse)
def get_audit_entry(entry_id: str, db: Session = Depends(get_db)):
    entry = audit_crud.get_by_id(db, entry_id)

    if not entry:
        raise HTTPException(status_code=404, detail="Audit entry not found")

    return entry
