from pydantic import BaseModel, Field
from typing import Dict, Any, Optional
from datetime import datetime
from enum import Enum

from app.models.audit import AuditActionType, AuditTargetType, AuditSeverity, AuditStatus


class DateRange(str, Enum):
    """Look-back windows offered by the audit trail filters"""
    LAST_24H = "24h"
    LAST_7D = "7d"
    LAST_30D = "30d"
    LAST_90D = "90d"
    ALL = "all"


class AuditEntryCreateRequest(BaseModel):
    user_id: str
    user_name: str
    user_email: Optional[str] = None
    action: str = Field(..., min_length=1)
    action_type: AuditActionType
    target_type: AuditTargetType
    target_id: str
    target_name: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    session_id: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    severity: AuditSeverity = AuditSeverity.LOW
    status: AuditStatus = AuditStatus.SUCCESS


class AuditEntryResponse(BaseModel):
    id: str
    timestamp: datetime
    user_id: str
    user_name: str
    user_email: Optional[str] = None
    action: str
    action_type: AuditActionType
    target_type: AuditTargetType
    target_id: str
    target_name: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    session_id: Optional[str] = None
    details: Dict[str, Any]
    severity: AuditSeverity
    status: AuditStatus

    class Config:
        from_attributes = True


class AuditSummaryResponse(BaseModel):
    total_entries: int
    successful_actions: int
    high_severity: int
    failed_actions: int
