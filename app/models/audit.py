"""
Audit trail model.

Every administrative action on assessments, candidates, templates and reports
is recorded here, along with the client context it came from.
"""

import enum
from sqlalchemy import Column, String, Text, DateTime, Enum
from app.core.database import Base, JSONType, new_id, utcnow, enum_values


class AuditActionType(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    VIEW = "view"
    EXPORT = "export"
    LOGIN = "login"
    LOGOUT = "logout"
    SYSTEM = "system"


class AuditTargetType(str, enum.Enum):
    ASSESSMENT = "assessment"
    CANDIDATE = "candidate"
    TEMPLATE = "template"
    REPORT = "report"
    USER = "user"
    SYSTEM = "system"


class AuditSeverity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AuditStatus(str, enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"
    WARNING = "warning"


class AuditTrailEntry(Base):
    __tablename__ = "audit_trail"

    id = Column(String(36), primary_key=True, default=new_id)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    # Actor
    user_id = Column(String, nullable=False, index=True)
    user_name = Column(String, nullable=False)
    user_email = Column(String, nullable=True)

    # What happened
    action = Column(String, nullable=False)
    action_type = Column(Enum(AuditActionType, values_callable=enum_values, native_enum=False), nullable=False, index=True)
    target_type = Column(Enum(AuditTargetType, values_callable=enum_values, native_enum=False), nullable=False, index=True)
    target_id = Column(String, nullable=False)
    target_name = Column(String, nullable=False)

    # Client context
    ip_address = Column(String, nullable=True)
    user_agent = Column(Text, nullable=True)
    session_id = Column(String, nullable=True)

    details = Column(JSONType, nullable=False, default=dict)
    severity = Column(
        Enum(AuditSeverity, values_callable=enum_values, native_enum=False),
        nullable=False,
        default=AuditSeverity.LOW,
        index=True
    )
    status = Column(
        Enum(AuditStatus, values_callable=enum_values, native_enum=False),
        nullable=False,
        default=AuditStatus.SUCCESS
    )

    def __repr__(self):
        return f"<AuditTrailEntry(id={self.id}, action='{self.action}', status={self.status})>"
