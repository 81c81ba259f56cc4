"""
Reporting models: templates, generated report instances and schedules.

Report lifecycle:

    GENERATING -> COMPLETED
         ↓
       FAILED
"""

import enum
from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from app.core.database import Base, JSONType, new_id, utcnow, enum_values


class ReportType(str, enum.Enum):
    CANDIDATE = "candidate"
    ASSESSMENT = "assessment"
    PERFORMANCE = "performance"
    ANALYTICS = "analytics"
    CUSTOM = "custom"


class ReportFrequency(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ON_DEMAND = "on_demand"


class ReportFormat(str, enum.Enum):
    PDF = "pdf"
    EXCEL = "excel"
    CSV = "csv"
    JSON = "json"


class ReportStatus(str, enum.Enum):
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class ReportTemplate(Base):
    __tablename__ = "report_templates"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(ReportType, values_callable=enum_values, native_enum=False), nullable=False)
    frequency = Column(
        Enum(ReportFrequency, values_callable=enum_values, native_enum=False),
        nullable=False,
        default=ReportFrequency.ON_DEMAND
    )
    format = Column(Enum(ReportFormat, values_callable=enum_values, native_enum=False), nullable=False)
    parameters = Column(JSONType, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    reports = relationship("GeneratedReport", back_populates="template")
    schedules = relationship("ReportSchedule", back_populates="template", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<ReportTemplate(id={self.id}, name='{self.name}', format={self.format})>"


class GeneratedReport(Base):
    __tablename__ = "generated_reports"

    id = Column(String(36), primary_key=True, default=new_id)
    template_id = Column(String(36), ForeignKey("report_templates.id", ondelete="SET NULL"), nullable=True, index=True)
    template_name = Column(String, nullable=False)
    title = Column(String, nullable=False)
    type = Column(Enum(ReportType, values_callable=enum_values, native_enum=False), nullable=False)
    format = Column(Enum(ReportFormat, values_callable=enum_values, native_enum=False), nullable=False)
    status = Column(
        Enum(ReportStatus, values_callable=enum_values, native_enum=False),
        nullable=False,
        default=ReportStatus.GENERATING,
        index=True
    )
    error_message = Column(Text, nullable=True)

    # Storage path or s3:// URI, set once rendering completes
    file_url = Column(String, nullable=True)
    file_size = Column(Integer, nullable=True)

    parameters = Column(JSONType, nullable=False, default=dict)
    download_count = Column(Integer, nullable=False, default=0)

    generated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    template = relationship("ReportTemplate", back_populates="reports")

    def __repr__(self):
        return f"<GeneratedReport(id={self.id}, title='{self.title}', status={self.status})>"


class ReportSchedule(Base):
    __tablename__ = "report_schedules"

    id = Column(String(36), primary_key=True, default=new_id)
    template_id = Column(String(36), ForeignKey("report_templates.id", ondelete="CASCADE"), nullable=False, index=True)
    template_name = Column(String, nullable=False)
    frequency = Column(Enum(ReportFrequency, values_callable=enum_values, native_enum=False), nullable=False)
    next_run = Column(DateTime(timezone=True), nullable=False, index=True)
    recipients = Column(JSONType, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    last_run = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    template = relationship("ReportTemplate", back_populates="schedules")
