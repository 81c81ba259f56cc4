from pydantic import BaseModel, Field, EmailStr
from typing import List, Dict, Any, Optional
from datetime import datetime

from app.models.report import ReportType, ReportFrequency, ReportFormat, ReportStatus


class ReportTemplateCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    type: ReportType
    frequency: ReportFrequency = ReportFrequency.ON_DEMAND
    format: ReportFormat = ReportFormat.CSV
    parameters: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True


class ReportTemplateResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    type: ReportType
    frequency: ReportFrequency
    format: ReportFormat
    parameters: Dict[str, Any]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReportGenerateRequest(BaseModel):
    template_id: str
    parameters: Dict[str, Any] = Field(default_factory=dict)


class GeneratedReportResponse(BaseModel):
    id: str
    template_id: Optional[str] = None
    template_name: str
    title: str
    type: ReportType
    format: ReportFormat
    status: ReportStatus
    error_message: Optional[str] = None
    file_url: Optional[str] = None
    file_size: Optional[int] = None
    parameters: Dict[str, Any]
    download_count: int
    generated_at: datetime
    expires_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReportScheduleCreateRequest(BaseModel):
    template_id: str
    frequency: Optional[ReportFrequency] = Field(None, description="Defaults to the template's frequency")
    recipients: List[EmailStr] = Field(default_factory=list)
    is_active: bool = True


class ReportScheduleResponse(BaseModel):
    id: str
    template_id: str
    template_name: str
    frequency: ReportFrequency
    next_run: datetime
    recipients: List[str]
    is_active: bool
    last_run: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
