"""
Pydantic schemas for assessment completion notifications.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, EmailStr


class CompletionNotificationRequest(BaseModel):
    """Body of POST /api/send-completion-notification (camelCase keys from the frontend)"""
    candidateEmail: EmailStr
    candidateName: str = Field(..., min_length=1)
    assessmentId: str = Field(..., min_length=1)
    assessmentType: str = Field(..., min_length=1)
    score: Optional[float] = Field(None, ge=0, le=10)
    completedAt: datetime
    companyName: str = Field(..., min_length=1)
    adminEmail: Optional[EmailStr] = None


class CompletionNotificationResponse(BaseModel):
    success: bool
    candidateEmailId: Optional[str] = None
    adminEmailId: Optional[str] = None
