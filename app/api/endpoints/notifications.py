"""
Assessment completion notifications.

Sends the candidate their results email and, when an admin address is
supplied, a "candidate finished" email to the hiring admin.
"""

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.schemas.notification import CompletionNotificationRequest, CompletionNotificationResponse
from app.services.email_service import EmailService, get_email_service

router = APIRouter(tags=["Notifications"])
logger = logging.getLogger(__name__)


@router.post("/send-completion-notification", response_model=CompletionNotificationResponse)
def send_completion_notification(
    request: CompletionNotificationRequest,
    email_service: EmailService = Depends(get_email_service)
):
    try:
        candidate_email_id = email_service.send_candidate_completion(request)

        admin_email_id = None
        if request.adminEmail:
            admin_email_id = email_service.send_admin_completion(request)

        logger.info(
            f"Completion notification for assessment {request.assessmentId} sent "
            f"(candidate: {candidate_email_id}, admin: {admin_email_id})"
        )

        return CompletionNotificationResponse(
            success=True,
            candidateEmailId=candidate_email_id,
            adminEmailId=admin_email_id,
        )

    except Exception as e:
        logger.error(f"Error sending completion notification for {request.assessmentId}: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": str(e) or "Failed to send notification"},
        )
