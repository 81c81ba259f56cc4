"""
Resend email service for assessment notifications.

Handles template rendering and delivery of:
- candidate "assessment completed" emails
- admin "candidate finished" emails
- scheduled report "ready" notices
"""

import logging
from html import escape
from typing import List, Optional
import resend

from app.core.config import settings
from app.schemas.notification import CompletionNotificationRequest

logger = logging.getLogger(__name__)

BRAND_COLOR = "#620045"
GREEN = "#4caf50"
ORANGE = "#ff9800"
RED = "#f44336"
GREY = "#757575"


class EmailDeliveryError(Exception):
    """Raised when the mail provider rejects or fails a send"""
    pass


def score_color(score: Optional[float]) -> str:
    if score is None:
        return GREY
    if score >= 7:
        return GREEN
    if score >= 5:
        return ORANGE
    return RED


def score_label(score: Optional[float]) -> str:
    if score is None:
        return "Processing"
    if score >= 8:
        return "Excellent"
    if score >= 6:
        return "Good"
    if score >= 4:
        return "Average"
    return "Needs Improvement"


def admin_priority(score: Optional[float]) -> str:
    """Follow-up priority shown to admins: high (>=8), medium (>=6), low otherwise"""
    if score is not None and score >= 8:
        return "high"
    if score is not None and score >= 6:
        return "medium"
    return "low"


PRIORITY_COLORS = {"high": GREEN, "medium": ORANGE, "low": RED}


def format_score(score: Optional[float]) -> str:
    if score is None:
        return "Processing..."
    return f"{score:g}/10"


def results_url(assessment_id: str) -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/admin/results/{escape(assessment_id)}"


def dashboard_url() -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/admin/dashboard"


def _page(title: str, accent: str, header: str, subheader: str, content: str, footer: str) -> str:
    return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        .header {{ background: linear-gradient(135deg, {BRAND_COLOR} 0%, #3a1c2a 100%); color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }}
        .content {{ background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px; }}
        .box {{ background: white; padding: 20px; border-radius: 8px; margin: 20px 0; border-left: 4px solid {accent}; }}
        .button {{ display: inline-block; background: {BRAND_COLOR}; color: white; padding: 12px 30px; text-decoration: none; border-radius: 5px; margin: 10px 5px; }}
        .footer {{ text-align: center; margin-top: 30px; color: #666; font-size: 14px; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{header}</h1>
            <p>{subheader}</p>
        </div>
        <div class="content">
{content}
        </div>
        <div class="footer">
            <p>{footer}</p>
        </div>
    </div>
</body>
</html>
"""


def build_candidate_email_html(data: CompletionNotificationRequest) -> str:
    color = score_color(data.score)
    assessment_type = escape(data.assessmentType)
    company = escape(data.companyName)

    content = f"""
            <p>Hi {escape(data.candidateName)},</p>
            <p>We're pleased to inform you that your assessment has been successfully completed and evaluated.</p>

            <div class="box" style="text-align: center;">
                <h3>Your Overall Score</h3>
                <div style="font-size: 48px; font-weight: bold; color: {color}; margin: 10px 0;">{format_score(data.score)}</div>
                <p style="color: {color}; font-weight: bold;">{score_label(data.score)}</p>
            </div>

            <p><strong>Assessment Details:</strong></p>
            <ul>
                <li>Type: {assessment_type}</li>
                <li>Completed: {data.completedAt.strftime("%B %d, %Y")}</li>
                <li>Assessment ID: {escape(data.assessmentId)}</li>
            </ul>

            <p>Your detailed results, including feedback and recommendations, are now available for review.</p>
            <a href="{results_url(data.assessmentId)}" class="button">View Full Results</a>

            <p>If you have any questions about your results or the assessment process, please don't hesitate to reach out.</p>
            <p>Best regards,<br>The {company} Team</p>"""

    return _page(
        title="Assessment Results",
        accent=color,
        header="Assessment Completed!",
        subheader=f"Thank you for completing your {assessment_type} assessment",
        content=content,
        footer="This email was sent automatically. Please do not reply to this message.",
    )


def build_admin_email_html(data: CompletionNotificationRequest) -> str:
    priority = admin_priority(data.score)
    color = PRIORITY_COLORS[priority]
    assessment_type = escape(data.assessmentType)
    company = escape(data.companyName)

    content = f"""
            <p>A candidate has completed their {assessment_type} assessment. Here are the details:</p>

            <div class="box">
                <h3>Candidate Information</h3>
                <p><strong>Name:</strong> {escape(data.candidateName)}</p>
                <p><strong>Email:</strong> {escape(str(data.candidateEmail))}</p>
                <p><strong>Assessment Type:</strong> {assessment_type}</p>
                <p><strong>Completed:</strong> {data.completedAt.strftime("%B %d, %Y %H:%M %Z").strip()}</p>
                <p><strong>Score:</strong> {format_score(data.score)}</p>
                <p><span style="display: inline-block; background: {color}; color: white; padding: 4px 12px; border-radius: 20px; font-size: 12px; font-weight: bold; text-transform: uppercase;">Priority: {priority}</span></p>
            </div>

            <div style="text-align: center; margin: 30px 0;">
                <a href="{results_url(data.assessmentId)}" class="button">View Full Results</a>
                <a href="{dashboard_url()}" class="button">Go to Dashboard</a>
            </div>

            <p><strong>Quick Actions:</strong></p>
            <ul>
                <li>Review detailed performance breakdown</li>
                <li>Compare with other candidates</li>
                <li>Send feedback to candidate</li>
                <li>Schedule follow-up interview if needed</li>
            </ul>

            <p>This is an automated notification from the {company} assessment system.</p>"""

    return _page(
        title="Assessment Completed",
        accent=color,
        header="Assessment Completed",
        subheader="Candidate has finished their assessment",
        content=content,
        footer=f"{company} Assessment Platform",
    )


def build_report_ready_html(report_title: str, report_id: str) -> str:
    content = f"""
            <p>Your scheduled report <strong>{escape(report_title)}</strong> has been generated.</p>
            <div style="text-align: center; margin: 30px 0;">
                <a href="{settings.APP_BASE_URL.rstrip('/')}/admin/reports/{escape(report_id)}" class="button">Open Report</a>
            </div>"""

    return _page(
        title="Report Ready",
        accent=BRAND_COLOR,
        header="Your Report Is Ready",
        subheader=escape(report_title),
        content=content,
        footer="This email was sent automatically. Please do not reply to this message.",
    )


class EmailService:
    """Service for sending emails via Resend."""

    def __init__(self, api_key: Optional[str] = None, from_email: Optional[str] = None):
        resend.api_key = api_key or settings.RESEND_API_KEY
        self.from_email = from_email or settings.NOREPLY_EMAIL

    def send(self, to: List[str], subject: str, html: str) -> Optional[str]:
        """
        Send one email.

        Returns:
            The provider's email id (None if the provider did not return one)

        Raises:
            EmailDeliveryError: If the provider call fails
        """
        params = {
            "from": self.from_email,
            "to": to,
            "subject": subject,
            "html": html,
        }

        try:
            response = resend.Emails.send(params)
        except Exception as e:
            logger.error(f"Resend error sending '{subject}' to {to}: {e}")
            raise EmailDeliveryError(str(e)) from e

        email_id = response.get("id") if response else None
        logger.info(f"Email '{subject}' sent to {to} (Email ID: {email_id})")
        return email_id

    def send_candidate_completion(self, data: CompletionNotificationRequest) -> Optional[str]:
        return self.send(
            to=[str(data.candidateEmail)],
            subject=f"Your {data.assessmentType} Assessment Results",
            html=build_candidate_email_html(data),
        )

    def send_admin_completion(self, data: CompletionNotificationRequest) -> Optional[str]:
        return self.send(
            to=[str(data.adminEmail)],
            subject=f"Assessment Completed: {data.candidateName}",
            html=build_admin_email_html(data),
        )

    def send_report_ready(self, recipients: List[str], report_title: str, report_id: str) -> Optional[str]:
        return self.send(
            to=recipients,
            subject=f"Report Ready: {report_title}",
            html=build_report_ready_html(report_title, report_id),
        )


def get_email_service() -> EmailService:
    """FastAPI dependency returning the configured email service"""
    return EmailService()
