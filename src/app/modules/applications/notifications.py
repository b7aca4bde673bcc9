"""
Application Status Notifications

Renders the status-change email for a candidate and hands it to the
mailer. Templates are data: one entry per status, plus a fallback.
Sending happens after the status change is committed and never raises.
"""

import logging
from dataclasses import dataclass

from app.core.email import render_plain_text_as_html, send_email
from app.modules.applications.models import Application, ApplicationStatus

logger = logging.getLogger(__name__)

SUBJECT = "Application Status Update"
CONTACT = "[Contact Email/Phone]"
SCHOOL = "[School Name]"


@dataclass(frozen=True)
class StatusTemplate:
    heading: str
    body: str


STATUS_TEMPLATES: dict[ApplicationStatus, StatusTemplate] = {
    ApplicationStatus.SUBMITTED: StatusTemplate(
        heading="Application Received",
        body=(
            "Dear {first_name},\n\n"
            "We are pleased to inform you that your application has been successfully "
            "submitted and received by our team. Thank you for taking the time to apply.\n\n"
            "Our admissions office is currently reviewing your application, and you will "
            "be notified once the next steps are available.\n\n"
            "If you have any questions, feel free to reach out to us at {contact}.\n\n"
            "Best regards,\nAdmissions Office"
        ),
    ),
    ApplicationStatus.APPLICATION_REJECTED: StatusTemplate(
        heading="Update on Your Application",
        body=(
            "Dear {first_name},\n\n"
            "Thank you for submitting your application to {school}. After a thorough "
            "review, we regret to inform you that your application was not successful "
            "at this time.\n\n"
            "We deeply appreciate your interest in joining our institution and encourage "
            "you to consider applying again in the future.\n\n"
            "Should you have any questions or need further clarification, please do not "
            "hesitate to contact us at {contact}.\n\n"
            "Wishing you the very best,\nAdmissions Office"
        ),
    ),
    ApplicationStatus.APPLICATION_ACCEPTED: StatusTemplate(
        heading="Your Application Has Been Accepted",
        body=(
            "Dear {first_name},\n\n"
            "Congratulations! We are delighted to inform you that your application has "
            "been accepted for admission to {school}.\n\n"
            "You can now proceed to register for the entrance examination, which must be "
            "completed by [Deadline Date]. Instructions for exam registration and "
            "preparation will be provided shortly.\n\n"
            "We look forward to seeing you excel. Please contact us at {contact} should "
            "you require any assistance.\n\n"
            "Warm regards,\nAdmissions Office"
        ),
    ),
    ApplicationStatus.EXAM_REGISTERED: StatusTemplate(
        heading="Entrance Examination Registration Confirmed",
        body=(
            "Dear {first_name},\n\n"
            "We are pleased to confirm that you have successfully registered for the "
            "entrance examination. We recommend preparing thoroughly to showcase your "
            "strengths and skills.\n\n"
            "Your examination details are as follows:\n"
            "Date: [Exam Date]\n"
            "Location: [Exam Location]\n\n"
            "Should you have any questions, please contact us at {contact}. Best wishes "
            "for your upcoming examination!\n\n"
            "Sincerely,\nAdmissions Office"
        ),
    ),
    ApplicationStatus.ADMISSION_OFFERED: StatusTemplate(
        heading="Admission Offered",
        body=(
            "Dear {first_name},\n\n"
            "We are thrilled to inform you that you have been offered admission to "
            "{school}! Your dedication and hard work have truly paid off, and we are "
            "excited to welcome you to our community.\n\n"
            "To finalize your enrollment, please complete the necessary admission steps "
            "by [Deadline Date]. Details for next steps will be provided soon.\n\n"
            "Should you require assistance, feel free to contact us at {contact}.\n\n"
            "Warm regards,\nAdmissions Office"
        ),
    ),
    ApplicationStatus.ADMISSION_REJECTED: StatusTemplate(
        heading="Update on Your Admission",
        body=(
            "Dear {first_name},\n\n"
            "Thank you for applying to {school}. After careful consideration, we regret "
            "to inform you that your application has not been successful in securing "
            "admission.\n\n"
            "We value your interest in our institution and encourage you to explore "
            "other opportunities or reapply in the future.\n\n"
            "If you have any questions or need further assistance, please contact us "
            "at {contact}.\n\n"
            "Wishing you all the best in your academic journey,\nAdmissions Office"
        ),
    ),
}

DEFAULT_TEMPLATE = StatusTemplate(
    heading="Application Status Update",
    body=(
        "Dear {first_name},\n\n"
        "Your application status has been updated.\n\n"
        "Best regards,\nAdmissions Office"
    ),
)


def render_status_message(first_name: str | None, status: ApplicationStatus) -> tuple[str, str]:
    """
    Render the plain-text message for a status.

    Returns:
        Tuple of (heading, body)
    """
    template = STATUS_TEMPLATES.get(status, DEFAULT_TEMPLATE)
    body = template.body.format(
        first_name=first_name or "Candidate",
        contact=CONTACT,
        school=SCHOOL,
    )
    return template.heading, body


async def notify_status_change(application: Application, status: ApplicationStatus) -> bool:
    """
    Email the candidate about a status change.

    Args:
        application: The application whose status changed
        status: The new status

    Returns:
        True if the mailer accepted the message
    """
    if not application.email:
        logger.warning(
            f"Application {application.id} has no email, skipping {status.value} notification"
        )
        return False

    heading, body = render_status_message(application.first_name, status)

    try:
        sent = await send_email(
            to_email=application.email,
            subject=SUBJECT,
            html_content=render_plain_text_as_html(heading, body),
        )
    except Exception as e:
        logger.error(
            f"Exception sending {status.value} email for application {application.id}: {e}",
            exc_info=True,
        )
        return False

    if not sent:
        logger.error(f"Failed to send {status.value} email for application {application.id}")
    return sent
