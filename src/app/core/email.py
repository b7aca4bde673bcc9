"""
Email Service using Resend

Mailer used by the admissions notifications. Delivery failures are logged
and reported through the return value, never raised.
"""

import asyncio
import logging
from html import escape

import resend

from app.core.config import settings

logger = logging.getLogger(__name__)

# Initialize Resend with API key
resend.api_key = settings.resend_api_key

EMAIL_FROM = settings.email_from


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        True if email was sent successfully
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": EMAIL_FROM,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Run sync Resend call in thread pool to avoid blocking event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


def render_plain_text_as_html(heading: str, body: str) -> str:
    """
    Wrap a plain-text message in the standard email layout.

    Blank lines separate paragraphs, single newlines become line breaks.
    The body is escaped here, so callers pass raw text.
    """
    paragraphs = [
        "<p>" + escape(block).replace("\n", "<br>") + "</p>"
        for block in body.split("\n\n")
        if block.strip()
    ]
    content = "\n            ".join(paragraphs)

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
            .header {{ color: #1a365d; margin-bottom: 24px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1 class="header">{escape(heading)}</h1>

            {content}
        </div>
    </body>
    </html>
    """
