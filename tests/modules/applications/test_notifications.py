"""
Unit tests for application status notifications.
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.modules.applications.models import ApplicationStatus
from app.modules.applications.notifications import (
    DEFAULT_TEMPLATE,
    STATUS_TEMPLATES,
    SUBJECT,
    notify_status_change,
    render_status_message,
)


class TestRenderStatusMessage:
    """Tests for render_status_message."""

    @pytest.mark.parametrize("status", list(STATUS_TEMPLATES))
    def test_every_template_greets_the_candidate(self, status):
        heading, body = render_status_message("Alice", status)

        assert heading == STATUS_TEMPLATES[status].heading
        assert body.startswith("Dear Alice,")
        assert "{" not in body

    def test_submitted_message(self):
        heading, body = render_status_message("Alice", ApplicationStatus.SUBMITTED)

        assert heading == "Application Received"
        assert "successfully submitted" in body

    @pytest.mark.parametrize("status", [ApplicationStatus.PENDING, ApplicationStatus.STUDENT])
    def test_status_without_template_uses_default(self, status):
        heading, body = render_status_message("Alice", status)

        assert heading == DEFAULT_TEMPLATE.heading
        assert "Your application status has been updated." in body

    def test_missing_first_name(self):
        _, body = render_status_message(None, ApplicationStatus.SUBMITTED)
        assert body.startswith("Dear Candidate,")


class TestNotifyStatusChange:
    """Tests for notify_status_change."""

    @pytest.mark.asyncio
    async def test_sends_rendered_email(self, sample_application_model):
        with patch(
            "app.modules.applications.notifications.send_email",
            new_callable=AsyncMock,
            return_value=True,
        ) as mock_send:
            result = await notify_status_change(
                sample_application_model, ApplicationStatus.APPLICATION_ACCEPTED
            )

        assert result is True
        mock_send.assert_awaited_once()
        kwargs = mock_send.call_args.kwargs
        assert kwargs["to_email"] == "alice@test.com"
        assert kwargs["subject"] == SUBJECT
        assert "Your Application Has Been Accepted" in kwargs["html_content"]
        assert "Dear Alice," in kwargs["html_content"]

    @pytest.mark.asyncio
    async def test_candidate_name_is_escaped(self, sample_application_model):
        sample_application_model.first_name = "<b>Alice</b>"

        with patch(
            "app.modules.applications.notifications.send_email",
            new_callable=AsyncMock,
            return_value=True,
        ) as mock_send:
            await notify_status_change(sample_application_model, ApplicationStatus.SUBMITTED)

        html = mock_send.call_args.kwargs["html_content"]
        assert "<b>Alice</b>" not in html
        assert "&lt;b&gt;Alice&lt;/b&gt;" in html

    @pytest.mark.asyncio
    async def test_skips_application_without_email(self, sample_application_model):
        sample_application_model.email = None

        with patch(
            "app.modules.applications.notifications.send_email", new_callable=AsyncMock
        ) as mock_send:
            result = await notify_status_change(
                sample_application_model, ApplicationStatus.SUBMITTED
            )

        assert result is False
        mock_send.assert_not_called()

    @pytest.mark.asyncio
    async def test_mailer_exception_is_absorbed(self, sample_application_model, caplog):
        with patch(
            "app.modules.applications.notifications.send_email",
            new_callable=AsyncMock,
            side_effect=RuntimeError("smtp down"),
        ):
            result = await notify_status_change(
                sample_application_model, ApplicationStatus.ADMISSION_OFFERED
            )

        assert result is False
        assert "smtp down" in caplog.text

    @pytest.mark.asyncio
    async def test_mailer_failure_is_reported(self, sample_application_model):
        with patch(
            "app.modules.applications.notifications.send_email",
            new_callable=AsyncMock,
            return_value=False,
        ):
            result = await notify_status_change(
                sample_application_model, ApplicationStatus.ADMISSION_REJECTED
            )

        assert result is False
