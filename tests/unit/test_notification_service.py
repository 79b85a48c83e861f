"""Unit tests for lead notifications."""

import smtplib
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from mortgagebroker.config import Settings
from mortgagebroker.models.tools import IntakeRequest, LeadRecord
from mortgagebroker.services.notification_service import (
    LeadNotificationService,
    build_html_body,
    build_text_body,
)


@pytest.fixture
def lead() -> LeadRecord:
    return LeadRecord(
        full_name="Jordan <Rivera>",
        email="jordan.rivera@example.com",
        phone="555-867-5309",
        consent=True,
        created_at=datetime(2025, 1, 20, 15, 30),
    )


@pytest.fixture
def intake() -> IntakeRequest:
    return IntakeRequest(
        purpose="cashout",
        occupancy="primary",
        property_type="condo",
        est_price=450000,
    )


@pytest.fixture
def make_settings(tmp_path):
    def factory(**overrides) -> Settings:
        return Settings(_env_file=None, lead_log_dir=str(tmp_path), **overrides)

    return factory


class TestMessageBodies:
    def test_text_body(self, lead, intake):
        body = build_text_body(lead, intake)

        assert "Full Name: Jordan <Rivera>" in body
        assert "Loan Purpose: Cash-out Refinance" in body
        assert "Property Type: Condo" in body
        assert "Estimated Price: $450,000" in body
        assert "Estimated Down Payment" not in body
        assert "TCPA Consent: Yes" in body

    def test_text_body_without_intake(self, lead):
        assert "LOAN PREFERENCES" not in build_text_body(lead, None)

    def test_html_body_escapes_values(self, lead, intake):
        body = build_html_body(lead, intake)

        assert "Jordan &lt;Rivera&gt;" in body
        assert "Jordan <Rivera>" not in body
        assert 'href="mailto:jordan.rivera@example.com"' in body


class TestLeadNotificationService:
    """Test cases for the notification service."""

    def test_smtp_not_configured(self, lead, make_settings, tmp_path):
        service = LeadNotificationService(make_settings(smtp_host=None))

        assert service.notify(lead) is False

        log = (tmp_path / "leads.log").read_text(encoding="utf-8")
        assert "jordan.rivera@example.com | 555-867-5309 | Consent: True" in log

    def test_sends_email(self, lead, intake, make_settings):
        service = LeadNotificationService(
            make_settings(
                smtp_host="smtp.test",
                smtp_user="bot@mortgagebroker.app",
                smtp_password="secret",
                lead_email_to="broker@example.com",
            )
        )

        with patch("smtplib.SMTP") as mock_smtp:
            server = MagicMock()
            mock_smtp.return_value.__enter__.return_value = server

            assert service.notify(lead, intake) is True

        mock_smtp.assert_called_once_with("smtp.test", 587, timeout=10.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("bot@mortgagebroker.app", "secret")
        message = server.send_message.call_args.args[0]
        assert message["To"] == "broker@example.com"
        assert message["Reply-To"] == "jordan.rivera@example.com"
        assert message["Subject"] == "New Mortgage Lead: Jordan <Rivera>"

    def test_smtp_failure_is_not_raised(self, lead, make_settings, tmp_path):
        service = LeadNotificationService(
            make_settings(smtp_host="smtp.test", smtp_password="secret")
        )

        with patch("smtplib.SMTP", side_effect=smtplib.SMTPConnectError(421, "busy")):
            assert service.notify(lead) is False

        assert (tmp_path / "leads.log").exists()
