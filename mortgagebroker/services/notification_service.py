"""Lead notification: an append-only lead log plus an SMTP e-mail to the broker"""

import smtplib
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from pathlib import Path
from typing import Optional

from mortgagebroker.config import Settings
from mortgagebroker.models.tools import IntakeRequest, LeadRecord
from mortgagebroker.utils.logger import LoggerMixin

PURPOSE_LABELS = {
    "purchase": "Purchase",
    "refinance": "Rate/Term Refinance",
    "cashout": "Cash-out Refinance",
    "secondhome": "Second Home",
    "investment": "Investment Property",
}

OCCUPANCY_LABELS = {
    "primary": "Primary Residence",
    "secondhome": "Second Home",
    "investment": "Investment",
}

PROPERTY_TYPE_LABELS = {
    "singlefamily": "Single Family",
    "condo": "Condo",
    "townhome": "Townhome",
    "multiunit": "2-4 Unit",
}

CONSENT_NOTICE = (
    "The lead has agreed to be contacted by MortgageBroker and New American Funding "
    "via calls, emails, and texts (including autodialer and prerecorded messages)."
)


def format_whole_dollars(amount: int) -> str:
    return f"${amount:,.0f}"


def intake_lines(intake: IntakeRequest) -> list[tuple[str, str]]:
    """Human readable (label, value) pairs for the loan preference block"""
    lines = [
        ("Loan Purpose", PURPOSE_LABELS.get(intake.purpose.value, intake.purpose.value)),
        (
            "Occupancy",
            OCCUPANCY_LABELS.get(intake.occupancy.value, intake.occupancy.value),
        ),
        (
            "Property Type",
            PROPERTY_TYPE_LABELS.get(
                intake.property_type.value, intake.property_type.value
            ),
        ),
    ]
    if intake.est_price:
        lines.append(("Estimated Price", format_whole_dollars(intake.est_price)))
    if intake.est_down_payment:
        lines.append(
            ("Estimated Down Payment", format_whole_dollars(intake.est_down_payment))
        )
    return lines


def build_text_body(lead: LeadRecord, intake: Optional[IntakeRequest]) -> str:
    parts = [
        "New Mortgage Lead from MortgageBroker App",
        "",
        "CONTACT INFORMATION:",
        f"Full Name: {lead.full_name}",
        f"Email: {lead.email}",
        f"Phone: {lead.phone}",
    ]
    if intake is not None:
        parts.extend(["", "LOAN PREFERENCES:"])
        parts.extend(f"{label}: {value}" for label, value in intake_lines(intake))
    parts.extend(
        [
            "",
            f"TCPA Consent: {'Yes' if lead.consent else 'No'}",
            "",
            f"Submitted: {lead.created_at.isoformat()}",
            "",
            "This lead was captured through the MortgageBroker ChatGPT integration.",
            "Next Steps: Follow up within 24 hours for best conversion rates.",
        ]
    )
    return "\n".join(parts)


def build_html_body(lead: LeadRecord, intake: Optional[IntakeRequest]) -> str:
    def field(label: str, value: str) -> str:
        return (
            '<div class="field">'
            f'<span class="field-label">{escape(label)}:</span> '
            f'<span class="field-value">{value}</span>'
            "</div>"
        )

    email = escape(lead.email)
    phone = escape(lead.phone)
    fields = [
        field("Full Name", escape(lead.full_name)),
        field("Email", f'<a href="mailto:{email}">{email}</a>'),
        field("Phone", f'<a href="tel:{phone}">{phone}</a>'),
    ]

    intake_section = ""
    if intake is not None:
        intake_section = (
            '<div class="intake"><h3>Loan Preferences</h3>'
            + "".join(field(label, escape(value)) for label, value in intake_lines(intake))
            + "</div>"
        )

    return f"""<!DOCTYPE html>
<html>
<head>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .header {{ background: #081827; color: #6CE3CF; padding: 20px; }}
    .field {{ margin: 15px 0; padding: 10px; border-left: 4px solid #6CE3CF; }}
    .field-label {{ font-weight: bold; color: #081827; }}
    .consent {{ background: #e8f5e9; padding: 10px; margin-top: 20px; }}
  </style>
</head>
<body>
  <div class="header"><h2>New Mortgage Lead from MortgageBroker App</h2></div>
  <h3>Contact Information</h3>
  {"".join(fields)}
  {intake_section}
  <div class="consent">
    <strong>TCPA Consent:</strong> {"Yes, explicit consent provided" if lead.consent else "No"}
    <p>{CONSENT_NOTICE}</p>
  </div>
  <p><strong>Submitted:</strong> {escape(lead.created_at.isoformat())}</p>
  <p><strong>Next Steps:</strong> Follow up within 24 hours for best conversion rates.</p>
</body>
</html>"""


class LeadNotificationService(LoggerMixin):
    """Records and e-mails new leads; delivery problems never reach the caller"""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def smtp_configured(self) -> bool:
        return bool(self.settings.smtp_host and self.settings.smtp_password)

    def notify(self, lead: LeadRecord, intake: Optional[IntakeRequest] = None) -> bool:
        """Log the lead and send the broker e-mail. Returns True when e-mail was sent."""
        self.log_lead_to_file(lead)

        if not self.smtp_configured:
            self.logger.warning(
                "SMTP not configured, lead e-mail skipped",
                lead_email=lead.email,
                email_to=self.settings.lead_email_to,
            )
            return False

        try:
            self.send_email(lead, intake)
        except (smtplib.SMTPException, OSError) as e:
            self.logger.error(
                "Failed to send lead email", error=str(e), lead_email=lead.email
            )
            return False

        self.logger.info(
            "Lead email sent", email_to=self.settings.lead_email_to, has_intake=intake is not None
        )
        return True

    def build_message(
        self, lead: LeadRecord, intake: Optional[IntakeRequest] = None
    ) -> MIMEMultipart:
        sender = (
            self.settings.lead_email_from
            or self.settings.smtp_user
            or self.settings.lead_email_to
        )
        message = MIMEMultipart("alternative")
        message["Subject"] = f"New Mortgage Lead: {lead.full_name}"
        message["From"] = f"MortgageBroker App <{sender}>"
        message["To"] = self.settings.lead_email_to
        message["Reply-To"] = lead.email
        message.attach(MIMEText(build_text_body(lead, intake), "plain", "utf-8"))
        message.attach(MIMEText(build_html_body(lead, intake), "html", "utf-8"))
        return message

    def send_email(self, lead: LeadRecord, intake: Optional[IntakeRequest] = None) -> None:
        message = self.build_message(lead, intake)
        with smtplib.SMTP(
            self.settings.smtp_host,
            self.settings.smtp_port,
            timeout=self.settings.smtp_timeout_seconds,
        ) as server:
            server.starttls()
            server.login(
                self.settings.smtp_user or self.settings.lead_email_to,
                self.settings.smtp_password,
            )
            server.send_message(message)

    def log_lead_to_file(self, lead: LeadRecord) -> None:
        log_dir = Path(self.settings.lead_log_dir)
        entry = (
            f"{datetime.now(timezone.utc).isoformat()} | {lead.full_name} | "
            f"{lead.email} | {lead.phone} | Consent: {lead.consent}\n"
        )
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            with open(log_dir / "leads.log", "a", encoding="utf-8") as handle:
                handle.write(entry)
        except OSError as e:
            self.logger.error("Failed to write to lead log file", error=str(e))
