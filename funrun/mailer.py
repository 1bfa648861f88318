# payment confirmation emails
import logging
import smtplib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.message import EmailMessage
from html import escape
from string import Template
from typing import List, Optional

from .config import Settings
from .models import Participant

logger = logging.getLogger(__name__)

PAYMENT_CONFIRMATION = "PAYMENT_CONFIRMATION"

CONFIRMATION_HTML = Template("""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>
        body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
        .container { max-width: 600px; margin: 0 auto; padding: 20px; }
        .header { background-color: #FF6B35; color: white; padding: 20px; text-align: center; border-radius: 5px 5px 0 0; }
        .content { background-color: #f9f9f9; padding: 30px; border: 1px solid #ddd; border-radius: 0 0 5px 5px; }
        .info-box { background-color: white; padding: 15px; margin: 20px 0; border-left: 4px solid #FF6B35; }
        .footer { text-align: center; margin-top: 20px; color: #666; font-size: 12px; }
        .highlight { color: #FF6B35; font-weight: bold; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header"><h1>Payment Confirmed!</h1></div>
        <div class="content">
            <p>Dear <strong>$name</strong>,</p>
            <p>Great news! We have successfully received your payment for <span class="highlight">$event</span>.</p>
            <div class="info-box">
                <h3>Event Details:</h3>
                <p><strong>Event:</strong> $event</p>
                <p><strong>Date:</strong> $date</p>
                <p><strong>Location:</strong> $location</p>
            </div>
            <div class="info-box">
                <h3>Your Registration:</h3>
                <p><strong>Name:</strong> $name</p>
                <p><strong>Email:</strong> $email</p>
                <p><strong>Phone:</strong> $phone</p>$instagram
                <p><strong>Registration Status:</strong> <span class="highlight">CONFIRMED</span></p>
                <p><strong>Payment Status:</strong> <span class="highlight">PAID</span></p>
            </div>
            <p><strong>What's Next?</strong></p>
            <ul>
                <li>We'll send you more details about the event as we get closer to the date</li>
                <li>Please arrive at least 30 minutes before the event starts</li>
                <li>Bring your ID for registration check-in</li>
                <li>Get ready to have fun!</li>
            </ul>
            <p>If you have any questions, please don't hesitate to contact us.</p>
            <p>See you at the event!</p>
            <p><strong>$team</strong></p>
        </div>
        <div class="footer">
            <p>This is an automated confirmation email. Please do not reply to this message.</p>
            <p>&copy; $year $event. All rights reserved.</p>
        </div>
    </div>
</body>
</html>
""")


class SMTPNotConfigured(RuntimeError):
    pass


@dataclass
class EmailLogEntry:
    participant_id: str
    recipient: str
    email_type: str
    status: str  # SUCCESS | FAILED
    error: Optional[str] = None
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Mailer:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.log: List[EmailLogEntry] = []

    @property
    def configured(self) -> bool:
        s = self.settings
        return bool(s.smtp_host and s.smtp_username and s.smtp_password)

    def build_confirmation(self, p: Participant) -> EmailMessage:
        s = self.settings
        instagram = f"\nInstagram: {p.instagram_handle}" if p.instagram_handle else ""
        year = datetime.now().year

        msg = EmailMessage()
        msg["From"] = f"{s.smtp_from_name} <{s.smtp_from_email}>"
        msg["To"] = p.email
        msg["Subject"] = f"Payment Confirmed - {s.event_name}"
        msg.set_content(
            f"Payment Confirmed!\n\n"
            f"Dear {p.name},\n\n"
            f"Great news! We have successfully received your payment for {s.event_name}.\n\n"
            f"EVENT DETAILS:\n"
            f"- Event: {s.event_name}\n"
            f"- Date: {s.event_date}\n"
            f"- Location: {s.event_location}\n\n"
            f"YOUR REGISTRATION:\n"
            f"- Name: {p.name}\n"
            f"- Email: {p.email}\n"
            f"- Phone: {p.phone}{instagram}\n"
            f"- Registration Status: CONFIRMED\n"
            f"- Payment Status: PAID\n\n"
            f"See you at the event!\n\n"
            f"{s.smtp_from_name}\n\n"
            f"---\n"
            f"This is an automated confirmation email. Please do not reply to this message.\n"
            f"(c) {year} {s.event_name}. All rights reserved.\n"
        )
        msg.add_alternative(
            CONFIRMATION_HTML.substitute(
                name=escape(p.name),
                email=escape(p.email),
                phone=escape(p.phone),
                instagram=(
                    f"\n                <p><strong>Instagram:</strong> {escape(p.instagram_handle)}</p>"
                    if p.instagram_handle
                    else ""
                ),
                event=escape(s.event_name),
                date=escape(s.event_date),
                location=escape(s.event_location),
                team=escape(s.smtp_from_name),
                year=year,
            ),
            subtype="html",
        )
        return msg

    def _send(self, msg: EmailMessage) -> None:
        s = self.settings
        if not s.smtp_host:
            raise SMTPNotConfigured("SMTP not configured")
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=10) as smtp:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls()
                smtp.ehlo()
            smtp.login(s.smtp_username, s.smtp_password)
            smtp.send_message(msg)

    def send_confirmation(self, p: Participant) -> None:
        """
        Meant to run as a background task: failures are logged and
        recorded in self.log, never raised into the request.
        """
        logger.info("Sending confirmation email to %s (ID: %s)", p.email, p.id)
        try:
            self._send(self.build_confirmation(p))
        except (OSError, smtplib.SMTPException, SMTPNotConfigured) as e:
            logger.error("Failed to send email to %s: %s", p.email, e)
            self.log.append(EmailLogEntry(p.id, p.email, PAYMENT_CONFIRMATION, "FAILED", str(e)))
            return
        logger.info("Successfully sent confirmation email to %s", p.email)
        self.log.append(EmailLogEntry(p.id, p.email, PAYMENT_CONFIRMATION, "SUCCESS"))
