"""
SMTP Email Service implementation.

Sends the account activation email over SMTP. For local development this
points at Mailhog (SMTP on port 1025, web UI on 8025).
"""

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path

import aiosmtplib
from jinja2 import Environment, FileSystemLoader

from src.application.email_service import EmailService

logger = logging.getLogger(__name__)

ACTIVATION_SUBJECT = "Account Activation"


class SmtpEmailService(EmailService):
    """
    Email service that sends emails via SMTP.

    Content is rendered from the Jinja2 templates next to this module: an
    HTML body plus a plain text fallback.
    """

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        smtp_username: str | None = None,
        smtp_password: str | None = None,
        from_email: str = "noreply@booknetwork.local",
        use_tls: bool = False,
        expiry_minutes: int = 10,
    ):
        """
        Initialize the SMTP email service.

        Args:
            smtp_host: SMTP server hostname
            smtp_port: SMTP server port
            smtp_username: SMTP authentication username (optional for Mailhog)
            smtp_password: SMTP authentication password (optional for Mailhog)
            from_email: Sender email address
            use_tls: Connect with implicit TLS
            expiry_minutes: Code lifetime quoted in the email body
        """
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.from_email = from_email
        self.use_tls = use_tls
        self.expiry_minutes = expiry_minutes

        templates_dir = Path(__file__).parent / "templates"
        self.jinja_env = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=True,
        )

        logger.info(
            f"SMTP Email Service initialized: {smtp_host}:{smtp_port} "
            f"(auth: {'yes' if smtp_username else 'no'})"
        )

    def render_activation_email(
        self, email: str, full_name: str, code: str, activation_url: str
    ) -> MIMEMultipart:
        """Build the multipart activation message without sending it."""
        message = MIMEMultipart("alternative")
        message["Subject"] = ACTIVATION_SUBJECT
        message["From"] = self.from_email
        message["To"] = email

        context = {
            "username": full_name,
            "activation_code": code,
            "confirmation_url": activation_url,
            "expiry_minutes": self.expiry_minutes,
        }

        text_content = self.jinja_env.get_template("activate_account.txt").render(context)
        html_content = self.jinja_env.get_template("activate_account.html").render(context)

        message.attach(MIMEText(text_content, "plain", _charset="utf-8"))
        message.attach(MIMEText(html_content, "html", _charset="utf-8"))
        return message

    async def send_activation_code(
        self,
        email: str,
        full_name: str,
        code: str,
        activation_url: str,
    ) -> None:
        """
        Send the activation code to the user's email via SMTP.

        Raises:
            EmailServiceError: If email sending fails (triggers a Celery retry)
        """
        message = self.render_activation_email(email, full_name, code, activation_url)

        try:
            logger.info(f"Sending activation code to {email} via SMTP")

            async with aiosmtplib.SMTP(
                hostname=self.smtp_host,
                port=self.smtp_port,
                use_tls=self.use_tls,
                timeout=10.0,
            ) as smtp:
                if self.smtp_username and self.smtp_password:
                    await smtp.login(self.smtp_username, self.smtp_password)

                await smtp.send_message(message)

            logger.info(f"Email sent successfully to {email}")

        except Exception as e:
            logger.error(f"Failed to send email to {email}: {e}")
            raise EmailServiceError(f"Failed to send activation email: {e}") from e


class EmailServiceError(Exception):
    """Raised when email sending fails."""

    pass
