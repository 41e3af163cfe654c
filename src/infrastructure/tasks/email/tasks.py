"""
Email-related Celery tasks.

These tasks run in Celery workers, separate from the API process. The API
only enqueues them (CeleryTaskQueue) and never waits for delivery.
"""

import asyncio
import logging
from typing import Any

from config.settings import settings

from src.infrastructure.email.smtp_email_service import SmtpEmailService
from src.infrastructure.tasks.celery_config import celery_app

logger = logging.getLogger(__name__)


def build_email_service() -> SmtpEmailService:
    """Create an SMTP email service from the centralized settings."""
    return SmtpEmailService(
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_username=settings.smtp_username,
        smtp_password=settings.smtp_password,
        from_email=settings.smtp_from_email,
        use_tls=settings.smtp_use_tls,
        expiry_minutes=max(1, settings.activation_code_expiry_seconds // 60),
    )


@celery_app.task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_backoff_max=600,
    retry_jitter=True,
    max_retries=3,
)
def send_activation_email_task(
    self: Any, email: str, full_name: str, code: str, activation_url: str
) -> str:
    """
    Send the account activation email.

    Retries up to 3 times with exponential backoff (capped at 10 minutes)
    and jitter.

    Args:
        self: Celery task instance (from bind=True)
        email: Recipient email address
        full_name: Recipient display name
        code: Activation code
        activation_url: Front-end activation page

    Returns:
        Status message
    """
    try:
        logger.info(f"[CELERY] Sending activation email to {email} (Task: {self.request.id})")

        # One service per task; nothing is shared between task runs
        email_service = build_email_service()
        asyncio.run(email_service.send_activation_code(email, full_name, code, activation_url))

        logger.info(f"[CELERY] Email sent successfully to {email}")
        return f"Email sent to {email}"

    except Exception as e:
        logger.error(
            f"[CELERY] Failed to send email to {email} "
            f"(Attempt {self.request.retries + 1}/{self.max_retries}): {e}"
        )
        raise


class CeleryTaskQueue:
    """
    Adapter for enqueueing Celery tasks.

    Implements the TaskQueue protocol used by the activation workflow.

    Decision: Publishing retries a few times over about a second, then gives
    up. Celery's default publish retry keeps reconnecting for much longer
    while a request waits on it; an unreachable broker should surface as a
    failed enqueue instead.
    """

    PUBLISH_RETRY_POLICY = {
        "max_retries": 3,
        "interval_start": 0,
        "interval_step": 0.2,
        "interval_max": 0.5,
    }

    @classmethod
    def enqueue_send_activation_email(
        cls, email: str, full_name: str, code: str, activation_url: str
    ) -> str:
        """
        Enqueue a task to send an activation email.

        Returns:
            Task ID for tracking

        Raises:
            Exception: Whatever the broker client raises when it is unreachable
        """
        task = send_activation_email_task.apply_async(
            args=(email, full_name, code, activation_url),
            retry=True,
            retry_policy=cls.PUBLISH_RETRY_POLICY,
        )
        logger.info(f"[CELERY] Enqueued email task {task.id} for {email}")
        return str(task.id)
