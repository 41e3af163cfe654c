"""
Tests for activation email rendering and the Celery task queue adapter.

No SMTP server or broker is contacted.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.infrastructure.email.smtp_email_service import EmailServiceError, SmtpEmailService
from src.infrastructure.tasks.email.tasks import CeleryTaskQueue, build_email_service


@pytest.fixture
def email_service() -> SmtpEmailService:
    return SmtpEmailService(smtp_host="localhost", smtp_port=1025, expiry_minutes=10)


def bodies(message) -> dict[str, str]:
    return {
        part.get_content_subtype(): part.get_payload(decode=True).decode("utf-8")
        for part in message.get_payload()
    }


class TestActivationEmailRendering:
    def test_headers(self, email_service) -> None:
        message = email_service.render_activation_email(
            "ada@example.com", "Ada Lovelace", "482913", "http://localhost:4200/activate-account"
        )

        assert message["Subject"] == "Account Activation"
        assert message["To"] == "ada@example.com"
        assert message["From"] == "noreply@booknetwork.local"

    def test_bodies_carry_code_name_and_link(self, email_service) -> None:
        message = email_service.render_activation_email(
            "ada@example.com", "Ada Lovelace", "482913", "http://localhost:4200/activate-account"
        )

        parts = bodies(message)
        assert set(parts) == {"plain", "html"}
        for body in parts.values():
            assert "482913" in body
            assert "Ada Lovelace" in body
            assert "http://localhost:4200/activate-account" in body
            assert "10 minutes" in body

    def test_html_body_escapes_name(self, email_service) -> None:
        message = email_service.render_activation_email(
            "ada@example.com", "<script>", "482913", "http://localhost:4200/activate-account"
        )

        assert "<script>" not in bodies(message)["html"]

    async def test_smtp_failure_raises_email_service_error(self, email_service) -> None:
        with patch(
            "src.infrastructure.email.smtp_email_service.aiosmtplib.SMTP",
            side_effect=OSError("connection refused"),
        ):
            with pytest.raises(EmailServiceError):
                await email_service.send_activation_code(
                    "ada@example.com", "Ada Lovelace", "482913", "http://localhost"
                )

    async def test_sends_message_over_smtp(self, email_service) -> None:
        smtp = MagicMock()
        smtp.send_message = AsyncMock()
        smtp.login = AsyncMock()
        smtp.__aenter__ = AsyncMock(return_value=smtp)
        smtp.__aexit__ = AsyncMock(return_value=False)

        with patch(
            "src.infrastructure.email.smtp_email_service.aiosmtplib.SMTP", return_value=smtp
        ):
            await email_service.send_activation_code(
                "ada@example.com", "Ada Lovelace", "482913", "http://localhost"
            )

        smtp.send_message.assert_awaited_once()
        smtp.login.assert_not_awaited()


class TestCeleryTaskQueue:
    def test_enqueue_publishes_task_with_all_fields(self) -> None:
        celery_task = MagicMock()
        celery_task.apply_async.return_value.id = "celery-task-1"

        with patch("src.infrastructure.tasks.email.tasks.send_activation_email_task", celery_task):
            task_id = CeleryTaskQueue().enqueue_send_activation_email(
                email="ada@example.com",
                full_name="Ada Lovelace",
                code="482913",
                activation_url="http://localhost:4200/activate-account",
            )

        assert task_id == "celery-task-1"
        _, kwargs = celery_task.apply_async.call_args
        assert kwargs["args"] == (
            "ada@example.com",
            "Ada Lovelace",
            "482913",
            "http://localhost:4200/activate-account",
        )

    def test_publish_retries_are_bounded(self) -> None:
        celery_task = MagicMock()

        with patch("src.infrastructure.tasks.email.tasks.send_activation_email_task", celery_task):
            CeleryTaskQueue().enqueue_send_activation_email(
                "ada@example.com", "Ada Lovelace", "482913", "http://localhost"
            )

        _, kwargs = celery_task.apply_async.call_args
        policy = kwargs["retry_policy"]
        assert kwargs["retry"] is True
        assert policy["max_retries"] == 3
        assert policy["interval_max"] <= 1

    def test_broker_failure_propagates(self) -> None:
        celery_task = MagicMock()
        celery_task.apply_async.side_effect = ConnectionError("Broker unreachable")

        with patch("src.infrastructure.tasks.email.tasks.send_activation_email_task", celery_task):
            with pytest.raises(ConnectionError):
                CeleryTaskQueue().enqueue_send_activation_email(
                    "ada@example.com", "Ada Lovelace", "482913", "http://localhost"
                )

    def test_email_service_built_from_settings(self) -> None:
        service = build_email_service()

        assert service.expiry_minutes == 10
        assert service.from_email == "noreply@booknetwork.local"
