"""
Maintenance Celery tasks.

Scheduled by Celery beat (see celery_config.beat_schedule) and run in the
worker, which opens its own short-lived database pool.
"""

import asyncio
import logging
from typing import Any

from config.settings import settings

from src.application.purge_activation_codes import PurgeStaleActivationCodesUseCase
from src.infrastructure.database.connection import DatabaseConnection
from src.infrastructure.database.postgres_activation_code_repository import (
    PostgresActivationCodeRepository,
)
from src.infrastructure.tasks.celery_config import celery_app

logger = logging.getLogger(__name__)


async def purge_stale_activation_codes() -> int:
    db = DatabaseConnection(
        host=settings.database_host,
        port=settings.database_port,
        database=settings.database_name,
        user=settings.database_user,
        password=settings.database_password,
        min_connections=1,
        max_connections=1,
    )
    await db.connect()
    try:
        use_case = PurgeStaleActivationCodesUseCase(
            PostgresActivationCodeRepository(db),
            retention_seconds=settings.activation_code_retention_seconds,
        )
        return await use_case.execute()
    finally:
        await db.disconnect()


@celery_app.task(bind=True, name="maintenance.purge_stale_activation_codes")
def purge_stale_activation_codes_task(self: Any) -> int:
    """
    Remove validated and long-expired activation codes.

    Returns:
        Number of removed codes
    """
    logger.info(f"[CELERY] Purging stale activation codes (Task: {self.request.id})")
    removed = asyncio.run(purge_stale_activation_codes())
    logger.info(f"[CELERY] Purged {removed} activation codes")
    return removed
