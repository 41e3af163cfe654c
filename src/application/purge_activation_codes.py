"""
Purge Stale Activation Codes use case.

Run periodically by the Celery beat schedule. Removes codes validated longer
ago than the retention window and pending codes whose expiry lies further
back than that window.
"""

import logging
from datetime import UTC, datetime, timedelta

from src.domain.activation_code_repository import ActivationCodeRepository

logger = logging.getLogger(__name__)


class PurgeStaleActivationCodesUseCase:
    """
    Use case for removing activation codes nobody can still use.

    An expired code stays stored for the retention window so a late
    submission still triggers a replacement code instead of a 404.
    """

    def __init__(self, code_repository: ActivationCodeRepository, retention_seconds: int):
        self.code_repository = code_repository
        self.retention_seconds = retention_seconds

    async def execute(self, now: datetime | None = None) -> int:
        """
        Returns:
            Number of removed codes
        """
        cutoff = (now or datetime.now(UTC)) - timedelta(seconds=self.retention_seconds)
        removed = await self.code_repository.delete_stale(
            validated_before=cutoff, expired_before=cutoff
        )
        logger.info(f"Purged {removed} activation codes older than {cutoff.isoformat()}")
        return removed
