"""
Celery configuration and application setup.

Celery runs activation email delivery outside the request path, so
registration returns without waiting for SMTP and failed sends are retried.
Celery beat schedules the periodic purge of stale activation codes.
All settings come from config.settings.
"""

import logging

from celery import Celery
from config.settings import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "book_network_tasks",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

celery_app.conf.update(
    task_serializer=settings.celery_task_serializer,
    accept_content=settings.celery_accept_content,
    result_serializer=settings.celery_result_serializer,
    timezone=settings.celery_timezone,
    enable_utc=settings.celery_enable_utc,
    # Acknowledge only after completion; requeue if the worker dies mid-task
    task_acks_late=settings.celery_task_acks_late,
    task_reject_on_worker_lost=settings.celery_task_reject_on_worker_lost,
    worker_prefetch_multiplier=settings.celery_worker_prefetch_multiplier,
    worker_max_tasks_per_child=settings.celery_worker_max_tasks_per_child,
    result_expires=settings.celery_result_expires,
)

celery_app.conf.beat_schedule = {
    "purge-stale-activation-codes": {
        "task": "maintenance.purge_stale_activation_codes",
        "schedule": settings.activation_code_purge_interval_seconds,
    },
}

celery_app.autodiscover_tasks(
    ["src.infrastructure.tasks.email", "src.infrastructure.tasks.maintenance"]
)

logger.info("Celery application configured")
