"""Celery application configuration."""

from celery import Celery

from ..core.config import get_settings

settings = get_settings()

celery_app = Celery(
    "settlement_worker",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["app.worker.tasks"]
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # Retry settings
    task_default_retry_delay=60,  # 1 minute
    task_max_retries=3,

    # Result settings
    result_expires=3600,  # 1 hour

    # Worker settings
    worker_prefetch_multiplier=1,
    worker_concurrency=2,

    # Task routing
    task_routes={
        "app.worker.tasks.sweep_pending_payments_task": {"queue": "payments"},
    },

    # Beat schedule (periodic tasks)
    beat_schedule={
        "sweep-pending-payments": {
            "task": "app.worker.tasks.sweep_pending_payments_task",
            "schedule": settings.payment_sweep_interval_seconds,
        },
    },
)

celery_app.conf.task_queues = {
    "payments": {
        "exchange": "payments",
        "routing_key": "payments",
    },
}
