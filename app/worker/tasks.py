"""Celery tasks for gateway reconciliation."""

import structlog

from celery import shared_task

from ..core.config import get_settings
from ..db.session import SessionLocal
from ..domain.payments.gateway import get_gateway_client
from ..domain.payments.reconciliation import sweep_pending_payments

logger = structlog.get_logger()
settings = get_settings()


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def sweep_pending_payments_task(self):
    """Verify stale pending payments against the gateway."""
    logger.info("Starting pending payment sweep")

    db = SessionLocal()
    try:
        counts = sweep_pending_payments(
            db,
            get_gateway_client(),
            min_age_seconds=settings.payment_sweep_min_age_seconds,
            limit=settings.payment_sweep_batch_size,
        )
        logger.info("Pending payment sweep finished", **counts)
        return counts
    except Exception as e:
        logger.error("Pending payment sweep failed", error=str(e))
        raise self.retry(exc=e)
    finally:
        db.close()

