"""
Gateway reconciliation.

Webhook pushes, client polls, manual triggers and the periodic sweep all
funnel into ``reconcile``, an idempotent merge keyed by gateway reference:
once a payment is ``success`` every later notification is a no-op, so the
linked transaction is credited at most once.
"""

import json
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from app.models import Payment, Transaction
from app.models.base import utcnow
from app.domain.settlement.enums import (
    DocumentKind,
    PaymentPurpose,
    PaymentStatus,
    ReconciliationSource,
    SettlementAction,
)
from app.domain.settlement.engine import apply_settlement
from app.domain.settlement.tenant_scope import TenantScope
from app.domain.payments.gateway import GatewayClient, map_gateway_status
from app.domain.payments.signature import verify_webhook_signature
from app.domain.payments.subscriptions import activate_subscription

logger = logging.getLogger(__name__)

SUBSCRIPTION_PURPOSES = (PaymentPurpose.SUBSCRIPTION, PaymentPurpose.UPGRADE)


@dataclass
class VerificationResult:
    """Outcome of a pull verification."""
    payment: Payment
    mode: str  # "cached", "live" or "demo"
    message: str | None = None


def parse_payment_status(value: PaymentStatus | str) -> PaymentStatus:
    try:
        return PaymentStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid payment status: {value!r}")


def get_payment(db: Session, reference: str) -> Payment:
    """Fetch a payment by gateway reference or raise NotFoundError."""
    if not reference:
        raise ValidationError("Transaction reference is required")
    payment = db.execute(
        select(Payment).where(Payment.reference == reference)
    ).scalars().first()
    if payment is None:
        raise NotFoundError("Payment", reference)
    return payment


def _find_linked_transaction(db: Session, payment: Payment) -> Transaction | None:
    if payment.transaction_id is not None:
        transaction = db.get(Transaction, payment.transaction_id)
        if transaction is not None:
            return transaction
    return db.execute(
        select(Transaction).where(Transaction.reference == payment.reference)
    ).scalars().first()


def _settle_linked_transaction(db: Session, payment: Payment, actor_id=None) -> Transaction | None:
    transaction = _find_linked_transaction(db, payment)
    if transaction is None:
        logger.info(f"Payment {payment.reference} has no linked transaction to settle")
        return None

    scope = TenantScope(db, transaction.company_id)
    try:
        apply_settlement(
            scope,
            DocumentKind.TRANSACTION,
            transaction.id,
            SettlementAction.APPROVE,
            actor_id=actor_id,
        )
    except ConflictError as e:
        # Already settled elsewhere; the credit must not be applied again
        logger.info(f"Transaction for payment {payment.reference} already settled: {e}")
    return transaction


def reconcile(
    db: Session,
    reference: str,
    new_status: PaymentStatus | str,
    metadata: dict[str, Any] | None = None,
    source: ReconciliationSource = ReconciliationSource.WEBHOOK,
) -> Payment:
    """
    Apply a payment outcome at most once per reference.

    Args:
        db: Database session
        reference: Gateway reference
        new_status: pending, success or failed
        metadata: Gateway payload merged into the payment's metadata
        source: Channel the outcome arrived through

    Returns:
        The payment after reconciliation (unchanged if already success)

    Raises:
        ValidationError: unknown status
        NotFoundError: no payment with this reference
    """
    status = parse_payment_status(new_status)
    payment = get_payment(db, reference)

    if payment.status == PaymentStatus.SUCCESS:
        logger.info(f"Payment {reference} already successful; ignoring {source.value} notification")
        return payment

    now = utcnow()
    merged = {
        **(payment.details or {}),
        **(metadata or {}),
        "updated_at": now.isoformat(),
        "source": source.value,
    }
    succeeded = status == PaymentStatus.SUCCESS

    try:
        result = db.execute(
            update(Payment)
            .where(
                Payment.reference == reference,
                Payment.status != PaymentStatus.SUCCESS,
            )
            .values({
                Payment.status: status,
                Payment.details: merged,
                Payment.verified: succeeded,
                Payment.verified_at: now if succeeded else None,
            })
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            # A concurrent notification already recorded the success
            db.rollback()
            db.refresh(payment)
            logger.info(f"Payment {reference} reconciled concurrently; returning stored state")
            return payment

        db.refresh(payment)

        if succeeded:
            _settle_linked_transaction(db, payment)
            if payment.purpose in SUBSCRIPTION_PURPOSES:
                activate_subscription(db, payment)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(payment)
    logger.info(f"Reconciled payment {reference} to {status.value} via {source.value}")
    return payment


def handle_webhook(
    db: Session,
    raw_body: bytes,
    signature: str | None,
    secret: str | None = None,
) -> Payment:
    """Verify the webhook signature, then reconcile its outcome."""
    if secret is None:
        secret = get_settings().gateway_webhook_secret
    verify_webhook_signature(raw_body, signature, secret)

    try:
        payload = json.loads(raw_body or b"{}")
    except ValueError:
        raise ValidationError("Webhook payload is not valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Webhook payload must be a JSON object")

    reference = payload.get("tx_ref") or payload.get("reference")
    if not reference:
        raise ValidationError("Transaction reference missing")

    status = map_gateway_status(payload.get("status"))
    return reconcile(db, reference, status, payload, source=ReconciliationSource.WEBHOOK)


def verify_payment(
    db: Session,
    reference: str,
    gateway: GatewayClient,
    source: ReconciliationSource = ReconciliationSource.POLL,
) -> VerificationResult:
    """
    Pull the payment's outcome from the gateway and reconcile it.

    If the gateway is unreachable or unconfigured the stored payment is
    returned untouched in ``demo`` mode; nothing is lost and a later
    webhook, poll or manual trigger can still settle it.
    """
    payment = get_payment(db, reference)
    if payment.status == PaymentStatus.SUCCESS:
        return VerificationResult(payment=payment, mode="cached", message="Payment already verified")

    try:
        verification = gateway.verify(reference)
    except UpstreamUnavailableError as e:
        logger.warning(f"Gateway verification unavailable for {reference}: {e}")
        return VerificationResult(payment=payment, mode="demo", message=str(e))

    if verification.status == PaymentStatus.PENDING:
        return VerificationResult(payment=payment, mode="live", message="Payment still pending")

    payment = reconcile(db, reference, verification.status, verification.data, source=source)
    return VerificationResult(payment=payment, mode="live", message=f"Payment {payment.status.value}")


def simulate_payment(
    db: Session,
    reference: str,
    status: PaymentStatus | str = PaymentStatus.SUCCESS,
) -> Payment:
    """Manual outcome trigger; refused in production."""
    if get_settings().is_production():
        raise ValidationError("Payment simulation is not available in production")

    return reconcile(
        db,
        reference,
        status,
        {"simulated": True, "simulated_at": utcnow().isoformat()},
        source=ReconciliationSource.MANUAL,
    )


def sweep_pending_payments(
    db: Session,
    gateway: GatewayClient,
    min_age_seconds: int,
    limit: int = 100,
) -> dict[str, int]:
    """Verify stale pending payments through the pull path."""
    cutoff = utcnow() - timedelta(seconds=min_age_seconds)
    references = db.execute(
        select(Payment.reference)
        .where(Payment.status == PaymentStatus.PENDING, Payment.created_at <= cutoff)
        .order_by(Payment.created_at)
        .limit(limit)
    ).scalars().all()

    counts = {"checked": 0, "settled": 0, "failed": 0, "unavailable": 0}
    for reference in references:
        counts["checked"] += 1
        try:
            outcome = verify_payment(db, reference, gateway, source=ReconciliationSource.SWEEP)
        except Exception as e:
            db.rollback()
            logger.error(f"Sweep could not reconcile payment {reference}: {e}")
            continue

        if outcome.mode == "demo":
            counts["unavailable"] += 1
        elif outcome.payment.status == PaymentStatus.SUCCESS:
            counts["settled"] += 1
        elif outcome.payment.status == PaymentStatus.FAILED:
            counts["failed"] += 1

    logger.info(f"Pending payment sweep: {counts}")
    return counts
