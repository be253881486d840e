"""Payment initiation: create the pending payment before the gateway sees it."""

import logging
import secrets
import string
import time
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import UpstreamUnavailableError, ValidationError
from app.models import Payment, Transaction
from app.domain.settlement.enums import (
    AccountKind,
    PaymentPurpose,
    PaymentStatus,
    TransactionKind,
)
from app.domain.settlement.tenant_scope import TenantScope
from app.domain.payments.gateway import GatewayClient

logger = logging.getLogger(__name__)

_REFERENCE_ALPHABET = string.ascii_lowercase + string.digits


@dataclass
class InitiatedPayment:
    payment: Payment
    transaction: Transaction | None
    checkout_url: str
    mode: str  # "live" or "demo"


def generate_reference(prefix: str | None = None) -> str:
    """``{prefix}-{epoch ms}-{9 random chars}``."""
    prefix = prefix or get_settings().payment_reference_prefix
    suffix = "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def initialize_payment(
    db: Session,
    gateway: GatewayClient,
    amount: Decimal,
    purpose: PaymentPurpose = PaymentPurpose.ORDER,
    company_id: UUID | None = None,
    user_id: UUID | None = None,
    description: str | None = None,
    category: str | None = None,
    email: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
    phone_number: str | None = None,
    payment_method: str = "chapa",
    plan_name: str | None = None,
) -> InitiatedPayment:
    """
    Record a pending payment (and, for order payments, the pending income
    transaction it funds), then request a checkout session.

    The payment row is committed before the gateway is contacted, so a
    gateway outage degrades to demo mode without losing the record.
    """
    settings = get_settings()
    amount = Decimal(amount)
    if amount <= 0:
        raise ValidationError("Valid amount is required")

    if purpose == PaymentPurpose.ORDER and (company_id is None or user_id is None):
        raise ValidationError("Order payments require an authenticated tenant and user")

    reference = generate_reference()
    transaction = None

    try:
        if purpose == PaymentPurpose.ORDER:
            scope = TenantScope(db, company_id)
            account = scope.get_or_create_account(settings.gateway_account_name, AccountKind.REVENUE)
            transaction = scope.create_transaction(
                description=description or "Gateway Payment",
                amount=amount,
                kind=TransactionKind.INCOME,
                category=category or "Sales",
                account_id=account.id,
                reference=reference,
                created_by=user_id,
            )

        payment = Payment(
            reference=reference,
            company_id=company_id,
            user_id=user_id,
            amount=amount,
            currency=settings.gateway_currency,
            status=PaymentStatus.PENDING,
            purpose=purpose,
            payment_method=payment_method,
            phone_number=phone_number,
            transaction_id=transaction.id if transaction else None,
            details={
                "description": description,
                "category": category,
                "email": email,
                "first_name": first_name,
                "last_name": last_name,
                "plan_name": plan_name,
            },
        )
        db.add(payment)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(payment)
    logger.info(f"Initialized payment {reference} for {amount} ({purpose.value})")

    try:
        checkout = gateway.initialize(
            reference=reference,
            amount=amount,
            currency=settings.gateway_currency,
            email=email,
            first_name=first_name,
            last_name=last_name,
            callback_url=settings.gateway_callback_url,
            return_url=settings.gateway_return_url,
        )
        return InitiatedPayment(
            payment=payment,
            transaction=transaction,
            checkout_url=checkout.checkout_url,
            mode="live",
        )
    except UpstreamUnavailableError as e:
        logger.warning(f"Gateway unavailable for {reference}, using demo checkout: {e}")
        return InitiatedPayment(
            payment=payment,
            transaction=transaction,
            checkout_url=f"{settings.gateway_demo_checkout_url.rstrip('/')}/{reference}",
            mode="demo",
        )
