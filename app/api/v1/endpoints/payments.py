"""Payment gateway API endpoints."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.v1.dependencies import get_actor_id, get_optional_company_id
from app.api.v1.errors import http_error
from app.core.config import get_settings
from app.core.exceptions import SettlementError
from app.db.dependencies import get_db
from app.domain.payments.gateway import GatewayClient, get_gateway_client
from app.domain.payments.initiation import initialize_payment
from app.domain.payments.reconciliation import (
    get_payment,
    handle_webhook,
    simulate_payment,
    verify_payment,
)
from app.models import Payment
from app.schemas.payments import (
    PaymentInitializeRequest,
    PaymentInitializeResponse,
    PaymentResponse,
    PaymentVerifyResponse,
    SimulatePaymentRequest,
    WebhookAck,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_gateway() -> GatewayClient:
    return get_gateway_client()


@router.post("/initialize", response_model=PaymentInitializeResponse)
def initialize_payment_endpoint(
    request: PaymentInitializeRequest,
    company_id: Optional[UUID] = Depends(get_optional_company_id),
    user_id: Optional[UUID] = Depends(get_actor_id),
    db: Session = Depends(get_db),
    gateway: GatewayClient = Depends(get_gateway),
) -> PaymentInitializeResponse:
    """
    Start a gateway payment.

    The pending payment is stored before the gateway is called; when the
    gateway is unavailable a demo checkout URL is returned instead.
    """
    try:
        initiated = initialize_payment(
            db,
            gateway,
            amount=request.amount,
            purpose=request.purpose,
            company_id=company_id,
            user_id=user_id,
            description=request.description,
            category=request.category,
            email=request.email,
            first_name=request.first_name,
            last_name=request.last_name,
            phone_number=request.phone_number,
            payment_method=request.payment_method,
            plan_name=request.plan_name,
        )
    except SettlementError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Payment initialization failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Payment initialization failed"
        )

    return PaymentInitializeResponse(
        status="success",
        message="Payment initialized" if initiated.mode == "live" else "Payment initialized (Demo Mode)",
        mode=initiated.mode,
        checkout_url=initiated.checkout_url,
        reference=initiated.payment.reference,
        transaction_id=initiated.transaction.id if initiated.transaction else None,
    )


@router.post("/webhook", response_model=WebhookAck)
async def webhook_endpoint(
    request: Request,
    chapa_signature: Optional[str] = Header(None, alias="Chapa-Signature"),
    x_chapa_signature: Optional[str] = Header(None, alias="X-Chapa-Signature"),
    db: Session = Depends(get_db),
) -> WebhookAck:
    """
    Gateway push notification. The signature is checked over the raw body
    before anything is read from it.
    """
    raw_body = await request.body()
    try:
        payment = handle_webhook(db, raw_body, chapa_signature or x_chapa_signature)
    except SettlementError as e:
        logger.warning(f"Webhook rejected: {e}")
        raise http_error(e)

    return WebhookAck(
        message="Webhook processed successfully",
        reference=payment.reference,
        status=payment.status,
    )


@router.get("/verify/{reference}", response_model=PaymentVerifyResponse)
def verify_payment_endpoint(
    reference: str,
    db: Session = Depends(get_db),
    gateway: GatewayClient = Depends(get_gateway),
) -> PaymentVerifyResponse:
    """Client-triggered pull verification."""
    try:
        outcome = verify_payment(db, reference, gateway)
    except SettlementError as e:
        raise http_error(e)

    return PaymentVerifyResponse(
        status=outcome.payment.status,
        mode=outcome.mode,
        message=outcome.message,
        data=PaymentResponse.model_validate(outcome.payment),
    )


@router.post("/simulate", response_model=PaymentResponse)
def simulate_payment_endpoint(
    request: SimulatePaymentRequest,
    db: Session = Depends(get_db),
) -> PaymentResponse:
    """Manual outcome trigger for non-production environments."""
    if get_settings().is_production():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not available in production"
        )

    try:
        payment = simulate_payment(db, request.reference, request.status)
    except SettlementError as e:
        raise http_error(e)

    return PaymentResponse.model_validate(payment)


@router.get("", response_model=List[PaymentResponse])
def payment_history(
    user_id: Optional[UUID] = Depends(get_actor_id),
    db: Session = Depends(get_db),
) -> List[PaymentResponse]:
    """Latest payments of the calling user."""
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )

    payments = db.execute(
        select(Payment)
        .where(Payment.user_id == user_id)
        .order_by(Payment.created_at.desc())
        .limit(20)
    ).scalars().all()
    return [PaymentResponse.model_validate(p) for p in payments]


@router.get("/{reference}", response_model=PaymentResponse)
def get_payment_endpoint(
    reference: str,
    db: Session = Depends(get_db),
) -> PaymentResponse:
    """Current payment record, for client-side polling."""
    try:
        return PaymentResponse.model_validate(get_payment(db, reference))
    except SettlementError as e:
        raise http_error(e)
