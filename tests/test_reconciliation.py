"""Tests for gateway payment initiation and reconciliation."""

import json
import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import httpx
import pytest
from sqlalchemy import select

from app.core.config import get_settings
from app.core.exceptions import (
    NotFoundError,
    ReconciliationSignatureError,
    UpstreamUnavailableError,
    ValidationError,
)
from app.db.session import SessionLocal
from app.domain.payments import reconciliation
from app.domain.payments.gateway import GatewayClient, map_gateway_status
from app.domain.payments.initiation import generate_reference, initialize_payment
from app.domain.payments.reconciliation import (
    handle_webhook,
    reconcile,
    simulate_payment,
    sweep_pending_payments,
    verify_payment,
)
from app.domain.payments.signature import compute_signature
from app.domain.payments.subscriptions import add_one_month
from app.domain.settlement.enums import (
    AccountKind,
    PaymentPurpose,
    PaymentStatus,
    TransactionStatus,
)
from app.models import Account, Payment, Subscription, Transaction
from app.models.base import utcnow
from tests.conftest import WEBHOOK_SECRET


def gateway_with(handler) -> GatewayClient:
    return GatewayClient(
        base_url="https://gateway.test/v1",
        secret_key="CHASECK-live-key",
        transport=httpx.MockTransport(handler),
    )


def verify_handler(gateway_status: str):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/v1/transaction/verify/"):
            reference = request.url.path.rsplit("/", 1)[-1]
            return httpx.Response(200, json={
                "status": "success",
                "data": {"status": gateway_status, "tx_ref": reference, "amount": "500.00"},
            })
        return httpx.Response(404, json={"message": "unknown"})
    return handler


def failing_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(502, text="bad gateway")


def signed_webhook(reference: str, status: str = "success"):
    body = json.dumps({"tx_ref": reference, "status": status, "amount": "500.00"}).encode()
    return body, compute_signature(body, WEBHOOK_SECRET)


@pytest.fixture
def demo_gateway() -> GatewayClient:
    return GatewayClient(base_url="https://gateway.test/v1", secret_key="")


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def order_payment(db, demo_gateway, test_company_id, user_id):
    """A pending order payment and its pending income transaction."""
    return initialize_payment(
        db,
        demo_gateway,
        amount=Decimal("500.00"),
        company_id=test_company_id,
        user_id=user_id,
        description="Invoice #42",
        email="payer@example.com",
    )


def gateway_balance(db, company_id) -> Decimal:
    return db.execute(
        select(Account.balance).where(
            Account.company_id == company_id,
            Account.name == "Gateway Payments",
            Account.kind == AccountKind.REVENUE,
        )
    ).scalar_one()


def transaction_status(db, transaction_id):
    return db.execute(select(Transaction.status).where(Transaction.id == transaction_id)).scalar_one()


# ============================================
# INITIATION
# ============================================

def test_initialize_without_gateway_falls_back_to_demo(db, order_payment, test_company_id):
    assert order_payment.mode == "demo"
    assert order_payment.checkout_url.endswith(f"/{order_payment.payment.reference}")

    payment = order_payment.payment
    assert payment.status == PaymentStatus.PENDING
    assert payment.currency == "ETB"
    assert payment.transaction_id == order_payment.transaction.id

    assert order_payment.transaction.status == TransactionStatus.PENDING
    assert order_payment.transaction.reference == payment.reference
    assert gateway_balance(db, test_company_id) == Decimal("0.00")


def test_initialize_with_live_gateway_returns_checkout(db, test_company_id, user_id):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={
            "status": "success",
            "data": {"checkout_url": "https://checkout.gateway.test/abc"},
        })

    initiated = initialize_payment(
        db, gateway_with(handler), amount=Decimal("12.5"), company_id=test_company_id, user_id=user_id
    )

    assert initiated.mode == "live"
    assert initiated.checkout_url == "https://checkout.gateway.test/abc"
    assert seen["body"]["tx_ref"] == initiated.payment.reference
    assert seen["body"]["amount"] == "12.50"
    assert seen["body"]["first_name"] == "Customer"
    assert seen["auth"] == "Bearer CHASECK-live-key"


def test_order_payment_requires_tenant_and_user(db, demo_gateway):
    with pytest.raises(ValidationError):
        initialize_payment(db, demo_gateway, amount=Decimal("10.00"))
    assert db.execute(select(Payment)).scalars().all() == []


def test_non_positive_amount_is_rejected(db, demo_gateway, test_company_id, user_id):
    with pytest.raises(ValidationError):
        initialize_payment(db, demo_gateway, amount=Decimal("0"), company_id=test_company_id, user_id=user_id)


def test_reference_format():
    reference = generate_reference("PAY")
    prefix, millis, suffix = reference.split("-")
    assert prefix == "PAY"
    assert millis.isdigit()
    assert len(suffix) == 9


# ============================================
# WEBHOOK
# ============================================

def test_webhook_success_settles_linked_transaction(db, order_payment, test_company_id):
    reference = order_payment.payment.reference
    body, signature = signed_webhook(reference)

    payment = handle_webhook(db, body, signature)

    assert payment.status == PaymentStatus.SUCCESS
    assert payment.verified is True
    assert payment.verified_at is not None
    assert payment.details["source"] == "webhook"
    assert payment.details["description"] == "Invoice #42"
    assert transaction_status(db, order_payment.transaction.id) == TransactionStatus.PAID
    assert gateway_balance(db, test_company_id) == Decimal("500.00")


def test_webhook_then_poll_credits_exactly_once(db, order_payment, test_company_id):
    reference = order_payment.payment.reference
    body, signature = signed_webhook(reference)

    handle_webhook(db, body, signature)
    handle_webhook(db, body, signature)
    outcome = verify_payment(db, reference, gateway_with(verify_handler("success")))

    assert outcome.mode == "cached"
    assert outcome.payment.status == PaymentStatus.SUCCESS
    assert gateway_balance(db, test_company_id) == Decimal("500.00")


def test_poll_then_webhook_credits_exactly_once(db, order_payment, test_company_id):
    reference = order_payment.payment.reference

    outcome = verify_payment(db, reference, gateway_with(verify_handler("success")))
    body, signature = signed_webhook(reference)
    handle_webhook(db, body, signature)

    assert outcome.mode == "live"
    assert outcome.payment.details["source"] == "poll"
    assert gateway_balance(db, test_company_id) == Decimal("500.00")


def test_success_is_terminal(db, order_payment):
    reference = order_payment.payment.reference
    reconcile(db, reference, PaymentStatus.SUCCESS)

    payment = reconcile(db, reference, PaymentStatus.FAILED)

    assert payment.status == PaymentStatus.SUCCESS


def test_failed_payment_can_later_succeed(db, order_payment, test_company_id):
    reference = order_payment.payment.reference
    body, signature = signed_webhook(reference, status="failed")

    failed = handle_webhook(db, body, signature)
    assert failed.status == PaymentStatus.FAILED
    assert transaction_status(db, order_payment.transaction.id) == TransactionStatus.PENDING

    body, signature = signed_webhook(reference, status="success")
    handle_webhook(db, body, signature)
    assert gateway_balance(db, test_company_id) == Decimal("500.00")


def test_bad_signature_is_rejected_before_any_change(db, order_payment):
    reference = order_payment.payment.reference
    body, _ = signed_webhook(reference)

    with pytest.raises(ReconciliationSignatureError):
        handle_webhook(db, body, "0" * 64)
    with pytest.raises(ReconciliationSignatureError):
        handle_webhook(db, body, None)

    db.refresh(order_payment.payment)
    assert order_payment.payment.status == PaymentStatus.PENDING


def test_webhook_fails_closed_without_secret(db, order_payment):
    body, signature = signed_webhook(order_payment.payment.reference)

    with pytest.raises(ReconciliationSignatureError):
        handle_webhook(db, body, signature, secret="")


def test_webhook_requires_reference(db):
    body = json.dumps({"status": "success"}).encode()

    with pytest.raises(ValidationError):
        handle_webhook(db, body, compute_signature(body, WEBHOOK_SECRET))


def test_webhook_for_unknown_reference_is_not_found(db):
    body, signature = signed_webhook("PAY-0-missing")

    with pytest.raises(NotFoundError):
        handle_webhook(db, body, signature)


def test_concurrent_notifications_credit_exactly_once(db, order_payment, test_company_id):
    reference = order_payment.payment.reference
    barrier = threading.Barrier(3)
    errors = []

    def notify():
        session = SessionLocal()
        try:
            barrier.wait()
            reconcile(session, reference, PaymentStatus.SUCCESS)
        except Exception as e:
            errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=notify) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert gateway_balance(db, test_company_id) == Decimal("500.00")


# ============================================
# VERIFY / SIMULATE / SWEEP
# ============================================

def test_verify_with_unreachable_gateway_returns_demo(db, order_payment):
    outcome = verify_payment(db, order_payment.payment.reference, gateway_with(failing_handler))

    assert outcome.mode == "demo"
    assert outcome.payment.status == PaymentStatus.PENDING


def test_verify_pending_at_gateway_leaves_payment(db, order_payment):
    outcome = verify_payment(db, order_payment.payment.reference, gateway_with(verify_handler("pending")))

    assert outcome.mode == "live"
    assert outcome.payment.status == PaymentStatus.PENDING


def test_gateway_client_raises_upstream_error():
    with pytest.raises(UpstreamUnavailableError) as exc_info:
        gateway_with(failing_handler).verify("PAY-1")
    assert exc_info.value.status_code == 502

    with pytest.raises(UpstreamUnavailableError):
        GatewayClient(base_url="https://gateway.test", secret_key="").verify("PAY-1")


def test_map_gateway_status():
    assert map_gateway_status("success") == PaymentStatus.SUCCESS
    assert map_gateway_status("failed") == PaymentStatus.FAILED
    assert map_gateway_status(None) == PaymentStatus.PENDING


def test_simulate_marks_success_outside_production(db, order_payment, test_company_id):
    payment = simulate_payment(db, order_payment.payment.reference)

    assert payment.status == PaymentStatus.SUCCESS
    assert payment.details["simulated"] is True
    assert gateway_balance(db, test_company_id) == Decimal("500.00")


def test_simulate_refused_in_production(db, order_payment, monkeypatch):
    production = get_settings().model_copy(update={"environment": "production"})
    monkeypatch.setattr(reconciliation, "get_settings", lambda: production)

    with pytest.raises(ValidationError):
        simulate_payment(db, order_payment.payment.reference)


def test_sweep_settles_stale_pending_payments(db, order_payment, test_company_id):
    payment = order_payment.payment
    payment.created_at = utcnow() - timedelta(minutes=10)
    db.commit()

    counts = sweep_pending_payments(db, gateway_with(verify_handler("success")), min_age_seconds=120)

    assert counts == {"checked": 1, "settled": 1, "failed": 0, "unavailable": 0}
    assert gateway_balance(db, test_company_id) == Decimal("500.00")


def test_sweep_skips_recent_payments(db, order_payment):
    counts = sweep_pending_payments(db, gateway_with(verify_handler("success")), min_age_seconds=3600)

    assert counts["checked"] == 0


# ============================================
# SUBSCRIPTIONS
# ============================================

def test_upgrade_payment_activates_subscription(db, demo_gateway, user_id):
    initiated = initialize_payment(
        db,
        demo_gateway,
        amount=Decimal("99.00"),
        purpose=PaymentPurpose.UPGRADE,
        user_id=user_id,
        plan_name="Pro",
    )
    assert initiated.transaction is None

    simulate_payment(db, initiated.payment.reference)

    subscription = db.execute(
        select(Subscription).where(Subscription.user_id == user_id)
    ).scalar_one()
    assert subscription.plan == "Pro"
    assert subscription.status.value == "active"
    assert subscription.renewal_date > utcnow() + timedelta(days=27)


def test_quick_payment_without_user_skips_subscription(db, demo_gateway):
    initiated = initialize_payment(db, demo_gateway, amount=Decimal("99.00"), purpose=PaymentPurpose.SUBSCRIPTION)

    payment = simulate_payment(db, initiated.payment.reference)

    assert payment.status == PaymentStatus.SUCCESS
    assert db.execute(select(Subscription)).scalars().all() == []


def test_add_one_month_clamps_day():
    assert add_one_month(datetime(2026, 1, 31)) == datetime(2026, 2, 28)
    assert add_one_month(datetime(2026, 12, 15)) == datetime(2027, 1, 15)


def test_timestamps_are_naive_utc(db, order_payment):
    now = utcnow()
    aware_now = datetime.now(timezone.utc).replace(tzinfo=None)

    assert now.tzinfo is None
    assert abs(aware_now - now) < timedelta(seconds=5)

    payment = simulate_payment(db, order_payment.payment.reference)
    assert payment.verified_at.tzinfo is None
    assert abs(payment.verified_at - now) < timedelta(minutes=1)
    assert datetime.fromisoformat(payment.details["simulated_at"]).tzinfo is None
