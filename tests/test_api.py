"""Tests for the HTTP API."""

import json
from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.domain.payments.signature import compute_signature
from app.main import app
from tests.conftest import WEBHOOK_SECRET

client = TestClient(app)


@pytest.fixture
def headers(test_company_id):
    return {"X-Company-ID": str(test_company_id), "X-User-ID": str(uuid4())}


def create_account(headers, balance="1000.00"):
    response = client.post(
        "/api/v1/ledger/accounts",
        json={"name": "Main Bank", "kind": "bank", "opening_balance": balance},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


def create_transaction(headers, account_id, amount="250.00"):
    response = client.post(
        "/api/v1/ledger/transactions",
        json={"description": "Consulting", "amount": amount, "kind": "income", "account_id": account_id},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


def test_root_and_health():
    assert client.get("/").status_code == 200
    assert client.get("/health").json() == {"status": "healthy"}


def test_settle_transaction_and_conflict(headers):
    account = create_account(headers)
    tx = create_transaction(headers, account["id"])
    assert tx["status"] == "pending"

    response = client.post(f"/api/v1/settlement/transaction/{tx['id']}/approve", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "paid"
    assert body["message"] == "Transaction approved"

    account = client.get(f"/api/v1/ledger/accounts/{account['id']}", headers=headers).json()
    assert Decimal(account["balance"]) == Decimal("1250.00")

    again = client.post(f"/api/v1/settlement/transaction/{tx['id']}/approve", headers=headers)
    assert again.status_code == 409
    assert again.json()["detail"]["error"] == "already_settled"
    assert again.json()["detail"]["current_status"] == "paid"


def test_settlement_requires_tenant_header(headers):
    response = client.post(f"/api/v1/settlement/transaction/{uuid4()}/approve")
    assert response.status_code == 401


def test_settlement_errors_map_to_status_codes(headers):
    assert client.post(f"/api/v1/settlement/refund/{uuid4()}/approve", headers=headers).status_code == 400
    assert client.post(f"/api/v1/settlement/order/{uuid4()}/archive", headers=headers).status_code == 400
    assert client.post(f"/api/v1/settlement/order/{uuid4()}/approve", headers=headers).status_code == 404


def test_other_tenant_gets_not_found(headers):
    account = create_account(headers)
    tx = create_transaction(headers, account["id"])

    other = {"X-Company-ID": str(uuid4())}
    response = client.post(f"/api/v1/settlement/transaction/{tx['id']}/approve", headers=other)

    assert response.status_code == 404
    assert client.get(f"/api/v1/ledger/transactions/{tx['id']}", headers=other).status_code == 404


def test_order_with_insufficient_stock_returns_409(headers):
    item = client.post(
        "/api/v1/inventory/items",
        json={"sku": "G-1", "name": "Gadget", "quantity": 2, "unit_price": "40.00"},
        headers=headers,
    ).json()
    order = client.post(
        "/api/v1/sales/orders",
        json={"order_number": "SO-1", "customer_name": "Acme", "lines": [{"stock_item_id": item["id"], "quantity": 3}]},
        headers=headers,
    )
    assert order.status_code == 201
    assert Decimal(order.json()["total_amount"]) == Decimal("120.00")

    response = client.post(f"/api/v1/settlement/order/{order.json()['id']}/approve", headers=headers)

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["error"] == "insufficient_stock"
    assert detail["item"] == "Gadget"
    assert detail["available"] == 2
    assert detail["requested"] == 3

    item = client.get(f"/api/v1/inventory/items/{item['id']}", headers=headers).json()
    assert item["quantity"] == 2


def test_duplicate_sku_conflicts(headers):
    payload = {"sku": "W-1", "name": "Widget", "quantity": 1}
    assert client.post("/api/v1/inventory/items", json=payload, headers=headers).status_code == 201
    assert client.post("/api/v1/inventory/items", json=payload, headers=headers).status_code == 409


def test_approvals_inbox_approve_and_reject(headers):
    po = client.post(
        "/api/v1/procurement/orders",
        json={"order_number": "PO-1", "supplier": "Globex", "total_amount": "300.00"},
        headers=headers,
    ).json()
    invite = client.post("/api/v1/team/invites", json={"email": "ada@example.com"}, headers=headers).json()

    pending = client.get("/api/v1/approvals/pending", headers=headers)
    assert pending.status_code == 200
    assert pending.json()["summary"]["total"] == 2
    assert {item["id"] for item in pending.json()["approvals"]} == {po["id"], invite["id"]}

    approved = client.post(f"/api/v1/approvals/{po['id']}/approve", json={"type": "procurement"}, headers=headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "Approved"

    rejected = client.post(
        f"/api/v1/approvals/{invite['id']}/reject",
        json={"type": "invite", "reason": "Unknown address"},
        headers=headers,
    )
    assert rejected.status_code == 200
    assert rejected.json()["status"] == "Rejected"

    pending = client.get("/api/v1/approvals/pending", headers=headers).json()
    assert pending["approvals"] == []


def test_expense_claim_through_inbox(headers):
    claim = client.post(
        "/api/v1/expenses",
        json={"description": "Printer toner", "amount": "89.90", "category": "Office"},
        headers=headers,
    )
    assert claim.status_code == 201
    assert claim.json()["status"] == "Pending"
    assert claim.json()["submitted_by"] == headers["X-User-ID"]

    pending = client.get("/api/v1/approvals/pending", headers=headers).json()
    assert pending["summary"]["by_kind"]["expense"] == 1
    assert pending["approvals"][0]["module"] == "Expenses"

    approved = client.post(
        f"/api/v1/approvals/{claim.json()['id']}/approve", json={"type": "expense"}, headers=headers
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "Approved"
    assert approved.json()["message"] == "Expense approved"

    expenses = client.get("/api/v1/expenses", headers=headers).json()
    assert [e["status"] for e in expenses] == ["Approved"]


def test_invalid_invite_email_is_rejected(headers):
    response = client.post("/api/v1/team/invites", json={"email": "not-an-email"}, headers=headers)
    assert response.status_code == 422


def test_payment_flow_credits_once(headers):
    initialized = client.post(
        "/api/v1/payments/initialize",
        json={"amount": "500.00", "description": "Invoice #7"},
        headers=headers,
    )
    assert initialized.status_code == 200
    body = initialized.json()
    assert body["mode"] == "demo"
    reference = body["reference"]

    payload = json.dumps({"tx_ref": reference, "status": "success"}).encode()
    signature = compute_signature(payload, WEBHOOK_SECRET)
    for _ in range(2):
        webhook = client.post(
            "/api/v1/payments/webhook",
            content=payload,
            headers={"Chapa-Signature": signature, "Content-Type": "application/json"},
        )
        assert webhook.status_code == 200
        assert webhook.json()["status"] == "success"

    verified = client.get(f"/api/v1/payments/verify/{reference}")
    assert verified.status_code == 200
    assert verified.json()["mode"] == "cached"
    assert verified.json()["data"]["metadata"]["description"] == "Invoice #7"

    tx = client.get(f"/api/v1/ledger/transactions/{body['transaction_id']}", headers=headers).json()
    assert tx["status"] == "paid"

    accounts = client.get("/api/v1/ledger/accounts", headers=headers).json()
    assert [Decimal(a["balance"]) for a in accounts] == [Decimal("500.00")]

    history = client.get("/api/v1/payments", headers=headers).json()
    assert [p["reference"] for p in history] == [reference]


def test_webhook_with_bad_signature_is_unauthorized(headers):
    reference = client.post("/api/v1/payments/initialize", json={"amount": "10.00"}, headers=headers).json()["reference"]
    payload = json.dumps({"tx_ref": reference, "status": "success"}).encode()

    response = client.post("/api/v1/payments/webhook", content=payload, headers={"Chapa-Signature": "bad"})

    assert response.status_code == 401
    assert client.get(f"/api/v1/payments/{reference}").json()["status"] == "pending"


def test_simulate_and_lookup(headers):
    reference = client.post("/api/v1/payments/initialize", json={"amount": "10.00"}, headers=headers).json()["reference"]

    simulated = client.post("/api/v1/payments/simulate", json={"reference": reference})

    assert simulated.status_code == 200
    assert simulated.json()["status"] == "success"
    assert simulated.json()["metadata"]["simulated"] is True


def test_order_payment_without_user_is_bad_request(test_company_id):
    response = client.post(
        "/api/v1/payments/initialize",
        json={"amount": "10.00"},
        headers={"X-Company-ID": str(test_company_id)},
    )
    assert response.status_code == 400


def test_unknown_payment_is_not_found():
    assert client.get("/api/v1/payments/PAY-0-missing").status_code == 404
    assert client.get("/api/v1/payments/verify/PAY-0-missing").status_code == 404


def test_history_requires_user():
    assert client.get("/api/v1/payments").status_code == 401
