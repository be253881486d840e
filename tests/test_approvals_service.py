"""Tests for the pending approvals aggregator."""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from app.db.session import SessionLocal
from app.models.base import utcnow
from app.domain.settlement.enums import (
    AccountKind,
    DocumentKind,
    PayrollStatus,
    TransactionKind,
)
from app.domain.settlement.tenant_scope import TenantScope
from app.services import approvals_service
from app.services.approvals_service import ApprovalsService


@pytest.fixture
def pending_documents(db, scope, stock):
    """One pending document of every kind, created a minute apart."""
    account = scope.create_account("Main Bank", AccountKind.BANK)
    base = utcnow() - timedelta(hours=1)

    docs = {
        DocumentKind.TRANSACTION: scope.create_transaction(
            description="Office rent", amount=Decimal("800.00"), kind=TransactionKind.EXPENSE, account_id=account.id
        ),
        DocumentKind.EXPENSE: scope.create_expense(
            description="Client dinner", amount=Decimal("64.50"), category="Meals", title="Dinner with Initech"
        ),
        DocumentKind.ORDER: scope.create_order(
            order_number="SO-9", customer_name="Initech",
            lines=[{"stock_item_id": stock["widget"].id, "quantity": 1}],
        ),
        DocumentKind.PAYROLL: scope.create_payroll_run(
            month="2026-09", basic_salary=Decimal("2000.00"), employee_name="Ada"
        ),
        DocumentKind.PROCUREMENT: scope.create_purchase_order(
            order_number="PO-3", supplier="Globex", total_amount=Decimal("150.00")
        ),
        DocumentKind.INVITE: scope.create_team_invite(email="new@example.com", role="accountant"),
    }
    for offset, doc in enumerate(docs.values()):
        doc.created_at = base + timedelta(minutes=offset)

    # Settled payroll and another tenant's document never show up
    paid = scope.create_payroll_run(month="2026-08", basic_salary=Decimal("2000.00"))
    paid.status = PayrollStatus.PAID
    TenantScope(db, uuid4()).create_team_invite(email="stranger@example.com")

    db.commit()
    return docs


def test_aggregates_every_kind_newest_first(pending_documents, test_company_id):
    service = ApprovalsService(SessionLocal)

    result = service.get_pending_approvals(test_company_id)

    kinds = [item["kind"] for item in result["approvals"]]
    assert kinds == ["invite", "procurement", "payroll", "order", "expense", "transaction"]
    assert result["summary"]["total"] == 6
    assert result["summary"]["degraded"] == []
    assert result["summary"]["by_kind"] == {kind.value: 1 for kind in DocumentKind}


def test_items_are_normalized(pending_documents, test_company_id):
    result = ApprovalsService(SessionLocal).get_pending_approvals(test_company_id)
    items = {item["kind"]: item for item in result["approvals"]}

    assert items["order"]["title"] == "Order #SO-9 - Initech"
    assert items["order"]["module"] == "Sales"
    assert items["order"]["amount"] == Decimal("25.00")
    assert items["procurement"]["title"] == "PO #PO-3 - Globex"
    assert items["payroll"]["details"]["employee_name"] == "Ada"
    assert items["invite"]["amount"] is None
    assert items["invite"]["details"]["role"] == "accountant"
    assert items["transaction"]["details"]["transaction_type"] == "expense"
    assert items["expense"]["module"] == "Expenses"
    assert items["expense"]["title"] == "Dinner with Initech"
    assert items["expense"]["amount"] == Decimal("64.50")
    assert items["expense"]["details"]["category"] == "Meals"


def test_failing_kind_degrades_to_empty_list(pending_documents, test_company_id, monkeypatch):
    def broken(row):
        raise RuntimeError("payroll table unavailable")

    monkeypatch.setitem(approvals_service.NORMALIZERS, DocumentKind.PAYROLL, broken)

    result = ApprovalsService(SessionLocal).get_pending_approvals(test_company_id)

    assert result["summary"]["degraded"] == ["payroll"]
    assert result["summary"]["total"] == 5
    assert "payroll" not in [item["kind"] for item in result["approvals"]]


def test_unavailable_database_degrades_every_kind(test_company_id):
    def no_session():
        raise RuntimeError("connection refused")

    result = ApprovalsService(no_session).get_pending_approvals(test_company_id)

    assert result["approvals"] == []
    assert sorted(result["summary"]["degraded"]) == sorted(kind.value for kind in DocumentKind)


def test_limit_per_kind(db, scope, test_company_id):
    for i in range(5):
        scope.create_purchase_order(order_number=f"PO-{i}", supplier="Globex", total_amount=Decimal("10.00"))
    db.commit()

    result = ApprovalsService(SessionLocal, limit_per_kind=2).get_pending_approvals(test_company_id)

    assert result["summary"]["by_kind"]["procurement"] == 2
