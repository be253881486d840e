"""
Settlement engine.

Moves a pending document to its terminal status and applies the balance
and stock effects of that move as one unit of work. The conditional status
transition is always the first write of the unit, so of two concurrent
settlements of the same document exactly one proceeds and the other gets
ConflictError.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, ValidationError
from app.models import (
    Expense,
    Order,
    PayrollRun,
    PurchaseOrder,
    TeamInvite,
    Transaction,
)
from app.domain.settlement.enums import (
    DocumentKind,
    ExpenseStatus,
    InviteStatus,
    OrderStatus,
    PayrollStatus,
    PurchaseOrderStatus,
    SettlementAction,
    TransactionStatus,
)
from app.domain.settlement.inventory_service import deduct_stock_for_order
from app.domain.settlement.ledger_service import (
    apply_transaction_to_account,
    record_order_sale,
)
from app.domain.settlement.tenant_scope import TenantScope

logger = logging.getLogger(__name__)


ApproveHook = Callable[[TenantScope, Any, UUID | None], dict]


@dataclass(frozen=True)
class SettlementRule:
    """How one document kind leaves its pending state."""
    model: type
    pending: frozenset
    approved: Any
    rejected: Any
    on_approve: ApproveHook | None = None
    approve_values: Callable[[], dict] | None = None


@dataclass
class SettlementResult:
    """Outcome of a committed (or, inside reconciliation, staged) settlement."""
    kind: DocumentKind
    action: SettlementAction
    document: Any
    details: dict = field(default_factory=dict)

    @property
    def status(self) -> str:
        return self.document.status.value


def _approve_transaction(scope: TenantScope, transaction: Transaction, actor_id: UUID | None) -> dict:
    delta = apply_transaction_to_account(scope, transaction)
    return {"account_id": transaction.account_id, "balance_change": delta}


def _approve_order(scope: TenantScope, order: Order, actor_id: UUID | None) -> dict:
    deducted = deduct_stock_for_order(scope, order)
    sale = record_order_sale(scope, order, actor_id=actor_id)
    return {
        "deducted": [{"stock_item_id": item_id, "quantity": qty} for item_id, qty in deducted],
        "sale_transaction_id": sale.id if sale else None,
        "revenue_account_id": sale.account_id if sale else None,
    }


def _payroll_paid_values() -> dict:
    return {"payment_date": date.today()}


SETTLEMENT_RULES: dict[DocumentKind, SettlementRule] = {
    DocumentKind.TRANSACTION: SettlementRule(
        model=Transaction,
        pending=frozenset({TransactionStatus.PENDING}),
        approved=TransactionStatus.PAID,
        rejected=TransactionStatus.REJECTED,
        on_approve=_approve_transaction,
    ),
    DocumentKind.EXPENSE: SettlementRule(
        model=Expense,
        pending=frozenset({ExpenseStatus.PENDING}),
        approved=ExpenseStatus.APPROVED,
        rejected=ExpenseStatus.REJECTED,
    ),
    DocumentKind.ORDER: SettlementRule(
        model=Order,
        pending=frozenset({OrderStatus.PROCESSING}),
        approved=OrderStatus.COMPLETED,
        rejected=OrderStatus.CANCELLED,
        on_approve=_approve_order,
    ),
    DocumentKind.PAYROLL: SettlementRule(
        model=PayrollRun,
        pending=frozenset({PayrollStatus.PENDING, PayrollStatus.PROCESSED}),
        approved=PayrollStatus.PAID,
        rejected=PayrollStatus.CANCELLED,
        approve_values=_payroll_paid_values,
    ),
    DocumentKind.PROCUREMENT: SettlementRule(
        model=PurchaseOrder,
        pending=frozenset({PurchaseOrderStatus.PENDING, PurchaseOrderStatus.REQUESTED}),
        approved=PurchaseOrderStatus.APPROVED,
        rejected=PurchaseOrderStatus.REJECTED,
    ),
    DocumentKind.INVITE: SettlementRule(
        model=TeamInvite,
        pending=frozenset({InviteStatus.PENDING}),
        approved=InviteStatus.ACTIVE,
        rejected=InviteStatus.REJECTED,
    ),
}

_missing_rules = set(DocumentKind) - set(SETTLEMENT_RULES)
if _missing_rules:
    raise RuntimeError(f"No settlement rule for document kinds: {sorted(k.value for k in _missing_rules)}")


def parse_kind(kind: DocumentKind | str) -> DocumentKind:
    try:
        return DocumentKind(kind)
    except ValueError:
        raise ValidationError(f"Invalid document kind: {kind!r}")


def parse_action(action: SettlementAction | str) -> SettlementAction:
    try:
        return SettlementAction(action)
    except ValueError:
        raise ValidationError(f"Invalid settlement action: {action!r}")


def _load_document(scope: TenantScope, rule: SettlementRule, document_id: UUID):
    if rule.model is Order:
        return scope.get_order(document_id)
    return scope.get(rule.model, document_id)


def apply_settlement(
    scope: TenantScope,
    kind: DocumentKind | str,
    document_id: UUID,
    action: SettlementAction | str,
    actor_id: UUID | None = None,
) -> SettlementResult:
    """
    Stage one settlement inside the caller's unit of work. Does not commit.

    Raises:
        ValidationError: unknown kind or action
        NotFoundError: document absent for this tenant
        ConflictError: document already left its pending status
        InsufficientStockError: order line exceeds live stock
    """
    kind = parse_kind(kind)
    action = parse_action(action)
    rule = SETTLEMENT_RULES[kind]

    document = _load_document(scope, rule, document_id)
    if document.status not in rule.pending:
        raise ConflictError(rule.model.__name__, document_id, document.status.value)

    if action == SettlementAction.APPROVE:
        new_status = rule.approved
        values = rule.approve_values() if rule.approve_values else {}
    else:
        new_status = rule.rejected
        values = {}

    if not scope.transition_status(rule.model, document_id, rule.pending, new_status, **values):
        # Lost the race to a concurrent settlement of the same document
        scope.db.refresh(document)
        raise ConflictError(rule.model.__name__, document_id, document.status.value)

    details: dict = {}
    if action == SettlementAction.APPROVE and rule.on_approve is not None:
        details = rule.on_approve(scope, document, actor_id)

    scope.db.flush()
    scope.db.refresh(document)

    return SettlementResult(kind=kind, action=action, document=document, details=details)


def settle_document(
    db: Session,
    company_id: UUID,
    kind: DocumentKind | str,
    document_id: UUID,
    action: SettlementAction | str,
    actor_id: UUID | None = None,
) -> SettlementResult:
    """
    Settle a document as a single all-or-nothing unit.

    Args:
        db: Database session
        company_id: Tenant owning the document
        kind: Document kind (transaction, order, payroll, procurement, invite)
        document_id: Document UUID
        action: approve or reject
        actor_id: User performing the settlement

    Returns:
        SettlementResult with the refreshed document

    Raises:
        ValidationError, NotFoundError, ConflictError, InsufficientStockError.
        Any error rolls back every change made in the unit.
    """
    kind = parse_kind(kind)
    action = parse_action(action)
    scope = TenantScope(db, company_id)

    try:
        result = apply_settlement(scope, kind, document_id, action, actor_id=actor_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Settled {kind.value} {document_id} with {action.value} "
        f"for company {company_id}: status={result.status}"
    )
    return result
