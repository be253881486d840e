"""Pending-approvals aggregation across every settleable document kind."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..domain.settlement.engine import SETTLEMENT_RULES
from ..domain.settlement.enums import DocumentKind
from ..domain.settlement.tenant_scope import TenantScope
from ..models import Expense, Order, PayrollRun, PurchaseOrder, TeamInvite, Transaction

logger = structlog.get_logger()


@dataclass
class ApprovalItem:
    """One pending document in the approver's inbox."""
    id: UUID
    kind: DocumentKind
    module: str
    title: str
    amount: Optional[Decimal]
    status: str
    date: datetime
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "module": self.module,
            "title": self.title,
            "amount": self.amount,
            "status": self.status,
            "date": self.date,
            "details": self.details,
        }


@dataclass
class SubQueryResult:
    """Pending items for one kind, or an empty list and the failure text."""
    kind: DocumentKind
    items: list[ApprovalItem] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _transaction_item(row: Transaction) -> ApprovalItem:
    return ApprovalItem(
        id=row.id,
        kind=DocumentKind.TRANSACTION,
        module="Finance",
        title=row.description,
        amount=row.amount,
        status=row.status.value,
        date=row.created_at,
        details={"category": row.category, "transaction_type": row.kind.value},
    )


def _expense_item(row: Expense) -> ApprovalItem:
    return ApprovalItem(
        id=row.id,
        kind=DocumentKind.EXPENSE,
        module="Expenses",
        title=row.title or row.description,
        amount=row.amount,
        status=row.status.value,
        date=row.created_at,
        details={"category": row.category, "description": row.description},
    )


def _order_item(row: Order) -> ApprovalItem:
    return ApprovalItem(
        id=row.id,
        kind=DocumentKind.ORDER,
        module="Sales",
        title=f"Order #{row.order_number} - {row.customer_name}",
        amount=row.total_amount,
        status=row.status.value,
        date=row.created_at,
        details={"customer_name": row.customer_name, "order_number": row.order_number},
    )


def _payroll_item(row: PayrollRun) -> ApprovalItem:
    return ApprovalItem(
        id=row.id,
        kind=DocumentKind.PAYROLL,
        module="Payroll",
        title=f"Payroll - {row.month}",
        amount=row.net_salary,
        status=row.status.value,
        date=row.created_at,
        details={
            "employee_id": row.employee_id,
            "employee_name": row.employee_name,
            "month": row.month,
            "basic_salary": row.basic_salary,
        },
    )


def _procurement_item(row: PurchaseOrder) -> ApprovalItem:
    return ApprovalItem(
        id=row.id,
        kind=DocumentKind.PROCUREMENT,
        module="Procurement",
        title=f"PO #{row.order_number} - {row.supplier}",
        amount=row.total_amount,
        status=row.status.value,
        date=row.created_at,
        details={"supplier": row.supplier, "order_number": row.order_number},
    )


def _invite_item(row: TeamInvite) -> ApprovalItem:
    return ApprovalItem(
        id=row.id,
        kind=DocumentKind.INVITE,
        module="Team",
        title=f"Team Invite - {row.email}",
        amount=None,
        status=row.status.value,
        date=row.created_at,
        details={"email": row.email, "role": row.role},
    )


NORMALIZERS: dict[DocumentKind, Callable[[Any], ApprovalItem]] = {
    DocumentKind.TRANSACTION: _transaction_item,
    DocumentKind.EXPENSE: _expense_item,
    DocumentKind.ORDER: _order_item,
    DocumentKind.PAYROLL: _payroll_item,
    DocumentKind.PROCUREMENT: _procurement_item,
    DocumentKind.INVITE: _invite_item,
}


class ApprovalsService:
    """
    Read-only fan-out over every document kind for one tenant.

    Each kind is queried on its own worker thread with its own session. A
    failing query degrades to an empty list for that kind.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        limit_per_kind: Optional[int] = None,
        max_workers: Optional[int] = None,
    ):
        settings = get_settings()
        self.session_factory = session_factory
        self.limit_per_kind = limit_per_kind or settings.approvals_limit_per_kind
        self.max_workers = max_workers or settings.approvals_max_workers

    def fetch_kind(self, company_id: UUID, kind: DocumentKind) -> SubQueryResult:
        """Pending items of one kind; never raises."""
        rule = SETTLEMENT_RULES[kind]
        normalize = NORMALIZERS[kind]

        db = None
        try:
            db = self.session_factory()
            scope = TenantScope(db, company_id)
            rows = scope.list(rule.model, statuses=rule.pending, limit=self.limit_per_kind)
            return SubQueryResult(kind=kind, items=[normalize(row) for row in rows])
        except Exception as e:
            logger.warning(
                "Pending approvals query skipped",
                kind=kind.value,
                company_id=str(company_id),
                error=str(e),
            )
            return SubQueryResult(kind=kind, error=str(e))
        finally:
            if db is not None:
                db.close()

    def get_pending_approvals(self, company_id: UUID) -> dict[str, Any]:
        """
        Merge pending documents of every kind, newest first.

        Returns:
            Dict with ``approvals`` (list of item dicts) and ``summary``
            (``total``, ``by_kind`` counts and ``degraded`` kinds).
        """
        kinds = list(DocumentKind)
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(kinds))) as pool:
            results = list(pool.map(lambda kind: self.fetch_kind(company_id, kind), kinds))

        items = [item for result in results for item in result.items]
        items.sort(key=lambda item: item.date, reverse=True)

        summary = {
            "total": len(items),
            "by_kind": {result.kind.value: len(result.items) for result in results},
            "degraded": [result.kind.value for result in results if not result.ok],
        }

        logger.info(
            "Aggregated pending approvals",
            company_id=str(company_id),
            total=summary["total"],
            degraded=summary["degraded"],
        )
        return {"approvals": [item.to_dict() for item in items], "summary": summary}
