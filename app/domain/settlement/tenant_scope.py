"""Tenant-scoped data access for the settlement engine."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import NotFoundError, ValidationError
from app.models import (
    Account,
    Expense,
    Order,
    OrderLine,
    PayrollRun,
    PurchaseOrder,
    StockItem,
    TeamInvite,
    Transaction,
)
from app.domain.settlement.enums import (
    AccountKind,
    TransactionKind,
    TransactionStatus,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class TenantScope:
    """
    All reads and writes of tenant-owned rows for one company.

    Every statement built here filters on ``company_id``; code holding a
    scope has no way to name another tenant's rows. Nothing in this class
    commits: the caller owns the unit of work.
    """

    def __init__(self, db: Session, company_id: UUID):
        if company_id is None:
            raise ValidationError("company_id is required")
        self.db = db
        self.company_id = company_id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def select(self, model):
        return select(model).where(model.company_id == self.company_id)

    def find(self, model: type[ModelT], document_id: UUID, *options) -> ModelT | None:
        stmt = self.select(model).where(model.id == document_id)
        if options:
            stmt = stmt.options(*options)
        return self.db.execute(stmt).scalars().first()

    def get(self, model: type[ModelT], document_id: UUID, *options) -> ModelT:
        """Fetch a row or raise NotFoundError (also for other tenants' rows)."""
        row = self.find(model, document_id, *options)
        if row is None:
            raise NotFoundError(model.__name__, document_id)
        return row

    def get_order(self, order_id: UUID) -> Order:
        return self.get(Order, order_id, selectinload(Order.lines))

    def list(
        self,
        model: type[ModelT],
        statuses: Iterable[Any] | None = None,
        limit: int | None = None,
    ) -> Sequence[ModelT]:
        stmt = self.select(model)
        if statuses is not None:
            stmt = stmt.where(model.status.in_(list(statuses)))
        stmt = stmt.order_by(model.created_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return self.db.execute(stmt).scalars().all()

    def find_account(self, name: str, kind: AccountKind) -> Account | None:
        stmt = self.select(Account).where(Account.name == name, Account.kind == kind)
        return self.db.execute(stmt).scalars().first()

    # ------------------------------------------------------------------
    # Conditional writes
    # ------------------------------------------------------------------

    def transition_status(
        self,
        model,
        document_id: UUID,
        expected: Iterable[Any],
        new_status: Any,
        **extra_values,
    ) -> bool:
        """
        Set status to ``new_status`` only if the current status is one of
        ``expected``. Returns True when exactly one row changed.
        """
        stmt = (
            update(model)
            .where(
                model.id == document_id,
                model.company_id == self.company_id,
                model.status.in_(list(expected)),
            )
            .values(status=new_status, **extra_values)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def increment_balance(self, account_id: UUID, delta: Decimal) -> None:
        """Relative balance change; never a read-modify-write."""
        stmt = (
            update(Account)
            .where(Account.id == account_id, Account.company_id == self.company_id)
            .values(balance=Account.balance + Decimal(delta))
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        if result.rowcount != 1:
            raise NotFoundError("Account", account_id)

    def decrement_stock(self, item_id: UUID, quantity: int) -> bool:
        """
        Guarded relative decrement. Returns False, changing nothing, when
        the live quantity is below ``quantity`` or the item is missing.
        """
        stmt = (
            update(StockItem)
            .where(
                StockItem.id == item_id,
                StockItem.company_id == self.company_id,
                StockItem.quantity >= quantity,
            )
            .values(quantity=StockItem.quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def _add(self, row):
        self.db.add(row)
        self.db.flush()
        return row

    def create_account(
        self,
        name: str,
        kind: AccountKind,
        opening_balance: Decimal = Decimal("0.00"),
        account_number: str | None = None,
        bank_name: str | None = None,
        branch: str | None = None,
    ) -> Account:
        return self._add(Account(
            company_id=self.company_id,
            name=name,
            kind=kind,
            balance=Decimal(opening_balance),
            account_number=account_number,
            bank_name=bank_name,
            branch=branch,
        ))

    def get_or_create_account(self, name: str, kind: AccountKind) -> Account:
        account = self.find_account(name, kind)
        if account is None:
            account = self.create_account(name=name, kind=kind)
            logger.info(f"Created {kind.value} account '{name}' for company {self.company_id}")
        return account

    def create_stock_item(
        self,
        sku: str,
        name: str,
        quantity: int,
        unit_price: Decimal,
        cost_price: Decimal = Decimal("0.00"),
        reorder_level: int = 0,
        category: str | None = None,
    ) -> StockItem:
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        return self._add(StockItem(
            company_id=self.company_id,
            sku=sku,
            name=name,
            quantity=quantity,
            unit_price=Decimal(unit_price),
            cost_price=Decimal(cost_price),
            reorder_level=reorder_level,
            category=category,
        ))

    def create_transaction(
        self,
        description: str,
        amount: Decimal,
        kind: TransactionKind,
        category: str = "General",
        account_id: UUID | None = None,
        transaction_date: date | None = None,
        reference: str | None = None,
        created_by: UUID | None = None,
        status: TransactionStatus = TransactionStatus.PENDING,
    ) -> Transaction:
        if Decimal(amount) <= 0:
            raise ValidationError("Transaction amount must be positive")
        if account_id is not None:
            self.get(Account, account_id)
        return self._add(Transaction(
            company_id=self.company_id,
            description=description,
            amount=Decimal(amount),
            kind=kind,
            category=category,
            account_id=account_id,
            transaction_date=transaction_date or date.today(),
            reference=reference,
            created_by=created_by,
            status=status,
        ))

    def create_expense(
        self,
        description: str,
        amount: Decimal,
        category: str = "General",
        title: str | None = None,
        expense_date: date | None = None,
        submitted_by: UUID | None = None,
    ) -> Expense:
        if Decimal(amount) <= 0:
            raise ValidationError("Expense amount must be positive")
        return self._add(Expense(
            company_id=self.company_id,
            title=title,
            description=description,
            category=category,
            amount=Decimal(amount),
            expense_date=expense_date or date.today(),
            submitted_by=submitted_by,
        ))

    def create_order(
        self,
        order_number: str,
        customer_name: str,
        lines: Sequence[dict],
        order_date: date | None = None,
    ) -> Order:
        """
        Create a Processing order. ``lines`` carry ``stock_item_id``,
        ``quantity`` and optionally ``unit_price`` (defaults to the item's).
        """
        if not lines:
            raise ValidationError("An order needs at least one line")

        order = Order(
            company_id=self.company_id,
            order_number=order_number,
            customer_name=customer_name,
            order_date=order_date or date.today(),
            total_amount=Decimal("0.00"),
        )
        total = Decimal("0.00")
        for line in lines:
            quantity = int(line["quantity"])
            if quantity <= 0:
                raise ValidationError("Line quantity must be positive")
            item = self.get(StockItem, line["stock_item_id"])
            price = line.get("unit_price")
            unit_price = Decimal(item.unit_price if price is None else price)
            order.lines.append(OrderLine(
                stock_item_id=item.id,
                quantity=quantity,
                unit_price=unit_price,
            ))
            total += unit_price * quantity
        order.total_amount = total
        return self._add(order)

    def create_payroll_run(
        self,
        month: str,
        basic_salary: Decimal,
        net_salary: Decimal | None = None,
        employee_id: UUID | None = None,
        employee_name: str | None = None,
    ) -> PayrollRun:
        return self._add(PayrollRun(
            company_id=self.company_id,
            month=month,
            basic_salary=Decimal(basic_salary),
            net_salary=Decimal(net_salary if net_salary is not None else basic_salary),
            employee_id=employee_id,
            employee_name=employee_name,
        ))

    def create_purchase_order(
        self,
        order_number: str,
        supplier: str,
        total_amount: Decimal,
    ) -> PurchaseOrder:
        return self._add(PurchaseOrder(
            company_id=self.company_id,
            order_number=order_number,
            supplier=supplier,
            total_amount=Decimal(total_amount),
        ))

    def create_team_invite(self, email: str, role: str = "member") -> TeamInvite:
        return self._add(TeamInvite(company_id=self.company_id, email=email, role=role))
