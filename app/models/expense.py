"""Expense claim model."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, IdMixin, TenantMixin, TimestampMixin, enum_column
from app.domain.settlement.enums import ExpenseStatus


class Expense(IdMixin, TenantMixin, TimestampMixin, Base):
    """
    Expense claim awaiting approval.

    Separate from ledger transactions: approving a claim only moves its
    status and does not touch any account balance.
    """

    __tablename__ = "expenses"

    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(String(100), default="General", nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    expense_date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)

    status: Mapped[ExpenseStatus] = mapped_column(
        enum_column(ExpenseStatus),
        default=ExpenseStatus.PENDING,
        nullable=False,
        index=True,
    )
    submitted_by: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="check_expense_amount_positive"),
    )
