"""Ledger models: accounts and finance transactions."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, IdMixin, TenantMixin, TimestampMixin, enum_column
from app.domain.settlement.enums import AccountKind, TransactionKind, TransactionStatus


class Account(IdMixin, TenantMixin, TimestampMixin, Base):
    """
    A tenant-owned balance holder.

    The balance is only ever changed through a relative increment issued
    by the settlement engine.
    """

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    kind: Mapped[AccountKind] = mapped_column(enum_column(AccountKind), nullable=False)
    balance: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0.00"), nullable=False)

    account_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bank_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    branch: Mapped[str | None] = mapped_column(String(200), nullable=True)

    __table_args__ = (
        Index("idx_accounts_company_name_kind", "company_id", "name", "kind"),
    )


class Transaction(IdMixin, TenantMixin, TimestampMixin, Base):
    """Finance transaction; affects its account once, when first paid."""

    __tablename__ = "transactions"

    description: Mapped[str] = mapped_column(String(500), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    kind: Mapped[TransactionKind] = mapped_column(enum_column(TransactionKind), nullable=False)
    category: Mapped[str] = mapped_column(String(100), default="General", nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)

    status: Mapped[TransactionStatus] = mapped_column(
        enum_column(TransactionStatus),
        default=TransactionStatus.PENDING,
        nullable=False,
        index=True,
    )

    account_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("accounts.id"),
        nullable=True,
    )
    account: Mapped[Account | None] = relationship("Account")

    # Gateway reference joining back to a Payment
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    created_by: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)

    def signed_amount(self) -> Decimal:
        """Balance effect of this transaction on its account."""
        amount = Decimal(self.amount)
        return amount if self.kind == TransactionKind.INCOME else -amount
