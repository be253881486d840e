"""Gateway payment and subscription models."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, IdMixin, TimestampMixin, enum_column
from app.domain.settlement.enums import PaymentPurpose, PaymentStatus, SubscriptionStatus


class Payment(IdMixin, TimestampMixin, Base):
    """
    Payment initiated through the external gateway.

    Keyed globally by the gateway reference. Never deleted; status is
    advanced by gateway reconciliation only.
    """

    __tablename__ = "payments"

    reference: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    # Quick subscription payments may arrive without a tenant or user
    company_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    user_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, index=True)

    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(10), default="ETB", nullable=False)

    status: Mapped[PaymentStatus] = mapped_column(
        enum_column(PaymentStatus),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True,
    )
    purpose: Mapped[PaymentPurpose] = mapped_column(
        enum_column(PaymentPurpose),
        default=PaymentPurpose.ORDER,
        nullable=False,
    )
    payment_method: Mapped[str] = mapped_column(String(50), default="chapa", nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # "metadata" is reserved on declarative classes
    details: Mapped[dict[str, Any]] = mapped_column("metadata", JSON, default=dict, nullable=False)

    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    transaction_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("transactions.id"),
        nullable=True,
    )


class Subscription(IdMixin, TimestampMixin, Base):
    """Plan subscription activated by a successful upgrade payment."""

    __tablename__ = "subscriptions"

    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True)
    plan: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[SubscriptionStatus] = mapped_column(
        enum_column(SubscriptionStatus),
        default=SubscriptionStatus.ACTIVE,
        nullable=False,
    )
    billing_cycle: Mapped[str] = mapped_column(String(20), default="monthly", nullable=False)
    renewal_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
