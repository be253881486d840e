"""Procurement models."""

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, IdMixin, TenantMixin, TimestampMixin, enum_column
from app.domain.settlement.enums import PurchaseOrderStatus


class PurchaseOrder(IdMixin, TenantMixin, TimestampMixin, Base):
    """Purchase order raised against a supplier."""

    __tablename__ = "purchase_orders"

    order_number: Mapped[str] = mapped_column(String(100), nullable=False)
    supplier: Mapped[str] = mapped_column(String(200), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    status: Mapped[PurchaseOrderStatus] = mapped_column(
        enum_column(PurchaseOrderStatus),
        default=PurchaseOrderStatus.PENDING,
        nullable=False,
        index=True,
    )
