"""Inventory models."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, IdMixin, TenantMixin, TimestampMixin


class StockItem(IdMixin, TenantMixin, TimestampMixin, Base):
    """Stock item; quantity is the only place stock lives."""

    __tablename__ = "stock_items"

    sku: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)

    quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    reorder_level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    unit_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0.00"), nullable=False)
    cost_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0.00"), nullable=False)

    __table_args__ = (
        UniqueConstraint("company_id", "sku", name="uq_stock_items_company_sku"),
        CheckConstraint("quantity >= 0", name="check_stock_quantity_non_negative"),
    )

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.reorder_level
