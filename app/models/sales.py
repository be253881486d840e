"""Sales order models."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, IdMixin, TenantMixin, TimestampMixin, enum_column
from app.domain.settlement.enums import OrderStatus


class Order(IdMixin, TenantMixin, TimestampMixin, Base):
    """Sales order; stock is deducted when it moves to Completed."""

    __tablename__ = "orders"

    order_number: Mapped[str] = mapped_column(String(100), nullable=False)
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    order_date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)

    status: Mapped[OrderStatus] = mapped_column(
        enum_column(OrderStatus),
        default=OrderStatus.PROCESSING,
        nullable=False,
        index=True,
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    # Relationships
    lines: Mapped[list["OrderLine"]] = relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
    )


class OrderLine(IdMixin, TimestampMixin, Base):
    """Order line referencing a stock item."""

    __tablename__ = "order_lines"

    order_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
    )
    order: Mapped[Order] = relationship("Order", back_populates="lines")

    stock_item_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("stock_items.id"),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_order_line_quantity_positive"),
    )
