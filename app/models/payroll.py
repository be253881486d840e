"""Payroll models."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, IdMixin, TenantMixin, TimestampMixin, enum_column
from app.domain.settlement.enums import PayrollStatus


class PayrollRun(IdMixin, TenantMixin, TimestampMixin, Base):
    """Payroll run for one employee and month."""

    __tablename__ = "payroll_runs"

    employee_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    employee_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    month: Mapped[str] = mapped_column(String(20), nullable=False)

    basic_salary: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    net_salary: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    status: Mapped[PayrollStatus] = mapped_column(
        enum_column(PayrollStatus),
        default=PayrollStatus.PENDING,
        nullable=False,
        index=True,
    )
    payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
