"""Ledger, inventory and document schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.domain.settlement.enums import (
    AccountKind,
    ExpenseStatus,
    InviteStatus,
    OrderStatus,
    PayrollStatus,
    PurchaseOrderStatus,
    TransactionKind,
    TransactionStatus,
)


# ============================================
# ACCOUNTS
# ============================================

class AccountCreate(BaseModel):
    """Schema for creating an account."""
    name: str = Field(..., max_length=200)
    kind: AccountKind
    opening_balance: Decimal = Field(default=Decimal("0.00"), decimal_places=2)
    account_number: Optional[str] = Field(None, max_length=100)
    bank_name: Optional[str] = Field(None, max_length=200)
    branch: Optional[str] = Field(None, max_length=200)


class AccountResponse(BaseModel):
    id: UUID
    company_id: UUID
    name: str
    kind: AccountKind
    balance: Decimal
    account_number: Optional[str] = None
    bank_name: Optional[str] = None
    branch: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============================================
# TRANSACTIONS
# ============================================

class TransactionCreate(BaseModel):
    """Schema for creating a pending transaction."""
    description: str = Field(..., max_length=500)
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    kind: TransactionKind
    category: str = Field(default="General", max_length=100)
    account_id: Optional[UUID] = None
    transaction_date: Optional[date] = None


class TransactionResponse(BaseModel):
    id: UUID
    company_id: UUID
    description: str
    amount: Decimal
    kind: TransactionKind
    category: str
    transaction_date: date
    status: TransactionStatus
    account_id: Optional[UUID] = None
    reference: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============================================
# EXPENSES
# ============================================

class ExpenseCreate(BaseModel):
    """Schema for submitting an expense claim."""
    description: str = Field(..., max_length=500)
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    category: str = Field(default="General", max_length=100)
    title: Optional[str] = Field(None, max_length=200)
    expense_date: Optional[date] = None


class ExpenseResponse(BaseModel):
    id: UUID
    company_id: UUID
    title: Optional[str] = None
    description: str
    category: str
    amount: Decimal
    expense_date: date
    status: ExpenseStatus
    submitted_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============================================
# INVENTORY
# ============================================

class StockItemCreate(BaseModel):
    sku: str = Field(..., max_length=100)
    name: str = Field(..., max_length=200)
    quantity: int = Field(default=0, ge=0)
    reorder_level: int = Field(default=0, ge=0)
    unit_price: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)
    cost_price: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)
    category: Optional[str] = Field(None, max_length=100)


class StockItemResponse(BaseModel):
    id: UUID
    company_id: UUID
    sku: str
    name: str
    category: Optional[str] = None
    quantity: int
    reorder_level: int
    unit_price: Decimal
    cost_price: Decimal
    is_low_stock: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============================================
# SALES ORDERS
# ============================================

class OrderLineCreate(BaseModel):
    stock_item_id: UUID
    quantity: int = Field(..., gt=0)
    unit_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)


class OrderCreate(BaseModel):
    order_number: str = Field(..., max_length=100)
    customer_name: str = Field(..., max_length=200)
    order_date: Optional[date] = None
    lines: List[OrderLineCreate] = Field(..., min_length=1)


class OrderLineResponse(BaseModel):
    id: UUID
    stock_item_id: UUID
    quantity: int
    unit_price: Decimal

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: UUID
    company_id: UUID
    order_number: str
    customer_name: str
    order_date: date
    status: OrderStatus
    total_amount: Decimal
    lines: List[OrderLineResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============================================
# PAYROLL / PROCUREMENT / TEAM
# ============================================

class PayrollRunCreate(BaseModel):
    month: str = Field(..., max_length=20)
    basic_salary: Decimal = Field(..., ge=0, decimal_places=2)
    net_salary: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    employee_id: Optional[UUID] = None
    employee_name: Optional[str] = Field(None, max_length=200)


class PayrollRunResponse(BaseModel):
    id: UUID
    company_id: UUID
    employee_id: Optional[UUID] = None
    employee_name: Optional[str] = None
    month: str
    basic_salary: Decimal
    net_salary: Decimal
    status: PayrollStatus
    payment_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PurchaseOrderCreate(BaseModel):
    order_number: str = Field(..., max_length=100)
    supplier: str = Field(..., max_length=200)
    total_amount: Decimal = Field(..., ge=0, decimal_places=2)


class PurchaseOrderResponse(BaseModel):
    id: UUID
    company_id: UUID
    order_number: str
    supplier: str
    total_amount: Decimal
    status: PurchaseOrderStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TeamInviteCreate(BaseModel):
    email: str = Field(..., max_length=255, pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    role: str = Field(default="member", max_length=50)


class TeamInviteResponse(BaseModel):
    id: UUID
    company_id: UUID
    email: str
    role: str
    status: InviteStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
