"""Settlement domain module."""

from .enums import (
    AccountKind,
    DocumentKind,
    ExpenseStatus,
    InviteStatus,
    OrderStatus,
    PayrollStatus,
    PurchaseOrderStatus,
    SettlementAction,
    TransactionKind,
    TransactionStatus,
)

__all__ = [
    "AccountKind",
    "DocumentKind",
    "ExpenseStatus",
    "InviteStatus",
    "OrderStatus",
    "PayrollStatus",
    "PurchaseOrderStatus",
    "SettlementAction",
    "TransactionKind",
    "TransactionStatus",
]
