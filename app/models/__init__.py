"""Database models."""

from .base import Base
from .ledger import Account, Transaction
from .expense import Expense
from .inventory import StockItem
from .sales import Order, OrderLine
from .payroll import PayrollRun
from .procurement import PurchaseOrder
from .team import TeamInvite
from .payment import Payment, Subscription

__all__ = [
    "Base",
    "Account",
    "Transaction",
    "Expense",
    "StockItem",
    "Order",
    "OrderLine",
    "PayrollRun",
    "PurchaseOrder",
    "TeamInvite",
    "Payment",
    "Subscription",
]
