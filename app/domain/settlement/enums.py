"""Settlement domain enums."""

from enum import Enum as PyEnum


class AccountKind(str, PyEnum):
    """Where money lives."""
    BANK = "bank"
    MOBILE = "mobile"
    CASH = "cash"
    REVENUE = "revenue"
    EXPENSE = "expense"


class TransactionKind(str, PyEnum):
    """Direction of a transaction's balance effect."""
    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, PyEnum):
    PENDING = "pending"
    PAID = "paid"
    REJECTED = "rejected"


class OrderStatus(str, PyEnum):
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PayrollStatus(str, PyEnum):
    PENDING = "Pending"
    PROCESSED = "Processed"
    PAID = "Paid"
    CANCELLED = "Cancelled"


class PurchaseOrderStatus(str, PyEnum):
    REQUESTED = "Requested"
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class InviteStatus(str, PyEnum):
    PENDING = "Pending"
    ACTIVE = "Active"
    REJECTED = "Rejected"


class ExpenseStatus(str, PyEnum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class DocumentKind(str, PyEnum):
    """Closed set of settleable document kinds."""
    TRANSACTION = "transaction"
    EXPENSE = "expense"
    ORDER = "order"
    PAYROLL = "payroll"
    PROCUREMENT = "procurement"
    INVITE = "invite"


class SettlementAction(str, PyEnum):
    APPROVE = "approve"
    REJECT = "reject"


class PaymentStatus(str, PyEnum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class PaymentPurpose(str, PyEnum):
    """What a gateway payment funds."""
    ORDER = "order"
    SUBSCRIPTION = "subscription"
    UPGRADE = "upgrade"


class ReconciliationSource(str, PyEnum):
    """Channel through which a payment outcome arrived."""
    WEBHOOK = "webhook"
    POLL = "poll"
    MANUAL = "manual"
    SWEEP = "sweep"


class SubscriptionStatus(str, PyEnum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
