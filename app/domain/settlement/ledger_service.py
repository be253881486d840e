"""Ledger side of settlement: balance credits and sale recording."""

import logging
from decimal import Decimal
from uuid import UUID

from app.core.config import get_settings
from app.models import Account, Order, Transaction
from app.domain.settlement.enums import (
    AccountKind,
    TransactionKind,
    TransactionStatus,
)
from app.domain.settlement.tenant_scope import TenantScope

logger = logging.getLogger(__name__)


def apply_transaction_to_account(scope: TenantScope, transaction: Transaction) -> Decimal:
    """
    Increment the transaction's account by its signed amount.

    Must only be called by the unit that moved the transaction to paid.
    Returns the applied delta (zero when no account is attached).
    """
    if transaction.account_id is None:
        logger.info(f"Transaction {transaction.id} has no account; no balance change")
        return Decimal("0.00")

    delta = transaction.signed_amount()
    scope.increment_balance(transaction.account_id, delta)
    logger.info(
        f"Applied {delta} to account {transaction.account_id} "
        f"for transaction {transaction.id}"
    )
    return delta


def get_or_create_revenue_account(scope: TenantScope, name: str | None = None) -> Account:
    """Find the tenant's revenue account by name, creating it at zero."""
    account_name = name or get_settings().sales_revenue_account_name
    return scope.get_or_create_account(account_name, AccountKind.REVENUE)


def record_order_sale(
    scope: TenantScope,
    order: Order,
    actor_id: UUID | None = None,
) -> Transaction | None:
    """
    Credit sales revenue by the order total and record the paid sale.

    The recorded transaction is created already paid; its one balance
    effect is the credit issued here. A free order records nothing.
    """
    amount = Decimal(order.total_amount)
    if amount <= 0:
        logger.info(f"Order {order.order_number} has no value; no sale recorded")
        return None

    revenue_account = get_or_create_revenue_account(scope)

    scope.increment_balance(revenue_account.id, amount)

    sale = scope.create_transaction(
        description=f"Sale Order {order.order_number} - {order.customer_name}",
        amount=amount,
        kind=TransactionKind.INCOME,
        category="Sales",
        account_id=revenue_account.id,
        created_by=actor_id,
        status=TransactionStatus.PAID,
    )

    logger.info(
        f"Recorded sale {sale.id} of {amount} for order {order.order_number} "
        f"on account {revenue_account.id}"
    )
    return sale
