"""Inventory deduction path for order settlement."""

import logging
from collections import OrderedDict
from uuid import UUID

from app.core.exceptions import InsufficientStockError, NotFoundError
from app.models import Order, StockItem
from app.domain.settlement.tenant_scope import TenantScope

logger = logging.getLogger(__name__)


def requested_quantities(order: Order) -> "OrderedDict[UUID, int]":
    """Total requested quantity per stock item, in a stable item order."""
    totals: dict[UUID, int] = {}
    for line in order.lines:
        totals[line.stock_item_id] = totals.get(line.stock_item_id, 0) + line.quantity
    return OrderedDict(sorted(totals.items(), key=lambda pair: str(pair[0])))


def deduct_stock_for_order(scope: TenantScope, order: Order) -> list[tuple[UUID, int]]:
    """
    Decrement stock for every line of ``order`` against live quantities.

    Each decrement is a guarded ``quantity >= requested`` update evaluated
    by the database, so a value read earlier can never be trusted by
    mistake. The first shortfall raises InsufficientStockError; decrements
    already issued stay uncommitted and are discarded with the unit.

    Returns:
        (stock_item_id, quantity) pairs that were deducted.

    Raises:
        InsufficientStockError: a line exceeds available stock
        NotFoundError: a referenced item no longer exists for this tenant
    """
    deducted: list[tuple[UUID, int]] = []

    for item_id, quantity in requested_quantities(order).items():
        if scope.decrement_stock(item_id, quantity):
            deducted.append((item_id, quantity))
            continue

        item = scope.find(StockItem, item_id)
        if item is None:
            raise NotFoundError("StockItem", item_id)

        # Re-read to report the live value, not the one from the session cache
        scope.db.refresh(item)
        logger.warning(
            f"Order {order.order_number}: insufficient stock for {item.name} "
            f"(available={item.quantity}, requested={quantity})"
        )
        raise InsufficientStockError(
            item_name=item.name,
            available=item.quantity,
            requested=quantity,
        )

    logger.info(f"Deducted stock for {len(deducted)} item(s) on order {order.order_number}")
    return deducted
