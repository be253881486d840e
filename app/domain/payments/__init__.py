"""Payment gateway domain module."""

from .reconciliation import (
    get_payment,
    handle_webhook,
    reconcile,
    simulate_payment,
    verify_payment,
)

__all__ = [
    "get_payment",
    "handle_webhook",
    "reconcile",
    "simulate_payment",
    "verify_payment",
]
