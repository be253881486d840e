"""Pydantic schemas for API requests and responses."""

from .settlement import (
    ApprovalActionRequest,
    PendingApprovalsResponse,
    SettlementResponse,
)
from .payments import (
    PaymentInitializeRequest,
    PaymentInitializeResponse,
    PaymentResponse,
    PaymentVerifyResponse,
    SimulatePaymentRequest,
    WebhookAck,
)

__all__ = [
    "ApprovalActionRequest",
    "PendingApprovalsResponse",
    "SettlementResponse",
    "PaymentInitializeRequest",
    "PaymentInitializeResponse",
    "PaymentResponse",
    "PaymentVerifyResponse",
    "SimulatePaymentRequest",
    "WebhookAck",
]
