"""Payment gateway schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.domain.settlement.enums import PaymentPurpose, PaymentStatus


class PaymentInitializeRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    purpose: PaymentPurpose = PaymentPurpose.ORDER
    description: Optional[str] = Field(None, max_length=500)
    category: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=30)
    payment_method: str = Field(default="chapa", max_length=50)
    plan_name: Optional[str] = Field(None, max_length=50)


class PaymentInitializeResponse(BaseModel):
    status: str
    message: str
    mode: str
    checkout_url: str
    reference: str
    transaction_id: Optional[UUID] = None


class PaymentResponse(BaseModel):
    id: UUID
    reference: str
    company_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    amount: Decimal
    currency: str
    status: PaymentStatus
    purpose: PaymentPurpose
    payment_method: str
    details: Dict[str, Any] = Field(default_factory=dict, serialization_alias="metadata")
    verified: bool
    verified_at: Optional[datetime] = None
    transaction_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True


class PaymentVerifyResponse(BaseModel):
    status: PaymentStatus
    mode: str
    message: Optional[str] = None
    data: PaymentResponse


class SimulatePaymentRequest(BaseModel):
    reference: str = Field(..., max_length=100)
    status: PaymentStatus = PaymentStatus.SUCCESS


class WebhookAck(BaseModel):
    message: str
    reference: str
    status: PaymentStatus
