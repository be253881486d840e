"""Settlement and approvals schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.domain.settlement.enums import DocumentKind, SettlementAction


class SettlementResponse(BaseModel):
    """Response after settling a document."""
    kind: DocumentKind
    action: SettlementAction
    document_id: UUID
    status: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ApprovalActionRequest(BaseModel):
    """Body of the approval inbox's approve/reject calls."""
    type: DocumentKind
    reason: Optional[str] = Field(None, max_length=500)


class ApprovalItemResponse(BaseModel):
    id: UUID
    kind: DocumentKind
    module: str
    title: str
    amount: Optional[Decimal] = None
    status: str
    date: datetime
    details: Dict[str, Any] = Field(default_factory=dict)


class ApprovalSummary(BaseModel):
    total: int
    by_kind: Dict[str, int]
    degraded: List[str] = []


class PendingApprovalsResponse(BaseModel):
    approvals: List[ApprovalItemResponse]
    summary: ApprovalSummary
