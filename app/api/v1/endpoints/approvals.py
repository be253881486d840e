"""Approvals inbox API endpoints."""

import logging
from typing import Callable, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.dependencies import get_actor_id, get_company_id
from app.api.v1.endpoints.settlement import run_settlement
from app.db.dependencies import get_db, get_session_factory
from app.domain.settlement.enums import SettlementAction
from app.schemas.settlement import (
    ApprovalActionRequest,
    PendingApprovalsResponse,
    SettlementResponse,
)
from app.services.approvals_service import ApprovalsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/pending", response_model=PendingApprovalsResponse)
def get_pending_approvals(
    company_id: UUID = Depends(get_company_id),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
):
    """
    All pending items across modules, newest first.

    A module whose query fails contributes an empty list and is named in
    ``summary.degraded``.
    """
    service = ApprovalsService(session_factory)
    return service.get_pending_approvals(company_id)


@router.post("/{document_id}/approve", response_model=SettlementResponse)
def approve_item(
    document_id: UUID,
    request: ApprovalActionRequest,
    company_id: UUID = Depends(get_company_id),
    actor_id: Optional[UUID] = Depends(get_actor_id),
    db: Session = Depends(get_db),
) -> SettlementResponse:
    """Approve an inbox item of the given type."""
    return run_settlement(db, company_id, request.type.value, document_id, SettlementAction.APPROVE.value, actor_id)


@router.post("/{document_id}/reject", response_model=SettlementResponse)
def reject_item(
    document_id: UUID,
    request: ApprovalActionRequest,
    company_id: UUID = Depends(get_company_id),
    actor_id: Optional[UUID] = Depends(get_actor_id),
    db: Session = Depends(get_db),
) -> SettlementResponse:
    """Reject an inbox item of the given type."""
    if request.reason:
        logger.info(f"Rejecting {request.type.value} {document_id}: {request.reason}")
    return run_settlement(db, company_id, request.type.value, document_id, SettlementAction.REJECT.value, actor_id)
