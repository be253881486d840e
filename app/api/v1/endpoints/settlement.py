"""Settlement API endpoints."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.dependencies import get_actor_id, get_company_id
from app.api.v1.errors import http_error
from app.core.exceptions import SettlementError
from app.db.dependencies import get_db
from app.domain.settlement.engine import SettlementResult, settle_document
from app.domain.settlement.enums import DocumentKind, SettlementAction
from app.schemas.settlement import SettlementResponse

logger = logging.getLogger(__name__)

router = APIRouter()


SETTLEMENT_MESSAGES = {
    (DocumentKind.TRANSACTION, SettlementAction.APPROVE): "Transaction approved",
    (DocumentKind.TRANSACTION, SettlementAction.REJECT): "Transaction rejected",
    (DocumentKind.EXPENSE, SettlementAction.APPROVE): "Expense approved",
    (DocumentKind.EXPENSE, SettlementAction.REJECT): "Expense rejected",
    (DocumentKind.ORDER, SettlementAction.APPROVE): "Order approved - inventory deducted and sale recorded",
    (DocumentKind.ORDER, SettlementAction.REJECT): "Order cancelled",
    (DocumentKind.PAYROLL, SettlementAction.APPROVE): "Payroll approved and marked as paid",
    (DocumentKind.PAYROLL, SettlementAction.REJECT): "Payroll cancelled",
    (DocumentKind.PROCUREMENT, SettlementAction.APPROVE): "Procurement approved",
    (DocumentKind.PROCUREMENT, SettlementAction.REJECT): "Procurement rejected",
    (DocumentKind.INVITE, SettlementAction.APPROVE): "Team invite approved",
    (DocumentKind.INVITE, SettlementAction.REJECT): "Team invite rejected",
}


def to_response(result: SettlementResult) -> SettlementResponse:
    return SettlementResponse(
        kind=result.kind,
        action=result.action,
        document_id=result.document.id,
        status=result.status,
        message=SETTLEMENT_MESSAGES[(result.kind, result.action)],
        details=result.details,
    )


def run_settlement(
    db: Session,
    company_id: UUID,
    kind: str,
    document_id: UUID,
    action: str,
    actor_id: Optional[UUID],
) -> SettlementResponse:
    """Settle and translate domain errors; shared by the approvals inbox."""
    try:
        result = settle_document(db, company_id, kind, document_id, action, actor_id=actor_id)
        return to_response(result)
    except SettlementError as e:
        logger.info(f"Settlement of {kind} {document_id} ({action}) refused: {e}")
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error settling {kind} {document_id} ({action}): {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to settle {kind}: {str(e)}"
        )


@router.post("/{kind}/{document_id}/{action}", response_model=SettlementResponse)
def settle_endpoint(
    kind: str,
    document_id: UUID,
    action: str,
    company_id: UUID = Depends(get_company_id),
    actor_id: Optional[UUID] = Depends(get_actor_id),
    db: Session = Depends(get_db),
) -> SettlementResponse:
    """
    Settle a pending document.

    - approve: applies balance/stock effects and moves to the approved status
    - reject: moves to the rejected/cancelled status, no side effects

    409 means the document was already settled (or, for orders, stock ran short).
    """
    return run_settlement(db, company_id, kind, document_id, action, actor_id)
