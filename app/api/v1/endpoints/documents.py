"""
Settleable document endpoints: expense claims, sales orders, payroll runs,
purchase orders and team invites.

Documents are created in their pending status; moving them on is the job of
the settlement and approvals endpoints.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.dependencies import get_actor_id, get_company_id
from app.api.v1.errors import http_error
from app.core.exceptions import SettlementError
from app.db.dependencies import get_db
from app.domain.settlement.tenant_scope import TenantScope
from app.models import Expense, Order, PayrollRun, PurchaseOrder, TeamInvite
from app.schemas.documents import (
    ExpenseCreate,
    ExpenseResponse,
    OrderCreate,
    OrderResponse,
    PayrollRunCreate,
    PayrollRunResponse,
    PurchaseOrderCreate,
    PurchaseOrderResponse,
    TeamInviteCreate,
    TeamInviteResponse,
)

logger = logging.getLogger(__name__)

expenses_router = APIRouter()
sales_router = APIRouter()
payroll_router = APIRouter()
procurement_router = APIRouter()
team_router = APIRouter()


def _create(db: Session, create):
    """Run a TenantScope creation call as its own committed unit."""
    try:
        row = create()
        db.commit()
    except SettlementError as e:
        db.rollback()
        raise http_error(e)
    except Exception:
        db.rollback()
        raise
    db.refresh(row)
    return row


# ============================================
# EXPENSES
# ============================================

@expenses_router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense_data: ExpenseCreate,
    company_id: UUID = Depends(get_company_id),
    actor_id: Optional[UUID] = Depends(get_actor_id),
    db: Session = Depends(get_db),
) -> ExpenseResponse:
    """Submit a Pending expense claim."""
    scope = TenantScope(db, company_id)
    expense = _create(db, lambda: scope.create_expense(submitted_by=actor_id, **expense_data.model_dump()))
    return ExpenseResponse.model_validate(expense)


@expenses_router.get("", response_model=List[ExpenseResponse])
def list_expenses(
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> List[ExpenseResponse]:
    expenses = TenantScope(db, company_id).list(Expense)
    return [ExpenseResponse.model_validate(e) for e in expenses]


# ============================================
# SALES ORDERS
# ============================================

@sales_router.post("/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: OrderCreate,
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> OrderResponse:
    """
    Create a Processing order. Unit prices default to the stock item's
    price; stock is reserved only when the order is approved.
    """
    scope = TenantScope(db, company_id)
    order = _create(db, lambda: scope.create_order(
        order_number=order_data.order_number,
        customer_name=order_data.customer_name,
        lines=[line.model_dump() for line in order_data.lines],
        order_date=order_data.order_date,
    ))
    logger.info(f"Created order {order.order_number} for company {company_id}")
    return OrderResponse.model_validate(scope.get_order(order.id))


@sales_router.get("/orders", response_model=List[OrderResponse])
def list_orders(
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> List[OrderResponse]:
    orders = TenantScope(db, company_id).list(Order)
    return [OrderResponse.model_validate(o) for o in orders]


@sales_router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: UUID,
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> OrderResponse:
    try:
        order = TenantScope(db, company_id).get_order(order_id)
    except SettlementError as e:
        raise http_error(e)
    return OrderResponse.model_validate(order)


# ============================================
# PAYROLL
# ============================================

@payroll_router.post("/runs", response_model=PayrollRunResponse, status_code=status.HTTP_201_CREATED)
def create_payroll_run(
    run_data: PayrollRunCreate,
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> PayrollRunResponse:
    scope = TenantScope(db, company_id)
    run = _create(db, lambda: scope.create_payroll_run(**run_data.model_dump()))
    return PayrollRunResponse.model_validate(run)


@payroll_router.get("/runs", response_model=List[PayrollRunResponse])
def list_payroll_runs(
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> List[PayrollRunResponse]:
    runs = TenantScope(db, company_id).list(PayrollRun)
    return [PayrollRunResponse.model_validate(r) for r in runs]


# ============================================
# PROCUREMENT
# ============================================

@procurement_router.post("/orders", response_model=PurchaseOrderResponse, status_code=status.HTTP_201_CREATED)
def create_purchase_order(
    po_data: PurchaseOrderCreate,
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> PurchaseOrderResponse:
    scope = TenantScope(db, company_id)
    po = _create(db, lambda: scope.create_purchase_order(**po_data.model_dump()))
    return PurchaseOrderResponse.model_validate(po)


@procurement_router.get("/orders", response_model=List[PurchaseOrderResponse])
def list_purchase_orders(
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> List[PurchaseOrderResponse]:
    orders = TenantScope(db, company_id).list(PurchaseOrder)
    return [PurchaseOrderResponse.model_validate(o) for o in orders]


# ============================================
# TEAM
# ============================================

@team_router.post("/invites", response_model=TeamInviteResponse, status_code=status.HTTP_201_CREATED)
def create_team_invite(
    invite_data: TeamInviteCreate,
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> TeamInviteResponse:
    scope = TenantScope(db, company_id)
    invite = _create(db, lambda: scope.create_team_invite(email=invite_data.email, role=invite_data.role))
    return TeamInviteResponse.model_validate(invite)


@team_router.get("/invites", response_model=List[TeamInviteResponse])
def list_team_invites(
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> List[TeamInviteResponse]:
    invites = TenantScope(db, company_id).list(TeamInvite)
    return [TeamInviteResponse.model_validate(i) for i in invites]
