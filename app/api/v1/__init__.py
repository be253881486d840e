from fastapi import APIRouter

from .endpoints import approvals, documents, health, inventory, ledger, payments, settlement

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(settlement.router, prefix="/settlement", tags=["settlement"])
api_router.include_router(approvals.router, prefix="/approvals", tags=["approvals"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(ledger.router, prefix="/ledger", tags=["ledger"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
api_router.include_router(documents.expenses_router, prefix="/expenses", tags=["expenses"])
api_router.include_router(documents.sales_router, prefix="/sales", tags=["sales"])
api_router.include_router(documents.payroll_router, prefix="/payroll", tags=["payroll"])
api_router.include_router(documents.procurement_router, prefix="/procurement", tags=["procurement"])
api_router.include_router(documents.team_router, prefix="/team", tags=["team"])
