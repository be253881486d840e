"""Ledger API endpoints: accounts and transactions."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.v1.dependencies import get_actor_id, get_company_id
from app.api.v1.errors import http_error
from app.core.exceptions import SettlementError
from app.db.dependencies import get_db
from app.domain.settlement.enums import TransactionStatus
from app.domain.settlement.tenant_scope import TenantScope
from app.models import Account, Transaction
from app.schemas.documents import (
    AccountCreate,
    AccountResponse,
    TransactionCreate,
    TransactionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/accounts", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    account_data: AccountCreate,
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> AccountResponse:
    """Open a balance-bearing account for the tenant."""
    scope = TenantScope(db, company_id)
    try:
        account = scope.create_account(
            name=account_data.name,
            kind=account_data.kind,
            opening_balance=account_data.opening_balance,
            account_number=account_data.account_number,
            bank_name=account_data.bank_name,
            branch=account_data.branch,
        )
        db.commit()
    except SettlementError as e:
        db.rollback()
        raise http_error(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating account: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create account: {str(e)}"
        )

    db.refresh(account)
    logger.info(f"Created account {account.id} ({account.name}) for company {company_id}")
    return AccountResponse.model_validate(account)


@router.get("/accounts", response_model=List[AccountResponse])
def list_accounts(
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> List[AccountResponse]:
    scope = TenantScope(db, company_id)
    accounts = scope.list(Account)
    return [AccountResponse.model_validate(a) for a in accounts]


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: UUID,
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> AccountResponse:
    try:
        account = TenantScope(db, company_id).get(Account, account_id)
    except SettlementError as e:
        raise http_error(e)
    return AccountResponse.model_validate(account)


@router.post("/transactions", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction_data: TransactionCreate,
    company_id: UUID = Depends(get_company_id),
    actor_id: Optional[UUID] = Depends(get_actor_id),
    db: Session = Depends(get_db),
) -> TransactionResponse:
    """
    Record a pending transaction.

    The account balance is untouched until the transaction is approved.
    """
    scope = TenantScope(db, company_id)
    try:
        transaction = scope.create_transaction(
            description=transaction_data.description,
            amount=transaction_data.amount,
            kind=transaction_data.kind,
            category=transaction_data.category,
            account_id=transaction_data.account_id,
            transaction_date=transaction_data.transaction_date,
            created_by=actor_id,
        )
        db.commit()
    except SettlementError as e:
        db.rollback()
        raise http_error(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating transaction: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create transaction: {str(e)}"
        )

    db.refresh(transaction)
    return TransactionResponse.model_validate(transaction)


@router.get("/transactions", response_model=List[TransactionResponse])
def list_transactions(
    status_filter: Optional[TransactionStatus] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> List[TransactionResponse]:
    scope = TenantScope(db, company_id)
    statuses = [status_filter] if status_filter else None
    transactions = scope.list(Transaction, statuses=statuses, limit=limit)
    return [TransactionResponse.model_validate(t) for t in transactions]


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: UUID,
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> TransactionResponse:
    try:
        transaction = TenantScope(db, company_id).get(Transaction, transaction_id)
    except SettlementError as e:
        raise http_error(e)
    return TransactionResponse.model_validate(transaction)
