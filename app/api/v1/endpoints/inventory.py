"""Inventory API endpoints."""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.v1.dependencies import get_company_id
from app.api.v1.errors import http_error
from app.core.exceptions import SettlementError
from app.db.dependencies import get_db
from app.domain.settlement.tenant_scope import TenantScope
from app.models import StockItem
from app.schemas.documents import StockItemCreate, StockItemResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/items", response_model=StockItemResponse, status_code=status.HTTP_201_CREATED)
def create_stock_item(
    item_data: StockItemCreate,
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> StockItemResponse:
    scope = TenantScope(db, company_id)
    try:
        item = scope.create_stock_item(**item_data.model_dump())
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Stock item with SKU {item_data.sku} already exists"
        )
    except SettlementError as e:
        db.rollback()
        raise http_error(e)

    db.refresh(item)
    logger.info(f"Created stock item {item.sku} for company {company_id}")
    return StockItemResponse.model_validate(item)


@router.get("/items", response_model=List[StockItemResponse])
def list_stock_items(
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> List[StockItemResponse]:
    items = TenantScope(db, company_id).list(StockItem)
    return [StockItemResponse.model_validate(i) for i in items]


@router.get("/items/{item_id}", response_model=StockItemResponse)
def get_stock_item(
    item_id: UUID,
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db),
) -> StockItemResponse:
    try:
        item = TenantScope(db, company_id).get(StockItem, item_id)
    except SettlementError as e:
        raise http_error(e)
    return StockItemResponse.model_validate(item)
