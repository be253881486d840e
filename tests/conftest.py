"""Shared fixtures: a throwaway SQLite file database per test session."""

import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="settlement-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["ENVIRONMENT"] = "test"
os.environ["GATEWAY_SECRET_KEY"] = ""
os.environ["GATEWAY_WEBHOOK_SECRET"] = "whsec-test"

from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from sqlalchemy.orm import Session

from app.db.session import SessionLocal, engine
from app.domain.settlement.enums import AccountKind
from app.domain.settlement.tenant_scope import TenantScope
from app.models import Base

WEBHOOK_SECRET = "whsec-test"


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db() -> Session:
    """Provide database session for tests."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def test_company_id() -> UUID:
    """Generate a test company ID."""
    return uuid4()


@pytest.fixture
def scope(db: Session, test_company_id: UUID) -> TenantScope:
    return TenantScope(db, test_company_id)


@pytest.fixture
def bank_account(db: Session, scope: TenantScope):
    """Bank account opened at 1000.00."""
    account = scope.create_account("Main Bank", AccountKind.BANK, opening_balance=Decimal("1000.00"))
    db.commit()
    return account


@pytest.fixture
def stock(db: Session, scope: TenantScope):
    """Two stock items: 10 widgets at 25.00 and 3 gadgets at 40.00."""
    widget = scope.create_stock_item(sku="W-1", name="Widget", quantity=10, unit_price=Decimal("25.00"))
    gadget = scope.create_stock_item(sku="G-1", name="Gadget", quantity=3, unit_price=Decimal("40.00"))
    db.commit()
    return {"widget": widget, "gadget": gadget}
