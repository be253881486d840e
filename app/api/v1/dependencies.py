"""Request-scoped dependencies for the v1 API."""

from typing import Optional
from uuid import UUID

from fastapi import Header, HTTPException, status


def get_company_id(x_company_id: Optional[UUID] = Header(None, alias="X-Company-ID")) -> UUID:
    """Tenant resolved upstream by the authentication layer."""
    if x_company_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Tenant context required",
        )
    return x_company_id


def get_actor_id(x_user_id: Optional[UUID] = Header(None, alias="X-User-ID")) -> Optional[UUID]:
    """Acting user, when the caller is authenticated."""
    return x_user_id


def get_optional_company_id(
    x_company_id: Optional[UUID] = Header(None, alias="X-Company-ID"),
) -> Optional[UUID]:
    """Tenant for endpoints that also accept anonymous quick payments."""
    return x_company_id
