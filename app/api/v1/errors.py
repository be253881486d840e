"""Mapping of domain errors to HTTP responses."""

from fastapi import HTTPException, status

from app.core.exceptions import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    ReconciliationSignatureError,
    SettlementError,
    UpstreamUnavailableError,
    ValidationError,
)


def http_error(exc: SettlementError) -> HTTPException:
    """Translate a domain error into the HTTPException the endpoint raises."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, InsufficientStockError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(exc), "error": "insufficient_stock", **exc.to_dict()},
        )
    if isinstance(exc, ConflictError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(exc), "error": "already_settled", "current_status": exc.current_status},
        )
    if isinstance(exc, ReconciliationSignatureError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))
    if isinstance(exc, UpstreamUnavailableError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
