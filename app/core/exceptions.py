"""Domain errors raised by the settlement engine and gateway reconciliation."""


class SettlementError(Exception):
    """Base class for every error scoped to a single settlement request."""
    pass


class ValidationError(SettlementError):
    """Malformed input, raised before any unit of work opens."""
    pass


class NotFoundError(SettlementError):
    """Document, account, stock item or payment absent for this tenant."""

    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")


class ConflictError(SettlementError):
    """Status already advanced by a prior or concurrent call."""

    def __init__(self, entity: str, identifier, current_status=None):
        self.entity = entity
        self.identifier = identifier
        self.current_status = current_status
        message = f"{entity} {identifier} was already settled"
        if current_status is not None:
            message += f" (status={current_status})"
        super().__init__(message)


class InsufficientStockError(SettlementError):
    """A line requests more than the live stock quantity."""

    def __init__(self, item_name: str, available: int, requested: int):
        self.item_name = item_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {item_name}. "
            f"Available: {available}, Requested: {requested}"
        )

    def to_dict(self) -> dict:
        return {
            "item": self.item_name,
            "available": self.available,
            "requested": self.requested,
        }


class ReconciliationSignatureError(SettlementError):
    """Webhook payload failed shared-secret signature verification."""
    pass


class UpstreamUnavailableError(SettlementError):
    """The payment gateway's own API failed or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
