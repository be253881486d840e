"""Webhook signature verification."""

import hashlib
import hmac

from app.core.exceptions import ReconciliationSignatureError


def compute_signature(raw_body: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of the raw payload."""
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def verify_webhook_signature(raw_body: bytes, signature: str | None, secret: str | None) -> None:
    """
    Reject the webhook unless ``signature`` matches the payload.

    Fails closed: a missing secret or a missing signature is a rejection.
    """
    if not secret:
        raise ReconciliationSignatureError("Webhook secret is not configured")
    if not signature:
        raise ReconciliationSignatureError("Missing webhook signature")

    expected = compute_signature(raw_body, secret)
    if not hmac.compare_digest(expected, signature.strip().lower()):
        raise ReconciliationSignatureError("Invalid webhook signature")
