"""HTTP client for the external payment gateway."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import httpx

from app.core.config import get_settings
from app.core.exceptions import UpstreamUnavailableError
from app.domain.settlement.enums import PaymentStatus

logger = logging.getLogger(__name__)


@dataclass
class GatewayCheckout:
    """Checkout session returned when a payment is initialized."""
    checkout_url: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class GatewayVerification:
    """Gateway's view of a payment's outcome."""
    reference: str
    status: PaymentStatus
    data: dict[str, Any] = field(default_factory=dict)


def map_gateway_status(value: str | None) -> PaymentStatus:
    if value in ("success", "successful", "completed"):
        return PaymentStatus.SUCCESS
    if value in ("failed", "failure", "cancelled", "canceled", "reversed"):
        return PaymentStatus.FAILED
    return PaymentStatus.PENDING


class GatewayClient:
    """
    Thin client for the gateway's initialize and verify endpoints.

    Every transport or server failure surfaces as UpstreamUnavailableError
    so callers can fall back to demo / manual verification.
    """

    def __init__(
        self,
        base_url: str,
        secret_key: str,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.secret_key = secret_key
        self.timeout = timeout
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.secret_key)

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Authorization": f"Bearer {self.secret_key}"},
            transport=self.transport,
        )

    def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        if not self.is_configured:
            raise UpstreamUnavailableError("Gateway credentials are not configured")

        try:
            with self._client() as client:
                response = client.request(method, path, **kwargs)
        except httpx.TimeoutException:
            logger.error(f"Gateway {method} {path} timed out")
            raise UpstreamUnavailableError("Gateway request timed out")
        except httpx.HTTPError as e:
            logger.error(f"Gateway {method} {path} failed: {e}")
            raise UpstreamUnavailableError(f"Gateway request failed: {e}")

        if response.status_code >= 400:
            logger.error(f"Gateway {method} {path} returned {response.status_code}: {response.text[:200]}")
            raise UpstreamUnavailableError(
                f"Gateway returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError:
            raise UpstreamUnavailableError("Gateway returned a non-JSON response")

    def initialize(
        self,
        reference: str,
        amount: Decimal,
        currency: str,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        callback_url: str | None = None,
        return_url: str | None = None,
    ) -> GatewayCheckout:
        payload = {
            "amount": f"{Decimal(amount):.2f}",
            "currency": currency,
            "email": email,
            "first_name": (first_name or "Customer").strip() or "Customer",
            "last_name": (last_name or "User").strip() or "User",
            "tx_ref": reference,
            "callback_url": callback_url,
            "return_url": return_url,
        }
        body = self._request("POST", "/transaction/initialize", json=payload)

        checkout_url = (body.get("data") or {}).get("checkout_url")
        if body.get("status") != "success" or not checkout_url:
            raise UpstreamUnavailableError(body.get("message") or "Gateway did not return a checkout URL")

        return GatewayCheckout(checkout_url=checkout_url, data=body.get("data") or {})

    def verify(self, reference: str) -> GatewayVerification:
        body = self._request("GET", f"/transaction/verify/{reference}")
        data = body.get("data") or {}
        status = map_gateway_status(data.get("status")) if body.get("status") == "success" else PaymentStatus.PENDING
        return GatewayVerification(reference=reference, status=status, data=data)


def get_gateway_client() -> GatewayClient:
    """Build a gateway client from settings; unconfigured keys mean demo mode."""
    settings = get_settings()
    secret = settings.gateway_secret_key if settings.gateway_configured() else ""
    return GatewayClient(
        base_url=settings.gateway_base_url,
        secret_key=secret,
        timeout=settings.gateway_timeout_seconds,
    )
