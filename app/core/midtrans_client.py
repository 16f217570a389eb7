# app/core/midtrans_client.py
"""
Midtrans Snap bridge.

Responsibilities:
  - Create hosted-checkout (Snap) transactions over HTTPS.
  - Verify the signature carried by asynchronous payment notifications.
  - Map our order ids to/from the gateway's order_id format.

Signature scheme (Midtrans HTTP notification):

    signature_key = sha512(order_id + status_code + gross_amount + server_key)
"""
import hashlib
import hmac
import logging
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import httpx

from app.core.config import get_settings
from app.core.errors import PaymentGatewayError

logger = logging.getLogger(__name__)

SANDBOX_SNAP_URL = "https://app.sandbox.midtrans.com/snap/v1/transactions"
PRODUCTION_SNAP_URL = "https://app.midtrans.com/snap/v1/transactions"

GATEWAY_ORDER_PREFIX = "order_"

# Midtrans rejects item names longer than 50 characters
MAX_ITEM_NAME_LENGTH = 50


@dataclass(frozen=True)
class SnapTransaction:
    token: str
    redirect_url: str


def gateway_order_id(order_id: uuid.UUID) -> str:
    return f"{GATEWAY_ORDER_PREFIX}{order_id}"


def parse_gateway_order_id(value: str) -> uuid.UUID | None:
    """
    Reverse of gateway_order_id(). Returns None for ids we did not issue.
    """
    if not value or not value.startswith(GATEWAY_ORDER_PREFIX):
        return None
    try:
        return uuid.UUID(value[len(GATEWAY_ORDER_PREFIX):])
    except ValueError:
        return None


def compute_signature(
    order_id: str,
    status_code: str,
    gross_amount: str,
    server_key: str,
) -> str:
    raw = f"{order_id}{status_code}{gross_amount}{server_key}"
    return hashlib.sha512(raw.encode("utf-8")).hexdigest()


def verify_signature(
    order_id: str | None,
    status_code: str | None,
    gross_amount: str | None,
    server_key: str | None,
    provided_signature: str | None,
) -> bool:
    """
    Check a notification signature in constant time.

    Any missing component makes the notification unverifiable (False).
    """
    if not (order_id and status_code and gross_amount and server_key and provided_signature):
        return False

    expected = compute_signature(order_id, status_code, gross_amount, server_key)
    return hmac.compare_digest(
        provided_signature.encode("utf-8"),
        expected.encode("utf-8"),
    )


class MidtransClient:
    """
    Thin synchronous client for the Snap transaction endpoint.

    `transport` is only meant for tests (httpx.MockTransport).
    """

    def __init__(
        self,
        server_key: str,
        is_production: bool = False,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.server_key = server_key
        self.is_production = is_production
        self.snap_url = PRODUCTION_SNAP_URL if is_production else SANDBOX_SNAP_URL
        self._transport = transport
        self._timeout = timeout

    def create_transaction(self, params: dict[str, Any]) -> SnapTransaction:
        """
        Create a Snap transaction and return its token and redirect URL.

        Raises:
            PaymentGatewayError: on transport failure or a non-2xx answer.
        """
        try:
            with httpx.Client(
                auth=(self.server_key, ""),
                timeout=self._timeout,
                transport=self._transport,
            ) as http_client:
                response = http_client.post(
                    self.snap_url,
                    json=params,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Midtrans request failed: {e}")
            raise PaymentGatewayError("Payment gateway unavailable") from e

        if response.status_code not in (200, 201):
            logger.error(
                f"Midtrans rejected transaction ({response.status_code}): {response.text}"
            )
            raise PaymentGatewayError("Payment gateway rejected the transaction")

        data = response.json()
        token = data.get("token")
        redirect_url = data.get("redirect_url")
        if not token or not redirect_url:
            logger.error(f"Midtrans response missing token/redirect_url: {data}")
            raise PaymentGatewayError("Malformed payment gateway response")

        return SnapTransaction(token=token, redirect_url=redirect_url)


@lru_cache
def get_midtrans_client() -> MidtransClient:
    """
    FastAPI dependency returning the process-wide gateway client.
    """
    settings = get_settings()
    return MidtransClient(
        server_key=settings.MIDTRANS_SERVER_KEY,
        is_production=settings.MIDTRANS_IS_PRODUCTION,
    )
