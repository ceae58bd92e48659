"""
Backend order API client
"""
import logging
from typing import Optional

import httpx

from models.errors import OrderSubmissionFailed
from models.order import OrderConfirmation, OrderSubmission

logger = logging.getLogger(__name__)


class BackendOrderClient:
    # Posts order submissions to the canteen backend

    ORDERS_PATH = "/api/orders"

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10.0,
                 transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _headers(self, token: Optional[str]) -> dict:
        headers = {"Accept": "application/json"}
        token = token or self.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def submit_order(self, submission: OrderSubmission, token: Optional[str] = None) -> OrderConfirmation:
        # Returns the confirmation only when the backend accepted the order
        try:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout,
                              transport=self.transport) as client:
                response = client.post(
                    self.ORDERS_PATH,
                    json=submission.to_payload(),
                    headers=self._headers(token)
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise OrderSubmissionFailed(
                f"Backend rejected order for shop {submission.shop_id} (HTTP {status})",
                status_code=status
            ) from e
        except httpx.HTTPError as e:
            raise OrderSubmissionFailed(f"Could not reach the order backend: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        order_id = body.get("orderId", body.get("id"))
        logger.info("Order %s placed for shop %s", order_id, submission.shop_id)
        return OrderConfirmation(
            shop_id=submission.shop_id,
            order_id=order_id,
            total=submission.total,
            status=str(body.get("status", "PENDING"))
        )
