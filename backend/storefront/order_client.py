# backend/storefront/order_client.py
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

import httpx

from config import settings

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Error al procesar la orden"


@dataclass(frozen=True)
class OrderConfirmation:
    order_id: str
    order_number: str


class OrderApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, errors: Optional[List[dict]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []


class OrderClient(Protocol):
    def create_order(self, draft: dict) -> OrderConfirmation: ...

    def get_order(self, order_number: str) -> Optional[dict]: ...


def _error_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class HttpOrderClient:
    """Talks to the order endpoints over HTTP.

    Pass ``client`` to reuse an existing ``httpx.Client`` (its base URL is
    used as is); otherwise one is built from ``API_BASE_URL`` with the
    configured request timeout.
    """

    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.Client] = None,
                 timeout: Optional[float] = None):
        self._client = client or httpx.Client(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
        )

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Order API {method} {path} failed: {e}")
            raise OrderApiError(GENERIC_ERROR) from e

    def create_order(self, draft: dict) -> OrderConfirmation:
        response = self._request("POST", "/api/orders", json=draft)
        if not response.is_success:
            body = _error_body(response)
            raise OrderApiError(
                body.get("message") or GENERIC_ERROR,
                status_code=response.status_code,
                errors=body.get("errors"),
            )
        data = response.json()
        return OrderConfirmation(order_id=data["orderId"], order_number=data["orderNumber"])

    def get_order(self, order_number: str) -> Optional[dict]:
        response = self._request("GET", f"/api/orders/{order_number}")
        if response.status_code == 404:
            return None
        if not response.is_success:
            body = _error_body(response)
            raise OrderApiError(body.get("message") or "Error al obtener la orden", status_code=response.status_code)
        return response.json()["order"]

    def close(self) -> None:
        self._client.close()
