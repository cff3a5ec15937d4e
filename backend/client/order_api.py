"""
Order API client — thin httpx wrapper around the order endpoints.

Every call fetches a fresh access token from `token_provider` (an async
callable, e.g. one backed by the Auth0 SDK's silent token refresh) and raises
OrderApiError for non-2xx responses. Transport failures surface as
httpx.HTTPError.
"""
import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Awaitable, Callable, Optional

import httpx

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[str]]


class OrderApiError(Exception):
    """Non-success response from the API."""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.code = code


class OrderApiClient:
    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "OrderApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        token = await self._token_provider()
        response = await self._client.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            headers={"Authorization": f"Bearer {token}"},
        )
        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                raise OrderApiError(response.status_code, "Response body is not JSON")

        message, code = response.reason_phrase or "Request failed", None
        try:
            error = response.json().get("error") or {}
            message = error.get("message", message)
            code = error.get("code")
        except ValueError:
            pass
        raise OrderApiError(response.status_code, message, code)

    async def get_my_orders(self) -> list[dict]:
        """Orders placed by the authenticated customer."""
        return await self._request("GET", "/api/order")

    async def get_my_restaurant_orders(self) -> list[dict]:
        """Orders of the authenticated owner's restaurant."""
        return await self._request("GET", "/api/my/restaurant/order")

    async def update_order_status(self, order_id: str, status: str) -> dict:
        return await self._request(
            "PATCH",
            f"/api/my/restaurant/order/{order_id}/status",
            json={"status": status},
        )


def expected_delivery(order: dict) -> datetime:
    """
    Order creation time plus the restaurant's estimated delivery minutes.

    Returns an aware datetime; a `createdAt` without an offset is taken as UTC.
    """
    created = datetime.fromisoformat(order["createdAt"])
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    minutes = (order.get("restaurant") or {}).get("estimatedDeliveryTime") or 0
    return created + timedelta(minutes=minutes)


def format_expected_delivery(order: dict, tz: Optional[tzinfo] = None) -> str:
    """Expected delivery as H:MM in `tz` (default: local time), e.g. "18:05"."""
    when = expected_delivery(order).astimezone(tz)
    return f"{when.hour}:{when.minute:02d}"
