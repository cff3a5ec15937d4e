"""
Async HTTP client for the order endpoints, plus the order status poller.
"""
from client.order_api import OrderApiClient, OrderApiError, expected_delivery, format_expected_delivery
from client.order_poller import OrderStatusPoller

__all__ = [
    "OrderApiClient",
    "OrderApiError",
    "OrderStatusPoller",
    "expected_delivery",
    "format_expected_delivery",
]
