"""
Domain enums.
"""

from enum import Enum


class OrderStatus(str, Enum):
    """Order fulfilment stages, in display order."""
    PLACED = "placed"
    PAID = "paid"
    IN_PROGRESS = "inProgress"
    OUT_FOR_DELIVERY = "outForDelivery"
    DELIVERED = "delivered"
