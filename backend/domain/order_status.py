"""
Order status table — label and progress for every status, in fulfilment order.

The table is built once at import and is read-only afterwards.

    placed          Order Placed              0
    paid            Payment Confirmed        25
    inProgress      Preparing your order     50
    outForDelivery  Out for delivery         75
    delivered       Delivered               100
"""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from domain.enums import OrderStatus
from domain.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusInfo:
    value: OrderStatus
    label: str
    progress: int
    position: int

    def to_dict(self) -> dict:
        return {
            "value": self.value.value,
            "label": self.label,
            "progress": self.progress,
        }


_ROWS = (
    (OrderStatus.PLACED, "Order Placed", 0),
    (OrderStatus.PAID, "Payment Confirmed", 25),
    (OrderStatus.IN_PROGRESS, "Preparing your order", 50),
    (OrderStatus.OUT_FOR_DELIVERY, "Out for delivery", 75),
    (OrderStatus.DELIVERED, "Delivered", 100),
)

ORDER_STATUS_TABLE: Mapping[OrderStatus, StatusInfo] = MappingProxyType({
    status: StatusInfo(value=status, label=label, progress=progress, position=i)
    for i, (status, label, progress) in enumerate(_ROWS)
})

INITIAL_STATUS = OrderStatus.PLACED


def ordered_statuses() -> list[StatusInfo]:
    """All statuses from placed to delivered."""
    return list(ORDER_STATUS_TABLE.values())


def lookup(status) -> StatusInfo:
    """
    Label/progress for a status value.

    Unknown values fall back to the initial entry instead of raising, so a
    stale or corrupted record still renders. Writes go through parse_status().
    """
    try:
        return ORDER_STATUS_TABLE[OrderStatus(status)]
    except ValueError:
        logger.warning(f"Unknown order status {status!r}, falling back to {INITIAL_STATUS.value}")
        return ORDER_STATUS_TABLE[INITIAL_STATUS]


def parse_status(value) -> OrderStatus:
    """Strict conversion of a raw value to OrderStatus (400 on failure)."""
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = [s.value for s in ORDER_STATUS_TABLE]
        raise ValidationError(
            f"'{value}' is not a valid order status",
            field="status",
            details={"allowed": allowed},
        )


def is_forward(current, target) -> bool:
    """True when `target` is at or after `current` in fulfilment order."""
    return lookup(target).position >= lookup(current).position
