"""Order status progress, for display only.

Nothing here validates transitions: the admin API accepts any status on any
order, and the stores pass whatever the backend returns straight through.
"""

from dataclasses import dataclass
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


STATUS_SEQUENCE: tuple[str, ...] = (
    OrderStatus.PENDING.value,
    OrderStatus.CONFIRMED.value,
    OrderStatus.PROCESSING.value,
    OrderStatus.SHIPPED.value,
    OrderStatus.DELIVERED.value,
)

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value})


@dataclass(frozen=True, slots=True)
class OrderProgress:
    """Progress bar state for an order."""

    step_index: int
    steps: tuple[str, ...]
    percentage: float


def _value(status: "str | OrderStatus") -> str:
    return status.value if isinstance(status, OrderStatus) else status


def progress(status: "str | OrderStatus") -> OrderProgress:
    """Position of status in the fulfilment sequence.

    Cancelled orders get a single-step bar at 100%. Unknown statuses get
    index -1 and 0%.
    """
    value = _value(status)
    if value == OrderStatus.CANCELLED.value:
        return OrderProgress(step_index=0, steps=(value,), percentage=100.0)
    try:
        index = STATUS_SEQUENCE.index(value)
    except ValueError:
        return OrderProgress(step_index=-1, steps=STATUS_SEQUENCE, percentage=0.0)
    return OrderProgress(
        step_index=index,
        steps=STATUS_SEQUENCE,
        percentage=(index + 1) / len(STATUS_SEQUENCE) * 100,
    )


def is_terminal(status: "str | OrderStatus") -> bool:
    """No further customer actions are offered for terminal orders."""
    return _value(status) in TERMINAL_STATUSES
