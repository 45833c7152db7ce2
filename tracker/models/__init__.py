"""Data models for orders and locations"""

from .location import Location
from .order import (
    Order,
    ALL_STATUSES,
    STATUS_PROCESSING,
    STATUS_SHIPPED,
    STATUS_OUT_FOR_DELIVERY,
    STATUS_DELIVERED,
    STATUS_CANCELLED,
    normalize_status,
)

__all__ = [
    'Location', 'Order', 'ALL_STATUSES', 'STATUS_PROCESSING', 'STATUS_SHIPPED',
    'STATUS_OUT_FOR_DELIVERY', 'STATUS_DELIVERED', 'STATUS_CANCELLED',
    'normalize_status',
]
