"""Delivery simulation"""

from .simulator import (
    DeliverySimulator,
    synthesize_customer_location,
    STATE_IDLE,
    STATE_RUNNING,
    STATE_ARRIVED,
    STATE_CANCELLED,
)
from .manager import DeliveryManager

__all__ = [
    'DeliverySimulator', 'DeliveryManager', 'synthesize_customer_location',
    'STATE_IDLE', 'STATE_RUNNING', 'STATE_ARRIVED', 'STATE_CANCELLED',
]
