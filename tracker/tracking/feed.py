# tracker/tracking/feed.py
"""Driver and customer location updates"""
from typing import Any, Callable, List, Optional, Tuple

from tracker.io import OrderStore
from tracker.models import Location, Order
from tracker.tracking.validator import OrderValidator
from tracker.utils import now_ms


class LocationFeed:
    """Reads and writes the live coordinates attached to an order"""

    def __init__(self, store: OrderStore):
        self.store = store

    def set_location(self, order_code: str, role: str, location: Any) -> bool:
        """Set the driver or customer location of the order with `order_code`.

        Best effort: an unknown code writes nothing and returns False.
        """
        role = OrderValidator.role(role)
        location = OrderValidator.location(location)

        def apply(orders: List[Order]) -> bool:
            for order in orders:
                if order.order_code == order_code:
                    if role == 'driver':
                        order.driver_location = location
                    else:
                        order.customer_location = location
                    order.updated_at = now_ms()
                    return True
            return False

        return self.store.mutate(apply, only_if_changed=True)

    def get_locations(self, order_id: str) -> Tuple[Optional[Location], Optional[Location]]:
        """Return (driver_location, customer_location); (None, None) for an unknown id"""
        for order in self.store.load():
            if order.id == order_id:
                return order.driver_location, order.customer_location
        return None, None

    def subscribe(self, callback: Callable[[List[Order]], None]) -> Callable[[], None]:
        return self.store.subscribe(callback)
