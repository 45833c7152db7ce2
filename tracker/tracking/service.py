# tracker/tracking/service.py
"""Order lifecycle operations"""
from typing import Dict, Any, List

from tracker.errors import DuplicateCode, NotFound
from tracker.io import OrderStore
from tracker.models import Order, STATUS_DELIVERED
from tracker.tracking.validator import OrderValidator
from tracker.utils import new_order_id, now_ms


class OrderService:
    """Create, update, delete and search orders.

    Every write reads the full collection, applies the change and saves the
    complete result through `OrderStore.mutate`.
    """

    def __init__(self, store: OrderStore):
        self.store = store

    def create(self, fields: Dict[str, Any]) -> Order:
        """Create a new order; raises ValidationError or DuplicateCode"""
        record = OrderValidator.for_create(fields)
        order = Order({**record, 'id': new_order_id(), 'updatedAt': now_ms()})

        def apply(orders: List[Order]) -> Order:
            # Exact comparison; lookups elsewhere are case-insensitive
            if any(o.order_code == order.order_code for o in orders):
                raise DuplicateCode(order.order_code)
            orders.append(order)
            return order

        return self.store.mutate(apply)

    def update(self, order_id: str, fields: Dict[str, Any]) -> Order:
        """Merge `fields` into the order with `order_id`.

        `orderCode` is applied as given without a uniqueness check; callers
        are expected not to edit it.
        """
        changes = OrderValidator.for_update(fields)

        def apply(orders: List[Order]) -> Order:
            order = _by_id(orders, order_id)
            if 'orderCode' in changes:
                order.order_code = changes['orderCode']
            if 'customerName' in changes:
                order.customer_name = changes['customerName']
            if 'city' in changes:
                order.city = changes['city']
            if 'quantity' in changes:
                order.quantity = changes['quantity']
            if 'status' in changes:
                order.status = changes['status']
            if 'customerLocation' in changes:
                order.customer_location = changes['customerLocation']
            if 'driverLocation' in changes:
                order.driver_location = changes['driverLocation']
            order.updated_at = now_ms()
            return order

        return self.store.mutate(apply)

    def set_status(self, order_id: str, status: str) -> Order:
        return self.update(order_id, {'status': status})

    def complete_delivery(self, order_id: str) -> Order:
        """Mark the order as Delivered"""
        return self.update(order_id, {'status': STATUS_DELIVERED})

    def delete(self, order_id: str) -> bool:
        """Remove the order; deleting an unknown id is a no-op"""

        def apply(orders: List[Order]) -> bool:
            before = len(orders)
            orders[:] = [o for o in orders if o.id != order_id]
            return len(orders) != before

        return self.store.mutate(apply, only_if_changed=True)

    def get(self, order_id: str) -> Order:
        return _by_id(self.store.load(), order_id)

    def find_by_code(self, code: str) -> Order:
        """Case-insensitive, whitespace-trimmed exact match on orderCode"""
        for order in self.store.load():
            if order.matches_code(code):
                return order
        raise NotFound('orderCode', code.strip())

    def list(self, filter_text: str = '') -> List[Order]:
        """Orders whose code or customer name contains `filter_text` (case-insensitive)"""
        needle = (filter_text or '').lower()
        return [
            o for o in self.store.load()
            if needle in o.order_code.lower() or needle in o.customer_name.lower()
        ]

    def list_by_status(self, status: str) -> List[Order]:
        status = OrderValidator.status(status)
        return [o for o in self.store.load() if o.status == status]


def _by_id(orders: List[Order], order_id: str) -> Order:
    for order in orders:
        if order.id == order_id:
            return order
    raise NotFound('id', order_id)
