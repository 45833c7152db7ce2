"""Order model"""
from typing import Dict, Any, Optional

from tracker.models.location import Location

# Lifecycle status values as persisted
STATUS_PROCESSING = 'Processing'
STATUS_SHIPPED = 'Shipped'
STATUS_OUT_FOR_DELIVERY = 'Out for Delivery'
STATUS_DELIVERED = 'Delivered'
STATUS_CANCELLED = 'Cancelled'
ALL_STATUSES = (
    STATUS_PROCESSING,
    STATUS_SHIPPED,
    STATUS_OUT_FOR_DELIVERY,
    STATUS_DELIVERED,
    STATUS_CANCELLED,
)

# Accepted spellings on input, keyed by a squashed lower-case form
_STATUS_ALIASES = {s.replace(' ', '').lower(): s for s in ALL_STATUSES}


def normalize_status(value: str) -> Optional[str]:
    """Map 'OutForDelivery', 'out for delivery', etc. to the persisted value"""
    if not isinstance(value, str):
        return None
    key = value.replace(' ', '').replace('_', '').replace('-', '').lower()
    return _STATUS_ALIASES.get(key)


class Order:
    """Represents a tracked delivery order"""

    def __init__(self, data: Dict[str, Any]):
        self.id: str = data['id']
        self.order_code: str = data['orderCode']
        self.customer_name: str = data.get('customerName', '')
        self.city: str = data.get('city', '')
        self.quantity: int = data.get('quantity', 1)
        self.status: str = data.get('status', STATUS_PROCESSING)
        self.customer_location: Optional[Location] = _location(data.get('customerLocation'))
        self.driver_location: Optional[Location] = _location(data.get('driverLocation'))
        self.updated_at: int = data.get('updatedAt', 0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        return cls(data)

    @property
    def is_out_for_delivery(self) -> bool:
        """Check if the order is currently being delivered"""
        return self.status == STATUS_OUT_FOR_DELIVERY

    def matches_code(self, code: str) -> bool:
        """Case-insensitive, whitespace-trimmed code comparison"""
        return self.order_code.strip().upper() == code.strip().upper()

    def remaining_distance(self) -> Optional[float]:
        """Driver-to-customer distance, if both positions are known"""
        if self.driver_location is None or self.customer_location is None:
            return None
        return self.driver_location.distance_to(self.customer_location)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted record shape"""
        data = {
            'id': self.id,
            'orderCode': self.order_code,
            'customerName': self.customer_name,
            'city': self.city,
            'quantity': self.quantity,
            'status': self.status,
            'updatedAt': self.updated_at,
        }
        if self.customer_location is not None:
            data['customerLocation'] = self.customer_location.to_dict()
        if self.driver_location is not None:
            data['driverLocation'] = self.driver_location.to_dict()
        return data

    def __repr__(self) -> str:
        return f"Order({self.order_code}, {self.customer_name}, {self.status})"


def _location(value: Any) -> Optional[Location]:
    if value is None:
        return None
    if isinstance(value, Location):
        return value
    return Location.from_dict(value)
