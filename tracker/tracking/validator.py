# tracker/tracking/validator.py
"""Order input validation"""
import math
from typing import Dict, Any, List

from tracker.config import DEFAULT_CITY
from tracker.errors import ValidationError
from tracker.models import Location, normalize_status, STATUS_PROCESSING
from tracker.utils import parse_quantity

# Persisted field name -> accepted input spellings
FIELD_ALIASES = {
    'orderCode': ('orderCode', 'order_code'),
    'customerName': ('customerName', 'customer_name'),
    'city': ('city',),
    'quantity': ('quantity',),
    'status': ('status',),
    'customerLocation': ('customerLocation', 'customer_location'),
    'driverLocation': ('driverLocation', 'driver_location'),
}

ROLES = ('driver', 'customer')


class OrderValidator:
    """Normalizes caller-supplied fields into the persisted record shape"""

    @staticmethod
    def normalize(fields: Dict[str, Any]) -> Dict[str, Any]:
        """Rename accepted aliases to persisted keys and drop unknown fields"""
        normalized = {}
        for key, aliases in FIELD_ALIASES.items():
            for alias in aliases:
                if alias in fields:
                    normalized[key] = fields[alias]
                    break
        return normalized

    @staticmethod
    def required_text(fields: Dict[str, Any], key: str) -> str:
        value = fields.get(key)
        if value is None or not str(value).strip():
            raise ValidationError(key, "is required")
        return str(value)

    @staticmethod
    def status(value: Any) -> str:
        """Validate a status value, accepting both 'OutForDelivery' and 'Out for Delivery'"""
        status = normalize_status(value)
        if status is None:
            raise ValidationError('status', f"invalid status {value!r}")
        return status

    @staticmethod
    def location(value: Any, field: str = 'location') -> Location:
        """Accept a Location, a {'lat','lng'} dict or a (lat, lng) pair of finite numbers"""
        if isinstance(value, (str, bytes)):
            raise ValidationError(field, f"invalid coordinate {value!r}")
        try:
            if isinstance(value, Location):
                location = value
            elif isinstance(value, dict):
                location = Location(value['lat'], value['lng'])
            else:
                lat, lng = value
                location = Location(lat, lng)
        except (KeyError, TypeError, ValueError):
            raise ValidationError(field, f"invalid coordinate {value!r}")
        if not (math.isfinite(location.lat) and math.isfinite(location.lng)):
            raise ValidationError(field, f"coordinates must be finite, got {location!r}")
        return location

    @staticmethod
    def role(value: str) -> str:
        if value not in ROLES:
            raise ValidationError('role', f"must be one of {', '.join(ROLES)}")
        return value

    @classmethod
    def for_create(cls, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Validate creation fields and apply defaults"""
        data = cls.normalize(fields)
        record = {
            'orderCode': cls.required_text(data, 'orderCode'),
            'customerName': cls.required_text(data, 'customerName'),
            'city': data.get('city') or DEFAULT_CITY,
            'quantity': parse_quantity(data.get('quantity')),
            'status': cls.status(data['status']) if data.get('status') else STATUS_PROCESSING,
        }
        for key in ('customerLocation', 'driverLocation'):
            if data.get(key) is not None:
                record[key] = cls.location(data[key], key)
        return record

    @classmethod
    def for_update(cls, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Validate the subset of fields being changed"""
        data = cls.normalize(fields)
        changes: Dict[str, Any] = {}
        for key in ('orderCode', 'customerName'):
            if key in data:
                changes[key] = cls.required_text(data, key)
        if 'city' in data:
            changes['city'] = data['city'] or DEFAULT_CITY
        if 'quantity' in data:
            changes['quantity'] = parse_quantity(data['quantity'])
        if 'status' in data:
            changes['status'] = cls.status(data['status'])
        for key in ('customerLocation', 'driverLocation'):
            if key in data:
                changes[key] = None if data[key] is None else cls.location(data[key], key)
        return changes

    @staticmethod
    def find_duplicates(order_codes: List[str]) -> List[str]:
        """Codes that appear more than once (exact comparison)"""
        seen = set()
        duplicates = []
        for code in order_codes:
            if code in seen and code not in duplicates:
                duplicates.append(code)
            seen.add(code)
        return duplicates
