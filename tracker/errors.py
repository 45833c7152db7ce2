# tracker/errors.py
"""Error taxonomy for the order tracker"""


class TrackerError(Exception):
    """Base class for all tracker errors"""


class ValidationError(TrackerError):
    """A required field is missing or a value is not acceptable"""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class DuplicateCode(TrackerError):
    """An order with the same orderCode already exists"""

    def __init__(self, order_code: str):
        super().__init__(f"Order code already exists: {order_code}")
        self.order_code = order_code


class NotFound(TrackerError):
    """No order matched the lookup"""

    def __init__(self, key: str, value: str):
        super().__init__(f"No order with {key} {value!r}")
        self.key = key
        self.value = value


class SerializationError(TrackerError):
    """The persisted order blob could not be decoded"""
