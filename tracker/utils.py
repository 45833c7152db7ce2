# tracker/utils.py
"""Utility functions"""
import os
import time
import uuid
from datetime import datetime
from typing import Any

from tracker.config import DEFAULT_QUANTITY


def ensure_directory(path: str) -> None:
    """Create directory if it doesn't exist"""
    os.makedirs(path, exist_ok=True)


def now_ms() -> int:
    """Current time as epoch milliseconds"""
    return int(time.time() * 1000)


def new_order_id() -> str:
    """Generate a fresh opaque order id"""
    return str(uuid.uuid4())


def parse_quantity(value: Any) -> int:
    """Parse a quantity, falling back to the default for missing or non-numeric input"""
    if value is None or isinstance(value, bool):
        return DEFAULT_QUANTITY
    try:
        quantity = int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return DEFAULT_QUANTITY
    # 0 is falsy in the admin form and falls back to the default too
    if quantity == 0:
        return DEFAULT_QUANTITY
    return max(1, quantity)


def format_timestamp(ms: int = None) -> str:
    """Format an epoch-millisecond timestamp for display"""
    if ms is None:
        dt = datetime.now()
    else:
        dt = datetime.fromtimestamp(ms / 1000)
    return dt.strftime('%Y-%m-%d %H:%M:%S')
