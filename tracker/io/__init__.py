"""Persistence: storage backends and the order store"""

from .storage import KeyValueStorage, MemoryStorage, JsonFileStorage
from .store import OrderStore

__all__ = ['KeyValueStorage', 'MemoryStorage', 'JsonFileStorage', 'OrderStore']
