# tracker/io/store.py
"""Order persistence on top of a key-value storage backend"""
import json
import threading
from typing import Callable, List, Optional, TypeVar

from tracker.config import STORAGE_KEY
from tracker.errors import SerializationError
from tracker.io.storage import KeyValueStorage
from tracker.models import Order

OrdersCallback = Callable[[List[Order]], None]
T = TypeVar('T')


class OrderStore:
    """Loads and saves the full order collection as a single JSON blob.

    Every save is a full replace. Writers inside one process are serialized
    through `mutate`, which holds the store lock across the
    read-modify-write cycle.
    """

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key
        self.last_error: Optional[SerializationError] = None
        self._lock = threading.RLock()
        self._subscribers: List[OrdersCallback] = []
        self._subscribers_lock = threading.Lock()
        self._unsubscribe_storage = storage.subscribe(self._on_storage_change)

    # -------------------- Codec --------------------

    @staticmethod
    def encode(orders: List[Order]) -> bytes:
        """Serialize the collection to a JSON blob"""
        return json.dumps([o.to_dict() for o in orders]).encode('utf-8')

    @staticmethod
    def decode(blob: Optional[bytes]) -> List[Order]:
        """Deserialize a JSON blob; raises SerializationError on unreadable data"""
        if blob is None:
            return []
        try:
            records = json.loads(blob.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SerializationError(f"Unreadable order blob: {e}") from e
        if not isinstance(records, list):
            raise SerializationError(
                f"Expected a list of orders, got {type(records).__name__}"
            )
        try:
            return [Order.from_dict(r) for r in records]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SerializationError(f"Malformed order record: {e!r}") from e

    # -------------------- Load / Save --------------------

    def load(self) -> List[Order]:
        """Load all orders; unreadable data is treated as an empty collection"""
        try:
            orders = self.decode(self.storage.get(self.key))
        except SerializationError as e:
            self.last_error = e
            print(f"⚠️  {e}")
            print("   Treating stored orders as empty")
            return []
        self.last_error = None
        return orders

    def save(self, orders: List[Order]) -> None:
        """Replace the persisted collection"""
        blob = self.encode(orders)
        with self._lock:
            self.storage.set(self.key, blob)

    def mutate(self, fn: Callable[[List[Order]], T], only_if_changed: bool = False) -> T:
        """Run a read-modify-write cycle under the store lock.

        `fn` receives the current collection and may modify it in place. The
        resulting list is saved unless `fn` raises, in which case nothing is
        written. With `only_if_changed`, a falsy result from `fn` also skips
        the save.
        """
        with self._lock:
            orders = self.load()
            result = fn(orders)
            if result or not only_if_changed:
                self.save(orders)
            return result

    # -------------------- Notifications --------------------

    def subscribe(self, callback: OrdersCallback) -> Callable[[], None]:
        """Call `callback(orders)` after every completed save from any client"""
        with self._subscribers_lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._subscribers_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def close(self) -> None:
        """Detach from the storage backend"""
        self._unsubscribe_storage()
        with self._subscribers_lock:
            self._subscribers.clear()

    def _on_storage_change(self, key: str, blob: Optional[bytes]) -> None:
        if key != self.key:
            return
        with self._subscribers_lock:
            subscribers = list(self._subscribers)
        if not subscribers:
            return
        try:
            orders = self.decode(blob)
        except SerializationError as e:
            print(f"⚠️  Ignoring unreadable change notification: {e}")
            return
        for callback in subscribers:
            try:
                # Each subscriber gets its own copy
                callback([Order.from_dict(o.to_dict()) for o in orders])
            except Exception as e:
                print(f"⚠️  Order subscriber failed: {e}")
