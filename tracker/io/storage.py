# tracker/io/storage.py
"""Key-value storage backends with change notification"""
import os
import tempfile
import threading
from typing import Callable, Dict, List, Optional

from tracker.config import WATCH_INTERVAL_SEC
from tracker.utils import ensure_directory

ChangeCallback = Callable[[str, Optional[bytes]], None]


class KeyValueStorage:
    """Abstract key-value persistence boundary.

    Backends implement `get` and `_write`; `set` writes and then notifies every
    subscriber, so a notification always happens after the write completed.
    """

    def __init__(self):
        self._listeners: List[ChangeCallback] = []
        self._listeners_lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def _write(self, key: str, value: bytes) -> None:
        raise NotImplementedError

    def set(self, key: str, value: bytes) -> None:
        """Store `value` under `key` and notify subscribers"""
        self._write(key, value)
        self._notify(key, value)

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register a change callback; returns a function that unregisters it"""
        with self._listeners_lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, key: str, value: Optional[bytes]) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(key, value)
            except Exception as e:
                # One broken listener must not stop the others
                print(f"⚠️  Storage listener failed for '{key}': {e}")


class MemoryStorage(KeyValueStorage):
    """In-process storage; share one instance between stores to model several clients"""

    def __init__(self, initial: Dict[str, bytes] = None):
        super().__init__()
        self._data: Dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    def _write(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(value)


class JsonFileStorage(KeyValueStorage):
    """One file per key under a directory.

    Writes go to a temp file in the same directory followed by `os.replace`,
    so readers see either the old blob or the new one. `start_watching` polls
    modification times to pick up writes made by other processes.
    """

    def __init__(self, directory: str):
        super().__init__()
        self.directory = directory
        ensure_directory(self.directory)
        self._mtimes: Dict[str, int] = {}
        self._baselined = False
        self._mtimes_lock = threading.Lock()
        self._watch_stop = threading.Event()
        self._watch_thread: Optional[threading.Thread] = None

    def path_for(self, key: str) -> str:
        return os.path.join(self.directory, f'{key}.json')

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            with open(path, 'rb') as f:
                return f.read()
        except FileNotFoundError:
            return None

    def _write(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f'.{key}.', suffix='.tmp')
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        with self._mtimes_lock:
            self._mtimes[key] = self._mtime(path)

    def _mtime(self, path: str) -> int:
        try:
            return os.stat(path).st_mtime_ns
        except FileNotFoundError:
            return 0

    def _keys(self) -> List[str]:
        return [
            name[:-len('.json')]
            for name in os.listdir(self.directory)
            if name.endswith('.json') and not name.startswith('.')
        ]

    def poll(self) -> List[str]:
        """Notify subscribers about keys changed on disk since the last poll"""
        changed = []
        for key in self._keys():
            mtime = self._mtime(self.path_for(key))
            with self._mtimes_lock:
                previous = self._mtimes.get(key)
                self._mtimes[key] = mtime
            if previous != mtime and (previous is not None or self._baselined):
                changed.append(key)
        self._baselined = True
        for key in changed:
            self._notify(key, self.get(key))
        return changed

    def start_watching(self, interval: float = WATCH_INTERVAL_SEC) -> None:
        """Poll for external changes in a daemon thread"""
        if self._watch_thread is not None and self._watch_thread.is_alive():
            return
        # Baseline so existing files are not reported as changes
        self.poll()
        self._watch_stop.clear()
        self._watch_thread = threading.Thread(
            target=self._watch, args=(interval,), name='JsonFileStorage-watch', daemon=True
        )
        self._watch_thread.start()

    def stop_watching(self) -> None:
        self._watch_stop.set()
        if self._watch_thread is not None:
            self._watch_thread.join()
            self._watch_thread = None

    def _watch(self, interval: float) -> None:
        while not self._watch_stop.wait(interval):
            self.poll()
