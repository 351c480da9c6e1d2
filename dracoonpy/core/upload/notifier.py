"""
Upload callbacks and throttled progress notification.

Observers may be added or removed from any thread while an upload is
dispatching; dispatch always iterates a snapshot taken under the lock.
"""
import threading
import time
from typing import Callable, Dict, List, Optional

from .models import Node
from .protocols import UploadCallback


class UploadCallbackRegistry:
    """Insertion-ordered, thread-safe set of upload observers."""
    
    def __init__(self):
        self._callbacks: Dict[UploadCallback, None] = {}
        self._lock = threading.Lock()
    
    def add(self, callback: Optional[UploadCallback]) -> 'UploadCallbackRegistry':
        """Register an observer (None and duplicates are ignored)."""
        if callback is not None:
            with self._lock:
                self._callbacks.setdefault(callback, None)
        return self
    
    def remove(self, callback: Optional[UploadCallback]) -> 'UploadCallbackRegistry':
        """Unregister an observer."""
        if callback is not None:
            with self._lock:
                self._callbacks.pop(callback, None)
        return self
    
    def snapshot(self) -> List[UploadCallback]:
        with self._lock:
            return list(self._callbacks)
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._callbacks)
    
    def __contains__(self, callback) -> bool:
        with self._lock:
            return callback in self._callbacks
    
    def notify_started(self, upload_id: str) -> None:
        for callback in self.snapshot():
            callback.on_started(upload_id)
    
    def notify_running(self, upload_id: str, bytes_sent: int, bytes_total: int) -> None:
        for callback in self.snapshot():
            callback.on_running(upload_id, bytes_sent, bytes_total)
    
    def notify_finished(self, upload_id: str, node: Node) -> None:
        for callback in self.snapshot():
            callback.on_finished(upload_id, node)
    
    def notify_canceled(self, upload_id: str) -> None:
        for callback in self.snapshot():
            callback.on_canceled(upload_id)
    
    def notify_failed(self, upload_id: str, error: Exception) -> None:
        for callback in self.snapshot():
            callback.on_failed(upload_id, error)


class ProgressNotifier:
    """
    Emits at most one `running` event per minimum interval.
    
    The interval is measured in wall-clock milliseconds from the previous
    emission, starting when the notifier is created. Reported byte counts
    never decrease.
    """
    
    def __init__(
        self,
        registry: UploadCallbackRegistry,
        interval_ms: int = 100,
        clock: Callable[[], float] = time.time
    ):
        self._registry = registry
        self._interval = interval_ms / 1000
        self._clock = clock
        self._last_update = clock()
        self._last_sent = 0
    
    def update(self, upload_id: str, bytes_sent: int, bytes_total: int) -> bool:
        """
        Notify observers if the interval has elapsed.
        
        Returns:
            True if a `running` event was dispatched
        """
        if bytes_sent < self._last_sent:
            return False
        now = self._clock()
        if now - self._last_update < self._interval:
            return False
        self._last_update = now
        self._last_sent = bytes_sent
        self._registry.notify_running(upload_id, bytes_sent, bytes_total)
        return True
