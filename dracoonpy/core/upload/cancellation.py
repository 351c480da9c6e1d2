"""Cooperative cancellation flag shared between an upload and its owner."""
import threading


class CancellationToken:
    """
    Thread-safe cancel flag.
    
    Setting the flag never interrupts a running request; the upload checks
    it between reads and chunk transmissions.
    """
    
    def __init__(self):
        self._event = threading.Event()
    
    def cancel(self) -> None:
        self._event.set()
    
    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()
