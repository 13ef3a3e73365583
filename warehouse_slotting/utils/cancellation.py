# warehouse_slotting/utils/cancellation.py
import threading
import time
from typing import Optional

from warehouse_slotting.exceptions import AnalysisCancelledError

class CancellationToken:
    """Cooperative cancellation flag with an optional deadline.

    Checked between per-product iterations; it never interrupts a product
    that is already being scored.
    """

    def __init__(self, timeout_seconds: Optional[float] = None):
        self._event = threading.Event()
        self._deadline = None
        if timeout_seconds:
            self._deadline = time.monotonic() + timeout_seconds

    def cancel(self):
        self._event.set()

    @property
    def deadline_exceeded(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set() or self.deadline_exceeded

    def raise_if_cancelled(self, details=None):
        """Raise AnalysisCancelledError if the token was cancelled or timed out."""
        if self._event.is_set():
            raise AnalysisCancelledError("Slotting analysis was cancelled", code='CANCELLED', details=details)
        if self.deadline_exceeded:
            raise AnalysisCancelledError("Slotting analysis deadline exceeded", code='DEADLINE_EXCEEDED', details=details)
