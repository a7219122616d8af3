"""Debounced calls for search-as-you-type reloads."""

import threading
from collections.abc import Callable


class Debouncer:
    """Run a callable once, ``delay`` seconds after the most recent trigger.

    Each ``trigger`` cancels the pending call, so a burst of search edits
    produces a single reload with the last arguments.
    """

    def __init__(self, func: Callable, delay: float = 0.4):
        self.func = func
        self.delay = delay
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def trigger(self, *args, **kwargs):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self.func, args=args, kwargs=kwargs)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_alive()
