"""Cancellation and debouncing for console controllers"""
import time


class RequestCancelled(Exception):
    """The response arrived after its controller gave up on it"""


class CancelToken:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def raise_if_cancelled(self):
        if self.cancelled:
            raise RequestCancelled('Request was cancelled')


class Debouncer:
    """
    Runs the last scheduled call once ``delay`` seconds have passed without a
    newer one. Nothing runs in the background: the owner calls ``tick()``
    (or ``flush()``) from its own loop. ``clock`` is injectable for tests.
    """

    def __init__(self, delay, clock=time.monotonic):
        self.delay = delay
        self.clock = clock
        self._call = None
        self._due = None

    @property
    def pending(self):
        return self._call is not None

    def schedule(self, func, *args, **kwargs):
        self._call = (func, args, kwargs)
        self._due = self.clock() + self.delay

    def cancel(self):
        self._call = None
        self._due = None

    def tick(self):
        """Run the pending call if its delay has elapsed; True when it ran"""
        if self._call is None or self.clock() < self._due:
            return False
        self.flush()
        return True

    def flush(self):
        if self._call is None:
            return None
        func, args, kwargs = self._call
        self.cancel()
        return func(*args, **kwargs)
