"""Request-scoped cancellation for catalog builds and ID resolution."""

from __future__ import annotations

import threading
import time
from typing import Optional

from internal.atlas.client import DirectoryUnavailableError


class RequestCancelledError(DirectoryUnavailableError):
    """The request was cancelled or ran past its deadline."""


class RequestContext:
    """Deadline and cancel flag shared by every directory fetch of one request."""

    def __init__(self, timeout: Optional[float] = None):
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = threading.Event()

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None if there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self):
        if self.cancelled:
            raise RequestCancelledError("request cancelled")
        if self.expired:
            raise RequestCancelledError("request deadline exceeded")


def background() -> RequestContext:
    """A context that is never cancelled and has no deadline."""
    return RequestContext()
