"""Request-scoped cancellation and deadline signal.

A ``RequestContext`` is created per inbound request by
``RequestContextMiddleware`` and handed explicitly to services, which thread
it through every store call.  Stores call ``check()`` around each query so a
cancelled or expired request stops before (and is discarded after) the
database round-trip.
"""

from __future__ import annotations

import threading
import time
from contextvars import ContextVar, Token
from typing import Optional

from modules.core.exceptions import ErrorKind, ServiceError


class RequestContext:
    def __init__(self, deadline: Optional[float] = None) -> None:
        # ``deadline`` is a ``time.monotonic()`` timestamp.
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> RequestContext:
        return cls(deadline=time.monotonic() + seconds)

    @classmethod
    def background(cls) -> RequestContext:
        """A context that never expires (management commands, tasks)."""
        return cls()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        self._cancelled.set()

    def check(self) -> None:
        """Raise an ``INTERNAL`` error if the request is cancelled or expired."""
        if self.cancelled:
            raise ServiceError(ErrorKind.INTERNAL, "request cancelled")
        if self.expired:
            raise ServiceError(ErrorKind.INTERNAL, "request deadline exceeded")


_current_context: ContextVar[Optional[RequestContext]] = ContextVar(
    "request_context", default=None
)


def current_context() -> RequestContext:
    """Return the context bound to the running request, or a background one."""
    return _current_context.get() or RequestContext.background()


def bind_context(ctx: RequestContext) -> Token:
    return _current_context.set(ctx)


def reset_context(token: Token) -> None:
    _current_context.reset(token)
