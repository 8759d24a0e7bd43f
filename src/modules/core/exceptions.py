"""Service-level error taxonomy.

Every failure that crosses a repository or service boundary is a
``ServiceError`` tagged with an ``ErrorKind``.  The kind alone decides the
HTTP status code at the API boundary; the message and ``missing`` carry the
diagnostics.  Causes are chained with ``raise ... from exc`` so the original
failure stays reachable for logging.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNPROCESSABLE = "unprocessable"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.UNPROCESSABLE: 422,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


class ServiceError(Exception):
    """A classified failure raised by repositories and services.

    ``missing`` lists the offending identifiers (unknown product ids, an
    unknown coupon code) as structured data, so callers never have to parse
    the message.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        missing: Optional[Iterable[str]] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.missing: tuple[str, ...] = tuple(missing or ())

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"ServiceError({self.kind.value!r}, {self.message!r})"

    @classmethod
    def wrap(cls, exc: BaseException, context: str) -> ServiceError:
        """Return a new error prefixed with *context*.

        The kind and ``missing`` of a wrapped ``ServiceError`` are preserved;
        anything else is treated as an infrastructure failure.  Callers chain
        the cause themselves (``raise ServiceError.wrap(exc, ...) from exc``).
        """
        if isinstance(exc, ServiceError):
            return cls(exc.kind, f"{context}: {exc}", exc.missing)
        return cls(ErrorKind.INTERNAL, f"{context}: {exc}")


def is_kind(exc: Optional[BaseException], kind: ErrorKind) -> bool:
    """Return ``True`` if *exc* or any error in its cause chain has *kind*."""
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, ServiceError) and exc.kind is kind:
            return True
        seen.add(id(exc))
        exc = exc.__cause__
    return False
