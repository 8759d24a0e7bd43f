"""Helpers shared by the Django ORM repository implementations."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from django.db import DatabaseError

from modules.core.context import RequestContext
from modules.core.exceptions import ErrorKind, ServiceError


@contextmanager
def store_call(
    ctx: RequestContext, operation: str, recheck: bool = True
) -> Iterator[None]:
    """Guard one database round-trip.

    The context is checked before the query is issued and, unless *recheck*
    is false, again after it returns so the result of a call that outlived
    its request is discarded.  Writes pass ``recheck=False`` and check inside
    their own transaction instead, so an expired request rolls back rather
    than reporting failure for committed data.  Driver failures, including values the
    backend cannot store, surface as ``INTERNAL`` errors.
    """
    ctx.check()
    try:
        yield
    except (DatabaseError, OverflowError) as exc:
        raise ServiceError(ErrorKind.INTERNAL, f"{operation} failed: {exc}") from exc
    if recheck:
        ctx.check()
