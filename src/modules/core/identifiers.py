"""12-byte document identifiers.

Identifiers are BSON ObjectIds (timestamp, process-random bytes, counter)
and travel as 24 lowercase hex characters everywhere outside the database.
"""

from __future__ import annotations

from bson import ObjectId
from bson.errors import InvalidId

from modules.core.exceptions import ErrorKind, ServiceError

OBJECT_ID_LENGTH = 24


def new_object_id() -> str:
    """Generate a fresh identifier as a hex string."""
    return str(ObjectId())


def is_object_id(value: object) -> bool:
    # ObjectId.is_valid also accepts raw 12-byte values; only hex text is an id here
    return (
        isinstance(value, str)
        and len(value) == OBJECT_ID_LENGTH
        and ObjectId.is_valid(value)
    )


def parse_object_id(value: object) -> str:
    """Validate *value* and return its canonical (lowercase) form.

    Raises:
        ServiceError: ``BAD_REQUEST`` when *value* is not 24 hex characters.
    """
    if not is_object_id(value):
        raise ServiceError(
            ErrorKind.BAD_REQUEST,
            f"invalid identifier {value!r}: must be a 24-character hex string",
        )
    try:
        return str(ObjectId(value))
    except InvalidId as exc:
        raise ServiceError(
            ErrorKind.BAD_REQUEST, f"invalid identifier {value!r}: {exc}"
        ) from exc
