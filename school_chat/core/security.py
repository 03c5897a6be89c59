from dataclasses import dataclass
from typing import Optional

from bson import ObjectId
from fastapi import Header, HTTPException, status

from school_chat.core.results import Result, Status

DETAILS = {
    Status.UNAUTHORIZED: "Not authorized to perform this action",
    Status.NOT_FOUND: "Not found",
    Status.NOT_ACCEPTABLE: "Missing or malformed parameters",
    Status.CONFLICT: "Conflicts with the current state",
    Status.INTERNAL_ERROR: "Database operation failed",
}


@dataclass(frozen=True)
class Credentials:
    """Token and the user id it is claimed for."""
    token: ObjectId
    user_id: ObjectId


def parse_object_id(value: Optional[str], name: str = "id") -> ObjectId:
    """Parse the string form of an id, rejecting malformed input with 406."""
    # ObjectId(None) would mint a fresh id instead of failing
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise HTTPException(
            status_code=status.HTTP_406_NOT_ACCEPTABLE,
            detail=f"Invalid {name}: {value!r}",
        )
    return ObjectId(value)


def parse_optional_id(value: Optional[str], name: str = "id") -> Optional[ObjectId]:
    return parse_object_id(value, name) if value else None


def get_credentials(
    x_token: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
) -> Credentials:
    """Dependency reading the ``X-Token`` and ``X-User-Id`` headers."""
    if not x_token or not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token not provided",
        )
    return Credentials(
        token=parse_object_id(x_token, "token"),
        user_id=parse_object_id(x_user_id, "user id"),
    )


def unwrap(result: Result, **details):
    """
    Return the payload of a successful result or raise HTTPException.

    ``details`` overrides the message per status name, e.g.
    ``unwrap(result, NOT_FOUND="Room not found")``.
    """
    if result.ok:
        return result.value
    raise HTTPException(
        status_code=int(result.status),
        detail=details.get(result.status.name, DETAILS.get(result.status, "Request failed")),
    )
