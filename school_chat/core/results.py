"""
Operation results
Every service call returns a Result carrying a payload and a status.
"""

import functools
import logging
from enum import IntEnum
from typing import Any, NamedTuple

from fastapi import status
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class Status(IntEnum):
    """Outcome classification shared by every service operation."""
    OK = status.HTTP_200_OK
    CREATED = status.HTTP_201_CREATED
    UNAUTHORIZED = status.HTTP_401_UNAUTHORIZED
    NOT_FOUND = status.HTTP_404_NOT_FOUND
    NOT_ACCEPTABLE = status.HTTP_406_NOT_ACCEPTABLE
    CONFLICT = status.HTTP_409_CONFLICT
    INTERNAL_ERROR = status.HTTP_500_INTERNAL_SERVER_ERROR


SUCCESS = frozenset({Status.OK, Status.CREATED})


class Result(NamedTuple):
    """Payload (or None) plus the status of the operation."""
    value: Any
    status: Status

    @property
    def ok(self) -> bool:
        return self.status in SUCCESS


def ok(value: Any = True) -> Result:
    return Result(value, Status.OK)


def created(value: Any) -> Result:
    return Result(value, Status.CREATED)


def fail(code: Status) -> Result:
    return Result(None, code)


class StorageError(Exception):
    """A write was not acknowledged by the database."""


def require_ack(write_result):
    """Raise StorageError when a pymongo write result was not acknowledged."""
    if not write_result.acknowledged:
        raise StorageError("write not acknowledged")
    return write_result


def guarded(func):
    """
    Turn storage failures inside a service method into INTERNAL_ERROR.

    Results never carry exceptions out of the service layer; the failure is
    logged with the operation name instead.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (PyMongoError, StorageError):
            logger.exception("Storage failure in %s", func.__qualname__)
            return fail(Status.INTERNAL_ERROR)
    return wrapper
