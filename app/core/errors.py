# app/core/errors.py
"""
Typed errors raised by the services.

Every error carries a ``kind`` tag so callers can branch on it without
matching message strings, plus the HTTP status the API layer maps it to.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError

log = logging.getLogger(__name__)


class ServiceError(Exception):
    kind: str = "error"
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    kind = "validation"
    status_code = 400


class Conflict(ServiceError):
    kind = "conflict"
    status_code = 409


class NotFound(ServiceError):
    kind = "not_found"
    status_code = 404


class Unauthorized(ServiceError):
    kind = "unauthorized"
    status_code = 401


class StoreUnavailable(ServiceError):
    kind = "store_unavailable"
    status_code = 503


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into StoreUnavailable.

    Typed service errors raised inside the block pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError as e:
        log.error("store failure while %s: %r", action, e)
        raise StoreUnavailable(f"store failure while {action}") from e
