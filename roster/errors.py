"""
Roster error taxonomy.

Every failure surfaced by a Roster manager is one of these kinds. The
``code`` and ``status_code`` attributes are hints for an outer HTTP layer.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from postgrest.exceptions import APIError

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class RosterError(Exception):
    """Base class for all Roster errors."""

    code = "roster_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(RosterError):
    """Malformed input (invalid payload, unparseable invite link, ...)."""

    code = "validation_error"
    status_code = 400


class NotFoundError(RosterError):
    """Missing organization, token, invitation or membership."""

    code = "not_found"
    status_code = 404


class UnauthorizedError(RosterError):
    """The acting user is not registered."""

    code = "unauthorized"
    status_code = 401


class ConflictError(RosterError):
    """Duplicate membership or a forbidden membership transition."""

    code = "conflict"
    status_code = 409


class InternalError(RosterError):
    """Storage or unexpected failure. The message is always generic."""

    code = "internal_error"
    status_code = 500


def is_unique_violation(error: APIError) -> bool:
    """Check whether a PostgREST error is a unique constraint violation."""
    return getattr(error, "code", None) == UNIQUE_VIOLATION


def describe_api_error(error: APIError) -> Optional[str]:
    """Best-effort one-line description of a PostgREST error for logs."""
    message = getattr(error, "message", None)
    code = getattr(error, "code", None)
    if message and code:
        return f"[{code}] {message}"
    return message or str(error)


@contextmanager
def storage_errors(message: str, conflict_message: Optional[str] = None) -> Iterator[None]:
    """
    Translate PostgREST failures raised inside the block.

    The original error is logged and chained; the caller only ever sees
    ``message``. When ``conflict_message`` is given, unique violations are
    raised as ConflictError with that message instead.

    Example:
        ```python
        with storage_errors("Failed to fetch organizations"):
            result = await client.table("roster_memberships").select("*").execute()
        ```
    """
    try:
        yield
    except APIError as e:
        if conflict_message is not None and is_unique_violation(e):
            logger.info("Unique violation: %s", describe_api_error(e))
            raise ConflictError(conflict_message) from e
        logger.error("%s: %s", message, describe_api_error(e), exc_info=True)
        raise InternalError(message) from e
