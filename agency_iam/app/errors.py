"""
Application error taxonomy.

Exceptions raised below the use cases, and the Error values use cases
return for them.
"""

import functools
import logging
from typing import Optional

from agency_iam.libs.result import Error, Return

logger = logging.getLogger(__name__)

DENIED = "DENIED"
UNAVAILABLE = "UNAVAILABLE"
CONFLICT = "CONFLICT"
VALIDATION_ERROR = "VALIDATION_ERROR"

# Denial reasons
NO_CONTEXT = "no_context"
FORBIDDEN = "forbidden"
NOT_FOUND = "not_found"
TRANSIENT_FAILURE = "transient_failure"


class PolicyViolation(Exception):
    """A read or write fell outside the caller's authorized scope"""

    def __init__(self, reason: str, entity: Optional[str] = None):
        self.reason = reason
        self.entity = entity
        super().__init__(f"Policy violation on {entity or 'entity'}: {reason}")


class DatastoreUnavailable(Exception):
    """The datastore was unreachable or timed out"""


class LinkageConflict(Exception):
    """A concurrent creator won the race for an active linkage key"""


class EmailTaken(Exception):
    """Another principal already holds the email address"""


def denied(reason: str = NOT_FOUND) -> Error:
    # One message for every reason
    return Error(DENIED, "Resource not found or access denied", reason=reason)


def unavailable() -> Error:
    return Error(
        UNAVAILABLE,
        "Datastore temporarily unavailable, retry later",
        reason=TRANSIENT_FAILURE,
    )


def conflict(message: str = "Concurrent update conflict") -> Error:
    return Error(CONFLICT, message)


def validation_error(message: str) -> Error:
    return Error(VALIDATION_ERROR, message)


def guard_datastore(execute):
    """
    Translate policy and datastore exceptions raised inside a use case
    into Result errors.
    """

    @functools.wraps(execute)
    async def wrapper(*args, **kwargs):
        try:
            return await execute(*args, **kwargs)
        except PolicyViolation as exc:
            logger.info(f"Policy denied operation: {exc}")
            return Return.err(denied(exc.reason))
        except DatastoreUnavailable:
            logger.warning("Datastore unavailable during operation", exc_info=True)
            return Return.err(unavailable())

    return wrapper
