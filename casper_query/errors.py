"""Error taxonomy and classification of transport outcomes."""
from __future__ import annotations

from enum import IntEnum


class StatusCode(IntEnum):
    """gRPC status codes as reported by the node."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class CasperQueryError(Exception):
    """Base class for all errors raised by this package."""


class TransportError(CasperQueryError):
    """A call finished with a non-OK status."""

    def __init__(self, code: StatusCode, message: str) -> None:
        super().__init__(f"{code.name}: {message}")
        self.code = code
        self.message = message


class NotFoundError(TransportError):
    """The node reported that the requested entity does not exist."""


class AccountNotYetCreated(TransportError):
    """The account's trie entry could not be followed.

    Only raised while resolving an account's own state entry.
    """


class InvariantViolation(CasperQueryError):
    """Global state does not have the shape the protocol guarantees."""


def to_status_code(code: int) -> StatusCode:
    """Map a raw integer to a ``StatusCode``, unknown values become UNKNOWN."""
    try:
        return StatusCode(code)
    except ValueError:
        return StatusCode.UNKNOWN


def classify_error(code: int, message: str) -> TransportError:
    """Wrap a non-OK status into the matching error type."""
    status = to_status_code(code)
    if status == StatusCode.NOT_FOUND:
        return NotFoundError(status, message)
    return TransportError(status, message)


def is_account_not_created(error: TransportError) -> bool:
    """Whether an account lookup failed because the account doesn't exist yet.

    The node has no dedicated error for this and answers with
    INVALID_ARGUMENT mentioning the key it could not follow. The substring
    match is fragile; only apply it to the account's own state query.
    """
    return error.code == StatusCode.INVALID_ARGUMENT and "Key" in error.message
