"""Client-side query layer for a Casper node's global state."""
from .errors import (
    AccountNotYetCreated,
    CasperQueryError,
    InvariantViolation,
    NotFoundError,
    StatusCode,
    TransportError,
)
from .node import CasperClient, GatewayTransport

__all__ = [
    "AccountNotYetCreated",
    "CasperClient",
    "CasperQueryError",
    "GatewayTransport",
    "InvariantViolation",
    "NotFoundError",
    "StatusCode",
    "TransportError",
]
