"""Global state keys and value parsing."""
from .keys import (
    AddressKey,
    LocalKey,
    StateKey,
    URefKey,
    address_key,
    local_key,
    to_state_query,
    uref_key,
)

__all__ = [
    "AddressKey",
    "LocalKey",
    "StateKey",
    "URefKey",
    "address_key",
    "local_key",
    "to_state_query",
    "uref_key",
]
