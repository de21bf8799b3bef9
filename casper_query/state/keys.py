"""State key construction — the query forms understood by GetBlockState."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ..encoding import encode_base16
from ..models import URef


@dataclass(frozen=True)
class AddressKey:
    """Account entry keyed by its public key."""

    account: bytes

    variant = "ADDRESS"

    @property
    def key_base16(self) -> str:
        return encode_base16(self.account)


@dataclass(frozen=True)
class URefKey:
    uref: bytes

    variant = "UREF"

    @property
    def key_base16(self) -> str:
        return encode_base16(self.uref)


@dataclass(frozen=True)
class LocalKey:
    """Contract-local entry derived from a seed and an argument.

    Wire form is ``hex(seed):hex(suffix)``, seed first.
    """

    seed: bytes
    suffix: bytes

    variant = "LOCAL"

    @property
    def key_base16(self) -> str:
        return f"{encode_base16(self.seed)}:{encode_base16(self.suffix)}"


StateKey = Union[AddressKey, URefKey, LocalKey]


def address_key(account_public_key: bytes) -> AddressKey:
    return AddressKey(account_public_key)


def uref_key(uref: URef) -> URefKey:
    return URefKey(uref.uref)


def local_key(seed: bytes, suffix: bytes) -> LocalKey:
    return LocalKey(seed, suffix)


def to_state_query(key: StateKey) -> dict[str, Any]:
    """Render a key as the ``query`` field of a GetBlockState request."""
    return {"keyVariant": key.variant, "keyBase16": key.key_base16}
