"""Known accounts — aliases and public key validation."""
from __future__ import annotations

from dataclasses import dataclass

from ..config import AccountConfig
from ..encoding import base64_to_16, decode_base16

PUBLIC_KEY_HEX_LENGTH = 64


@dataclass(frozen=True)
class AccountAlias:
    key: str
    alias: str


def check_public_key(value: str | None) -> str | None:
    """Return why ``value`` isn't a usable account public key, or None."""
    if not value:
        return "Account Public Key cannot be empty."

    if len(value) != PUBLIC_KEY_HEX_LENGTH:
        return "Account Public Key has to be 64 characters long."

    try:
        decode_base16(value)
    except ValueError:
        return "Could not decode as Base16 hash."

    return None


class AccountDirectory:
    """Maps ``"<name> (<hex key>)"`` aliases of configured accounts to keys."""

    def __init__(self, accounts: tuple[AccountConfig, ...] = ()) -> None:
        self._names: dict[str, str] = {}
        self._aliases: dict[str, str] = {}
        for account in accounts:
            public_key_base16 = base64_to_16(account.public_key_base64)
            self._names[account.name] = public_key_base16
            self._aliases[f"{account.name} ({public_key_base16})"] = public_key_base16

    @property
    def items(self) -> list[AccountAlias]:
        return [AccountAlias(key=key, alias=alias) for alias, key in self._aliases.items()]

    def get_items(self, filter_: str | None = None) -> list[AccountAlias]:
        """Accounts whose hex key starts with ``filter_`` (all if empty)."""
        if not filter_:
            return self.items
        prefix = filter_.lower()
        return [item for item in self.items if item.key.startswith(prefix)]

    def resolve(self, value: str) -> str:
        """Turn a name, alias or hex key into a hex key.

        Raises:
            ValueError: if the value is neither known nor a valid key.
        """
        if value in self._names:
            return self._names[value]
        if value in self._aliases:
            return self._aliases[value]

        problem = check_public_key(value)
        if problem:
            raise ValueError(problem)
        return value.lower()
