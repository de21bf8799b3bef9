"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Union

from .errors import InvariantViolation

# Node messages the core passes through without interpreting.
BlockInfo = dict[str, Any]
DeployInfo = dict[str, Any]
ProcessedDeploy = dict[str, Any]


class BlockView(IntEnum):
    """Verbosity of a block info response."""

    BASIC = 0
    FULL = 1


@dataclass(frozen=True)
class URef:
    """Unforgeable reference into global state.

    Compared by ``uref`` bytes only; access rights don't take part.
    """

    uref: bytes
    access_rights: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class NamedKey:
    """Named uref binding stored on an account."""

    name: str
    uref: URef | None


@dataclass(frozen=True)
class Account:
    public_key: bytes
    purse_id: URef
    known_urefs: tuple[NamedKey, ...] = ()

    def find_uref(self, name: str) -> URef | None:
        """Return the uref bound to ``name``, if any."""
        for named in self.known_urefs:
            if named.name == name:
                return named.uref
        return None


@dataclass(frozen=True)
class StateValue:
    """Value stored under a state key.

    Only the account, uref and big integer variants are decoded; anything
    else is kept in ``raw``.
    """

    account: Account | None = None
    uref: URef | None = None
    big_int: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    def get_account(self) -> Account:
        if self.account is None:
            raise InvariantViolation(f"Expected an account value, got {_variant(self.raw)}")
        return self.account

    def get_uref(self) -> URef:
        if self.uref is None:
            raise InvariantViolation(f"Expected a uref key value, got {_variant(self.raw)}")
        return self.uref

    def get_big_int(self) -> int:
        if self.big_int is None:
            raise InvariantViolation(f"Expected a big integer value, got {_variant(self.raw)}")
        return self.big_int


def _variant(raw: dict[str, Any]) -> str:
    return ", ".join(raw) or "empty value"


@dataclass(frozen=True)
class DeployInfosPage:
    """One page of an account's deploy listing."""

    deploy_infos: tuple[DeployInfo, ...] = ()
    next_page_token: str = ""
    prev_page_token: str = ""


@dataclass(frozen=True)
class BlockFound:
    block_info: BlockInfo


@dataclass(frozen=True)
class DeployFound:
    deploy_info: DeployInfo


@dataclass(frozen=True)
class NotFoundMessage:
    text: str


SearchResult = Union[BlockFound, DeployFound, NotFoundMessage]
