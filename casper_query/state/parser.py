"""Pure parsing functions for node JSON messages — no I/O.

``bytes`` fields arrive base64-encoded (proto3 JSON mapping), 64-bit and
big integers arrive as decimal strings.
"""
from __future__ import annotations

from typing import Any

from ..encoding import decode_base64
from ..errors import InvariantViolation
from ..models import (
    Account,
    BlockInfo,
    DeployInfosPage,
    NamedKey,
    StateValue,
    URef,
)


def parse_uref(raw: dict[str, Any]) -> URef:
    """Parse a ``Key.URef`` message.

    Examples:
        {"uref": "AAEC", "accessRights": "READ"} → URef(b"\\x00\\x01\\x02", "READ")
    """
    return URef(
        uref=decode_base64(raw.get("uref", "")),
        access_rights=raw.get("accessRights"),
    )


def parse_key_uref(raw: dict[str, Any]) -> URef | None:
    """Return the uref of a ``Key`` message, or None for other key kinds."""
    uref = raw.get("uref")
    if uref is None:
        return None
    return parse_uref(uref)


def parse_account(raw: dict[str, Any]) -> Account:
    purse_raw = raw.get("purseId")
    if purse_raw is None:
        raise InvariantViolation("Account has no purse id")

    known_urefs = tuple(
        NamedKey(name=entry.get("name", ""), uref=parse_key_uref(entry.get("key", {})))
        for entry in raw.get("knownUrefs", [])
    )
    return Account(
        public_key=decode_base64(raw.get("publicKey", "")),
        purse_id=parse_uref(purse_raw),
        known_urefs=known_urefs,
    )


def parse_big_int(raw: dict[str, Any]) -> int:
    """Read the magnitude of a ``BigInt`` message.

    The node sends the value as a decimal string, Python ints hold it exactly.
    """
    try:
        return int(raw.get("value", "0"))
    except (TypeError, ValueError) as e:
        raise InvariantViolation(f"Malformed big integer: {raw!r}") from e


def parse_state_value(raw: dict[str, Any]) -> StateValue:
    """Decode the variants of a state ``Value`` this client consumes."""
    account = parse_account(raw["account"]) if "account" in raw else None
    uref = parse_key_uref(raw["key"]) if "key" in raw else None
    big_int = parse_big_int(raw["bigInt"]) if "bigInt" in raw else None
    return StateValue(account=account, uref=uref, big_int=big_int, raw=raw)


def parse_deploy_infos_page(raw: dict[str, Any]) -> DeployInfosPage:
    return DeployInfosPage(
        deploy_infos=tuple(raw.get("deployInfos", [])),
        next_page_token=raw.get("nextPageToken", ""),
        prev_page_token=raw.get("prevPageToken", ""),
    )


def block_hash_of(block_info: BlockInfo) -> bytes:
    """Extract the block hash from a BlockInfo message."""
    block_hash = block_info.get("summary", {}).get("blockHash")
    if not block_hash:
        raise InvariantViolation("Block info has no block hash")
    return decode_base64(block_hash)
