"""Byte/hex conversions and node argument encoding — no I/O."""
from __future__ import annotations

import base64
import binascii
import re
import struct

_BASE16_RE = re.compile(r"^[0-9a-fA-F]*$")


def encode_base16(data: bytes) -> str:
    """Encode bytes as lowercase hex."""
    return data.hex()


def decode_base16(value: str) -> bytes:
    """Decode a hex string, raising ``ValueError`` on malformed input.

    Unlike ``bytes.fromhex`` this rejects whitespace and odd lengths.
    """
    if not _BASE16_RE.match(value) or len(value) % 2:
        raise ValueError(f"Invalid base16 string: {value!r}")
    return bytes.fromhex(value)


def decode_base64(value: str) -> bytes:
    """Decode standard base64 as used for ``bytes`` fields in node JSON."""
    try:
        return base64.b64decode(value, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 string: {value!r}") from e


def base64_to_16(value: str) -> str:
    """Convert a base64 string to hex, e.g. for showing account keys."""
    return encode_base16(decode_base64(value))


def byte_array_arg(data: bytes) -> bytes:
    """Serialize a byte array the way the node deserializes arguments.

    Layout: ``u32`` little-endian length followed by the raw bytes.
    """
    return struct.pack("<I", len(data)) + data
