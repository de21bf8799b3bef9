"""Shared test fixtures and sample data."""
from __future__ import annotations

import asyncio
import base64
import textwrap
from pathlib import Path
from typing import Any, Callable

import pytest

from casper_query.config import AccountConfig, AppConfig, ListingConfig, NodeConfig
from casper_query.errors import StatusCode
from casper_query.interfaces.transport import OnEnd, OnMessage, UnaryResult


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


ACCOUNT_KEY = bytes(range(32))
BLOCK_HASH = bytes([0xAB] * 32)
PURSE_ID = bytes([0x01] * 32)
MINT_PUBLIC = bytes([0x02] * 32)
MINT_PRIVATE = bytes([0x03] * 32)
BALANCE_UREF = bytes([0x04] * 32)
POS_UREF = bytes([0x05] * 32)


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------


class FakeTransport:
    """Records calls and answers them from canned data."""

    def __init__(self) -> None:
        self.unary_calls: list[tuple[str, dict[str, Any]]] = []
        self.stream_calls: list[tuple[str, dict[str, Any]]] = []
        self.unary_handler: Callable[[str, dict[str, Any]], UnaryResult] = (
            lambda method, request: UnaryResult(StatusCode.OK, "", {})
        )
        self.streams: dict[str, tuple[list[dict[str, Any]], StatusCode, str]] = {}

    async def unary(self, method: str, request: dict[str, Any]) -> UnaryResult:
        self.unary_calls.append((method, request))
        return self.unary_handler(method, request)

    async def invoke(
        self,
        method: str,
        request: dict[str, Any],
        on_message: OnMessage,
        on_end: OnEnd,
    ) -> None:
        self.stream_calls.append((method, request))
        messages, code, message = self.streams.get(method, ([], StatusCode.OK, ""))
        for msg in messages:
            on_message(msg)
            await asyncio.sleep(0)
        on_end(code, message)


@pytest.fixture()
def fake_transport() -> FakeTransport:
    return FakeTransport()


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_node_config() -> NodeConfig:
    return NodeConfig(url="https://node.example.com/", timeout=10)


@pytest.fixture()
def sample_app_config(sample_node_config: NodeConfig) -> AppConfig:
    return AppConfig(
        node=sample_node_config,
        listing=ListingConfig(page_size=5),
        accounts=(AccountConfig(name="alice", public_key_base64=b64(ACCOUNT_KEY)),),
    )


SAMPLE_YAML = textwrap.dedent(f"""\
    node:
      url: "https://node.example.com"
      timeout: 10
    listing:
      page_size: 3
    accounts:
      - name: alice
        public_key_base64: "{b64(ACCOUNT_KEY)}"
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Sample global state values (node JSON)
# ---------------------------------------------------------------------------


@pytest.fixture()
def account_value() -> dict:
    return {
        "account": {
            "publicKey": b64(ACCOUNT_KEY),
            "purseId": {"uref": b64(PURSE_ID), "accessRights": "READ_ADD_WRITE"},
            "knownUrefs": [
                {"name": "pos", "key": {"uref": {"uref": b64(POS_UREF)}}},
                {
                    "name": "mint",
                    "key": {"uref": {"uref": b64(MINT_PUBLIC), "accessRights": "READ"}},
                },
            ],
        }
    }


@pytest.fixture()
def mint_private_value() -> dict:
    return {"key": {"uref": {"uref": b64(MINT_PRIVATE), "accessRights": "READ_ADD_WRITE"}}}


@pytest.fixture()
def balance_uref_value() -> dict:
    return {"key": {"uref": {"uref": b64(BALANCE_UREF), "accessRights": "READ"}}}


@pytest.fixture()
def balance_value() -> dict:
    return {"bigInt": {"value": "1000000000000000000000", "bitWidth": 512}}


@pytest.fixture()
def sample_block_info() -> dict:
    return {
        "summary": {
            "blockHash": b64(BLOCK_HASH),
            "header": {"rank": "42", "validatorPublicKey": b64(ACCOUNT_KEY)},
        },
        "status": {"stats": {"blockSizeBytes": 1024, "deployErrorCount": 0}},
    }
