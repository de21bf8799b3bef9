"""Integration tests for balance resolution with mocked node state."""
from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from casper_query.errors import (
    InvariantViolation,
    NotFoundError,
    StatusCode,
    TransportError,
)
from casper_query.interfaces.transport import UnaryResult
from casper_query.models import URef
from casper_query.node.client import CasperClient
from casper_query.services.balance import BalanceResolver
from casper_query.state.parser import parse_state_value

from conftest import (
    ACCOUNT_KEY,
    BALANCE_UREF,
    BLOCK_HASH,
    MINT_PRIVATE,
    MINT_PUBLIC,
    PURSE_ID,
    FakeTransport,
)

# hex(mint private) ":" hex(u32 LE length || purse id)
EXPECTED_LOCAL_KEY = f"{MINT_PRIVATE.hex()}:20000000{PURSE_ID.hex()}"


@pytest.fixture()
def state(
    account_value: dict,
    mint_private_value: dict,
    balance_uref_value: dict,
    balance_value: dict,
) -> dict[tuple[str, str], dict]:
    """Global state at BLOCK_HASH keyed by (variant, key_base16)."""
    return {
        ("ADDRESS", ACCOUNT_KEY.hex()): account_value,
        ("UREF", MINT_PUBLIC.hex()): mint_private_value,
        ("LOCAL", EXPECTED_LOCAL_KEY): balance_uref_value,
        ("UREF", BALANCE_UREF.hex()): balance_value,
    }


@pytest.fixture()
def fake_node(fake_transport: FakeTransport, state: dict) -> FakeTransport:
    def handler(method: str, request: dict[str, Any]) -> UnaryResult:
        assert method == "GetBlockState"
        query = request["query"]
        value = state.get((query["keyVariant"], query["keyBase16"]))
        if value is None:
            return UnaryResult(StatusCode.NOT_FOUND, f"No value at {query['keyBase16']}")
        return UnaryResult(StatusCode.OK, "", value)

    fake_transport.unary_handler = handler
    return fake_transport


@pytest.fixture()
def resolver(fake_node: FakeTransport) -> BalanceResolver:
    return BalanceResolver(CasperClient(fake_node))


class TestGetAccountBalanceUref:
    @pytest.mark.asyncio
    async def test_resolves_through_mint(
        self, resolver: BalanceResolver, fake_node: FakeTransport
    ) -> None:
        balance_uref = await resolver.get_account_balance_uref(BLOCK_HASH, ACCOUNT_KEY)

        assert balance_uref == URef(BALANCE_UREF)
        queries = [request["query"] for _, request in fake_node.unary_calls]
        assert queries == [
            {"keyVariant": "ADDRESS", "keyBase16": ACCOUNT_KEY.hex()},
            {"keyVariant": "UREF", "keyBase16": MINT_PUBLIC.hex()},
            {"keyVariant": "LOCAL", "keyBase16": EXPECTED_LOCAL_KEY},
        ]
        assert all(
            request["blockHashBase16"] == BLOCK_HASH.hex()
            for _, request in fake_node.unary_calls
        )

    @pytest.mark.asyncio
    async def test_idempotent(self, resolver: BalanceResolver) -> None:
        first = await resolver.get_account_balance_uref(BLOCK_HASH, ACCOUNT_KEY)
        second = await resolver.get_account_balance_uref(BLOCK_HASH, ACCOUNT_KEY)
        assert first == second

    @pytest.mark.asyncio
    async def test_account_not_created_returns_none(
        self, resolver: BalanceResolver, fake_node: FakeTransport
    ) -> None:
        fake_node.unary_handler = lambda m, r: UnaryResult(
            StatusCode.INVALID_ARGUMENT, f"Key Account({ACCOUNT_KEY.hex()}) not found"
        )
        assert await resolver.get_account_balance_uref(BLOCK_HASH, ACCOUNT_KEY) is None
        assert len(fake_node.unary_calls) == 1

    @pytest.mark.asyncio
    async def test_account_not_found_code_raises(
        self, resolver: BalanceResolver, fake_node: FakeTransport
    ) -> None:
        fake_node.unary_handler = lambda m, r: UnaryResult(
            StatusCode.NOT_FOUND, "Key not found"
        )
        with pytest.raises(NotFoundError):
            await resolver.get_account_balance_uref(BLOCK_HASH, ACCOUNT_KEY)

    @pytest.mark.asyncio
    async def test_invalid_argument_without_key_raises(
        self, resolver: BalanceResolver, fake_node: FakeTransport
    ) -> None:
        fake_node.unary_handler = lambda m, r: UnaryResult(
            StatusCode.INVALID_ARGUMENT, "bad block hash"
        )
        with pytest.raises(TransportError, match="bad block hash"):
            await resolver.get_account_balance_uref(BLOCK_HASH, ACCOUNT_KEY)

    @pytest.mark.asyncio
    async def test_missing_mint_is_invariant_violation(
        self, resolver: BalanceResolver, state: dict, account_value: dict
    ) -> None:
        account_value["account"]["knownUrefs"] = [
            k for k in account_value["account"]["knownUrefs"] if k["name"] != "mint"
        ]
        state[("ADDRESS", ACCOUNT_KEY.hex())] = account_value

        with pytest.raises(InvariantViolation, match="mint"):
            await resolver.get_account_balance_uref(BLOCK_HASH, ACCOUNT_KEY)


class TestStageFailures:
    """Failures after the account lookup are never absorbed."""

    @pytest.mark.asyncio
    async def test_key_message_on_later_stage_propagates(
        self, account_value: dict
    ) -> None:
        client = AsyncMock()
        client.get_block_state.side_effect = [
            parse_state_value(account_value),
            TransportError(StatusCode.INVALID_ARGUMENT, "Key URef(...) not found"),
        ]
        resolver = BalanceResolver(client)

        with pytest.raises(TransportError, match="Key URef"):
            await resolver.get_account_balance_uref(BLOCK_HASH, ACCOUNT_KEY)
        assert client.get_block_state.await_count == 2

    @pytest.mark.asyncio
    async def test_local_key_lookup_failure_propagates(
        self, account_value: dict, mint_private_value: dict
    ) -> None:
        client = AsyncMock()
        client.get_block_state.side_effect = [
            parse_state_value(account_value),
            parse_state_value(mint_private_value),
            TransportError(StatusCode.INTERNAL, "trie corrupted"),
        ]
        resolver = BalanceResolver(client)

        with pytest.raises(TransportError, match="trie corrupted"):
            await resolver.get_account_balance_uref(BLOCK_HASH, ACCOUNT_KEY)

    @pytest.mark.asyncio
    async def test_unexpected_value_variant(self, account_value: dict) -> None:
        client = AsyncMock()
        client.get_block_state.side_effect = [
            parse_state_value(account_value),
            parse_state_value({"intValue": 1}),
        ]
        resolver = BalanceResolver(client)

        with pytest.raises(InvariantViolation):
            await resolver.get_account_balance_uref(BLOCK_HASH, ACCOUNT_KEY)


class TestGetAccountBalance:
    @pytest.mark.asyncio
    async def test_reads_big_int(
        self, resolver: BalanceResolver, fake_node: FakeTransport
    ) -> None:
        balance = await resolver.get_account_balance(BLOCK_HASH, URef(BALANCE_UREF))

        assert balance == 10**21
        _, request = fake_node.unary_calls[0]
        assert request["query"] == {"keyVariant": "UREF", "keyBase16": BALANCE_UREF.hex()}

    @pytest.mark.asyncio
    async def test_full_flow(self, resolver: BalanceResolver) -> None:
        balance_uref = await resolver.get_account_balance_uref(BLOCK_HASH, ACCOUNT_KEY)
        assert balance_uref is not None
        assert await resolver.get_account_balance(BLOCK_HASH, balance_uref) == 10**21
