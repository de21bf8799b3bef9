"""Account balance resolution through the mint's local storage."""
from __future__ import annotations

import logging

from ..encoding import byte_array_arg, encode_base16
from ..errors import (
    AccountNotYetCreated,
    InvariantViolation,
    TransportError,
    is_account_not_created,
)
from ..interfaces.node import NodeClient
from ..models import Account, URef
from ..state.keys import address_key, local_key, uref_key

logger = logging.getLogger(__name__)

MINT_NAME = "mint"


class BalanceResolver:
    """Resolve account balances at a given block.

    Finding the balance uref costs three chained state queries, so callers
    should cache what :meth:`get_account_balance_uref` returns and use
    :meth:`get_account_balance` for repeated reads.
    """

    def __init__(self, client: NodeClient) -> None:
        self._client = client

    async def _get_account(self, block_hash: bytes, account_public_key: bytes) -> Account:
        try:
            value = await self._client.get_block_state(
                block_hash, address_key(account_public_key)
            )
        except TransportError as e:
            if is_account_not_created(e):
                raise AccountNotYetCreated(e.code, e.message) from e
            raise
        return value.get_account()

    async def get_account_balance_uref(
        self, block_hash: bytes, account_public_key: bytes
    ) -> URef | None:
        """Get the reference to the balance so it can be cached.

        Returns None if the account doesn't exist yet.
        """
        try:
            account = await self._get_account(block_hash, account_public_key)
        except AccountNotYetCreated:
            logger.info(
                "Account %s does not exist at block %s",
                encode_base16(account_public_key),
                encode_base16(block_hash),
            )
            return None

        mint_public = account.find_uref(MINT_NAME)
        if mint_public is None:
            raise InvariantViolation(
                f"Account {encode_base16(account_public_key)} has no '{MINT_NAME}' uref"
            )

        # The account's binding is public; it points at the mint's private uref.
        mint_private = (
            await self._client.get_block_state(block_hash, uref_key(mint_public))
        ).get_uref()

        balance_query = local_key(
            mint_private.uref, byte_array_arg(account.purse_id.uref)
        )
        balance_uref = (
            await self._client.get_block_state(block_hash, balance_query)
        ).get_uref()

        logger.debug(
            "Balance uref of %s is %s",
            encode_base16(account_public_key),
            encode_base16(balance_uref.uref),
        )
        return balance_uref

    async def get_account_balance(self, block_hash: bytes, balance_uref: URef) -> int:
        """Read the balance (in motes) stored under a balance uref."""
        value = await self._client.get_block_state(block_hash, uref_key(balance_uref))
        return value.get_big_int()
