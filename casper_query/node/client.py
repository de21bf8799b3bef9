"""Casper node client — state lookups and block/deploy queries."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..encoding import encode_base16
from ..errors import NotFoundError, StatusCode, classify_error
from ..interfaces.transport import Transport
from ..models import (
    BlockInfo,
    BlockView,
    DeployInfo,
    DeployInfosPage,
    ProcessedDeploy,
    StateValue,
)
from ..state.keys import StateKey, to_state_query
from ..state.parser import parse_deploy_infos_page, parse_state_value

logger = logging.getLogger(__name__)


class CasperClient:
    """Typed access to the node's CasperService.

    Every method is a single attempt; failures surface as
    ``TransportError`` (or ``NotFoundError``) without retries.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        # Streams still running after get_latest_block_info returned.
        self._detached: set[asyncio.Task[None]] = set()

    async def _unary(self, method: str, request: dict[str, Any]) -> dict[str, Any]:
        result = await self._transport.unary(method, request)
        if result.status != StatusCode.OK:
            raise classify_error(result.status, result.message)
        return result.response or {}

    async def _collect(self, method: str, request: dict[str, Any]) -> list[dict[str, Any]]:
        """Run a stream to completion and return every message in order."""
        items: list[dict[str, Any]] = []
        done: asyncio.Future[list[dict[str, Any]]] = (
            asyncio.get_running_loop().create_future()
        )

        def on_end(code: StatusCode, message: str) -> None:
            if done.done():
                return
            if code == StatusCode.OK:
                done.set_result(items)
            else:
                done.set_exception(classify_error(code, message))

        await self._transport.invoke(method, request, items.append, on_end)
        return await done

    async def get_deploy_info(self, deploy_hash: bytes) -> DeployInfo:
        return await self._unary(
            "GetDeployInfo", {"deployHashBase16": encode_base16(deploy_hash)}
        )

    async def get_block_info(
        self, block_hash: bytes | str, view: BlockView = BlockView.FULL
    ) -> BlockInfo:
        """Return the block info, including statistics unless ``view`` is BASIC.

        A string is sent as-is, so it may be a prefix of odd length; the node
        resolves it.
        """
        hash_base16 = block_hash if isinstance(block_hash, str) else encode_base16(block_hash)
        return await self._unary(
            "GetBlockInfo", {"blockHashBase16": hash_base16, "view": int(view)}
        )

    async def get_block_infos(
        self, depth: int, max_rank: int | None = None
    ) -> list[BlockInfo]:
        """Stream the blocks of the top ``depth`` ranks (below ``max_rank`` if set)."""
        return await self._collect(
            "StreamBlockInfos", {"depth": depth, "maxRank": max_rank or 0}
        )

    async def get_block_deploys(self, block_hash: bytes) -> list[ProcessedDeploy]:
        return await self._collect(
            "StreamBlockDeploys", {"blockHashBase16": encode_base16(block_hash)}
        )

    async def get_latest_block_info(self) -> BlockInfo:
        """Get one of the blocks from the last rank.

        Resolves with the first streamed block. This is any block of the top
        rank, not necessarily the fork choice tip. The rest of the stream is
        drained in the background and ignored.
        """
        first: asyncio.Future[BlockInfo] = asyncio.get_running_loop().create_future()

        def on_message(msg: dict[str, Any]) -> None:
            if not first.done():
                first.set_result(msg)

        def on_end(code: StatusCode, message: str) -> None:
            if first.done():
                return
            if code != StatusCode.OK:
                first.set_exception(classify_error(code, message))
            else:
                first.set_exception(
                    NotFoundError(StatusCode.NOT_FOUND, "The node returned no blocks")
                )

        def on_finished(task: asyncio.Task[None]) -> None:
            self._detached.discard(task)
            if task.cancelled() or task.exception() is None:
                return
            if first.done():
                logger.error("Latest block stream failed: %s", task.exception())
            else:
                first.set_exception(task.exception())

        task = asyncio.create_task(
            self._transport.invoke(
                "StreamBlockInfos", {"depth": 1, "maxRank": 0}, on_message, on_end
            )
        )
        self._detached.add(task)
        task.add_done_callback(on_finished)

        return await first

    async def get_block_state(self, block_hash: bytes, query: StateKey) -> StateValue:
        response = await self._unary(
            "GetBlockState",
            {
                "blockHashBase16": encode_base16(block_hash),
                "query": to_state_query(query),
            },
        )
        return parse_state_value(response)

    async def list_deploy_infos(
        self,
        account_public_key: bytes,
        page_size: int,
        view: BlockView = BlockView.BASIC,
        page_token: str = "",
    ) -> DeployInfosPage:
        """Fetch one page of the deploys sent by an account."""
        response = await self._unary(
            "ListDeployInfos",
            {
                "accountPublicKeyBase16": encode_base16(account_public_key),
                "pageSize": page_size,
                "view": int(view),
                "pageToken": page_token,
            },
        )
        return parse_deploy_infos_page(response)
