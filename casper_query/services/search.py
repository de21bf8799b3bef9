"""Look up a block or deploy by hash."""
from __future__ import annotations

import logging
from collections.abc import Awaitable
from enum import Enum

from ..encoding import decode_base16
from ..errors import NotFoundError
from ..interfaces.node import NodeClient
from ..models import (
    BlockFound,
    BlockView,
    DeployFound,
    NotFoundMessage,
    SearchResult,
)

logger = logging.getLogger(__name__)

DEPLOY_HASH_LENGTH = 64


class Target(Enum):
    BLOCK = "block"
    DEPLOY = "deploy"


class SearchValidationError(ValueError):
    """The hash can't be searched for; nothing was sent to the node."""


def check_search(target: Target, hash_base16: str) -> str | None:
    """Return why the input can't be searched, or None if it can."""
    if hash_base16 == "":
        return "Hash cannot be empty."

    if target == Target.DEPLOY:
        if len(hash_base16) != DEPLOY_HASH_LENGTH:
            return "Deploy hash has to be 64 characters long."
        try:
            decode_base16(hash_base16)
        except ValueError:
            return "Could not decode as Base16 hash."

    return None


class SearchService:
    """Dispatch hash searches and turn "not found" into a message."""

    def __init__(self, client: NodeClient) -> None:
        self._client = client

    async def search(self, target: Target, hash_base16: str) -> SearchResult:
        problem = check_search(target, hash_base16)
        if problem:
            raise SearchValidationError(problem)

        if target == Target.BLOCK:
            return await self.search_block(hash_base16)
        if target == Target.DEPLOY:
            return await self.search_deploy(hash_base16)
        raise ValueError(f"Don't know how to search for {target}")

    async def search_block(self, block_hash_prefix_base16: str) -> SearchResult:
        """Search by block hash; any prefix the node can resolve will do."""
        found = await self._try_search(
            f"Block {block_hash_prefix_base16}",
            self._client.get_block_info(block_hash_prefix_base16, BlockView.BASIC),
        )
        return found if isinstance(found, NotFoundMessage) else BlockFound(found)

    async def search_deploy(self, deploy_hash_base16: str) -> SearchResult:
        found = await self._try_search(
            f"Deploy {deploy_hash_base16}",
            self._client.get_deploy_info(decode_base16(deploy_hash_base16)),
        )
        return found if isinstance(found, NotFoundMessage) else DeployFound(found)

    @staticmethod
    async def _try_search(what: str, fetch: Awaitable[dict]) -> dict | NotFoundMessage:
        try:
            return await fetch
        except NotFoundError:
            logger.info("%s could not be found", what)
            return NotFoundMessage(f"{what} could not be found.")
