"""Node client protocol — the state queries services build on."""
from __future__ import annotations

from typing import Protocol

from ..models import BlockInfo, BlockView, DeployInfo, DeployInfosPage, StateValue
from ..state.keys import StateKey


class NodeClient(Protocol):
    """Abstract interface for node queries used by the higher-level services."""

    async def get_deploy_info(self, deploy_hash: bytes) -> DeployInfo: ...

    async def get_block_info(
        self, block_hash: bytes | str, view: BlockView = BlockView.FULL
    ) -> BlockInfo: ...

    async def get_block_state(self, block_hash: bytes, query: StateKey) -> StateValue: ...

    async def list_deploy_infos(
        self,
        account_public_key: bytes,
        page_size: int,
        view: BlockView = BlockView.BASIC,
        page_token: str = "",
    ) -> DeployInfosPage: ...
