"""Paged listing of the deploys sent by an account."""
from __future__ import annotations

import logging

from ..encoding import encode_base16
from ..interfaces.node import NodeClient
from ..models import BlockView, DeployInfo, DeployInfosPage

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 5


class DeployInfoPager:
    """Walk an account's deploy infos page by page.

    Page tokens are opaque. ``None`` asks for the first page, an empty
    string marks the end of the data in that direction and is never sent.
    """

    def __init__(self, client: NodeClient, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._client = client
        self.page_size = page_size
        self.account_public_key: bytes | None = None
        self.page_token: str | None = None
        self.next_page_token: str | None = None
        self.prev_page_token: str | None = None
        self.deploy_infos: tuple[DeployInfo, ...] | None = None

    def init(self, account_public_key: bytes, page_token: str | None = None) -> None:
        """Call whenever switching to a new account."""
        self.account_public_key = account_public_key
        self.page_token = page_token
        self.next_page_token = None
        self.prev_page_token = None
        self.deploy_infos = None

    async def fetch_page(self, page_token: str | None) -> DeployInfosPage | None:
        self.page_token = page_token
        return await self.fetch_data()

    async def fetch_next(self) -> DeployInfosPage | None:
        return await self.fetch_page(self.next_page_token)

    async def fetch_prev(self) -> DeployInfosPage | None:
        return await self.fetch_page(self.prev_page_token)

    async def fetch_data(self) -> DeployInfosPage | None:
        """Fetch the page at the current token; None if there is nothing to fetch."""
        if self.account_public_key is None:
            return None
        if self.page_token == "":
            logger.debug("No more deploys to fetch")
            return None

        page = await self._client.list_deploy_infos(
            self.account_public_key,
            self.page_size,
            BlockView.BASIC,
            self.page_token or "",
        )
        logger.debug(
            "Fetched %d deploys of %s",
            len(page.deploy_infos),
            encode_base16(self.account_public_key),
        )

        self.deploy_infos = page.deploy_infos
        self.next_page_token = page.next_page_token
        self.prev_page_token = page.prev_page_token
        return page
