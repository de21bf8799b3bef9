"""Command-line interface for querying a Casper node."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from .config import AppConfig, load_config
from .encoding import decode_base16, encode_base16
from .errors import CasperQueryError
from .logging_setup import configure_logging
from .models import BlockFound, DeployFound, NotFoundMessage
from .node import CasperClient, GatewayTransport
from .services import (
    AccountDirectory,
    BalanceResolver,
    DeployInfoPager,
    SearchService,
    Target,
)
from .state.parser import block_hash_of

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="casper-query",
        description="Query blocks, deploys and account balances on a Casper node",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    sub = parser.add_subparsers(dest="command")

    balance_parser = sub.add_parser("balance", help="Show an account's balance")
    balance_parser.add_argument("account", help="Account name, alias or hex public key")
    balance_parser.add_argument(
        "--block", default=None, help="Block hash (default: latest block)"
    )

    search_parser = sub.add_parser("search", help="Find a block or deploy by hash")
    search_parser.add_argument("target", choices=[t.value for t in Target])
    search_parser.add_argument("hash", help="Hex hash (block hashes may be a prefix)")

    deploys_parser = sub.add_parser("deploys", help="List deploys sent by an account")
    deploys_parser.add_argument("account", help="Account name, alias or hex public key")
    deploys_parser.add_argument("--page-token", default=None)
    deploys_parser.add_argument("--page-size", type=int, default=None)

    blocks_parser = sub.add_parser("blocks", help="List blocks of the top ranks")
    blocks_parser.add_argument("--depth", type=int, default=10)
    blocks_parser.add_argument("--max-rank", type=int, default=None)

    sub.add_parser("latest", help="Show a block from the last rank")

    block_deploys_parser = sub.add_parser(
        "block-deploys", help="List the deploys processed in a block"
    )
    block_deploys_parser.add_argument("hash", help="Hex block hash")

    accounts_parser = sub.add_parser("accounts", help="List configured accounts")
    accounts_parser.add_argument("filter", nargs="?", default=None)

    return parser


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


async def _balance(
    client: CasperClient, directory: AccountDirectory, args: argparse.Namespace
) -> None:
    public_key = decode_base16(directory.resolve(args.account))
    if args.block:
        block_hash = decode_base16(args.block)
    else:
        block_hash = block_hash_of(await client.get_latest_block_info())

    resolver = BalanceResolver(client)
    balance_uref = await resolver.get_account_balance_uref(block_hash, public_key)
    if balance_uref is None:
        print(f"Account {encode_base16(public_key)} does not exist yet.")
        return

    balance = await resolver.get_account_balance(block_hash, balance_uref)
    print(balance)


async def _search(client: CasperClient, args: argparse.Namespace) -> None:
    result = await SearchService(client).search(Target(args.target), args.hash)
    if isinstance(result, NotFoundMessage):
        print(result.text)
    elif isinstance(result, BlockFound):
        _print_json(result.block_info)
    elif isinstance(result, DeployFound):
        _print_json(result.deploy_info)


async def _deploys(
    client: CasperClient,
    directory: AccountDirectory,
    config: AppConfig,
    args: argparse.Namespace,
) -> None:
    pager = DeployInfoPager(client, args.page_size or config.listing.page_size)
    pager.init(decode_base16(directory.resolve(args.account)), args.page_token)
    page = await pager.fetch_data()
    if page is None:
        print("No more deploys.")
        return
    _print_json(
        {
            "deployInfos": list(page.deploy_infos),
            "nextPageToken": page.next_page_token,
            "prevPageToken": page.prev_page_token,
        }
    )


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    directory = AccountDirectory(config.accounts)

    if args.command == "accounts":
        for item in directory.get_items(args.filter):
            print(item.alias)
        return

    client = CasperClient(GatewayTransport(config.node))

    if args.command == "balance":
        await _balance(client, directory, args)
    elif args.command == "search":
        await _search(client, args)
    elif args.command == "deploys":
        await _deploys(client, directory, config, args)
    elif args.command == "blocks":
        _print_json(await client.get_block_infos(args.depth, args.max_rank))
    elif args.command == "latest":
        _print_json(await client.get_latest_block_info())
    elif args.command == "block-deploys":
        _print_json(await client.get_block_deploys(decode_base16(args.hash)))
    else:
        build_parser().print_help()
        sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_run(args))
    except (CasperQueryError, ValueError, FileNotFoundError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
