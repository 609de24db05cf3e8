"""
Command-line interface for the Solana explorer.

Usage:
    solana-explorer [-u URL_OR_ALIAS] account <address>
    solana-explorer [-u URL_OR_ALIAS] transaction <signature>
    solana-explorer [-u URL_OR_ALIAS] block <start> [end] [--verbose]
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from rich.console import Console

from solana_explorer import __version__
from solana_explorer.config import SolanaConfig, get_solana_config
from solana_explorer.display import render_account, render_scan_result, render_transaction
from solana_explorer.logging_config import configure_logging, get_logger
from solana_explorer.services.account_service import AccountService
from solana_explorer.services.block_service import BlockService
from solana_explorer.services.transaction_service import TransactionService
from solana_explorer.solana_client import get_solana_client
from solana_explorer.utils.errors import ExplorerError

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solana-explorer",
        description="Inspect Solana accounts, transactions and blocks",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-u", "--url",
        help="RPC endpoint URL or network alias (dev, test, main, local); defaults to SOLANA_RPC_URL",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        type=str.upper,
        help="Log level for diagnostics written to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    account = subparsers.add_parser("account", help="Show an account")
    account.add_argument("address", help="Account public key")

    transaction = subparsers.add_parser("transaction", help="Show a transaction")
    transaction.add_argument("signature", help="Transaction signature")

    block = subparsers.add_parser("block", help="Show a block or a range of blocks")
    block.add_argument("start", type=int, help="First slot")
    block.add_argument("end", type=int, nargs="?", help="Last slot (inclusive)")
    block.add_argument("--verbose", action="store_true", help="Rank programs by invocation count")

    return parser


async def run(args: argparse.Namespace, config: SolanaConfig, console: Optional[Console] = None) -> None:
    """Execute the selected sub-command against the configured node."""
    console = console or Console()
    async with get_solana_client(config) as client:
        if args.command == "account":
            account = await AccountService(client, config).inspect(args.address.strip())
            render_account(account, console)
        elif args.command == "transaction":
            transaction = await TransactionService(client, config).inspect(args.signature.strip())
            render_transaction(transaction, console)
        elif args.command == "block":
            async for result in BlockService(client, config).scan(args.start, args.end, args.verbose):
                if not result.ok:
                    logger.warning(f"Slot {result.slot} failed: {result.error}")
                render_scan_result(result, console)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = get_solana_config()
        if args.url:
            config = config.with_rpc_url(args.url)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(args.log_level or config.log_level)
    logger.info(f"Using RPC endpoint {config.rpc_url}")

    try:
        asyncio.run(run(args, config))
    except ExplorerError as e:
        logger.debug(f"Command failed: {e.to_dict()}")
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0
