"""Command-line interface for the FlowLend position manager."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .amounts import format_amount, format_health_factor
from .auth import WalletAuth
from .chains.flow import FlowAccessClient
from .config import AppConfig, load_config
from .errors import LedgerError
from .logging_setup import configure_logging
from .models import Position
from .risk import RiskParameters, get_health_summary
from .services import LendingSession

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="flowlend",
        description="FlowLend collateralized position manager",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    summary_parser = sub.add_parser("summary", help="Offline health summary for given figures")
    summary_parser.add_argument("--collateral", default="0.0", help="Collateral amount")
    summary_parser.add_argument("--borrowed", default="0.0", help="Borrowed amount")

    position_parser = sub.add_parser("position", help="Fetch and show a wallet's position")
    position_parser.add_argument(
        "--address", default=None, help="Flow address (overrides config wallet.address)"
    )

    watch_parser = sub.add_parser("watch", help="Refresh the position continuously")
    watch_parser.add_argument(
        "interval",
        nargs="?",
        type=int,
        default=None,
        help="Refresh interval in seconds (overrides config)",
    )
    watch_parser.add_argument("--address", default=None, help="Flow address")

    seal_parser = sub.add_parser("seal", help="Wait for a transaction to be sealed")
    seal_parser.add_argument("transaction_id", help="Transaction id")

    return parser


def _summary(config: AppConfig, collateral: str, borrowed: str) -> str:
    params = RiskParameters(
        collateral_factor=config.risk.collateral_factor,
        liquidation_threshold=config.risk.liquidation_threshold,
    )
    summary = get_health_summary(Position(collateral=collateral, borrowed=borrowed), params)
    return (
        f"Health factor: {format_health_factor(summary.health_factor)}\n"
        f"Max borrowable: {format_amount(summary.max_borrowable)} FLOW\n"
        f"Max withdrawable: {format_amount(summary.max_withdrawable)} FLOW"
    )


async def _watch(session: LendingSession, interval: int) -> None:
    """Render, then refresh every ``interval`` seconds; login has already synced."""
    logger.info("Starting position watch (refreshing every %d seconds)", interval)
    print(session.render(), flush=True)
    while True:
        await asyncio.sleep(interval)
        try:
            await session.refresh_position()
        except Exception as e:
            logger.error("Error in watch loop: %s", e)
            continue
        print(session.render(), flush=True)


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    if args.command == "summary":
        print(_summary(config, args.collateral, args.borrowed))
        return

    client = FlowAccessClient(config.ledger, config.contracts)

    if args.command == "seal":
        result = await client.await_sealed(args.transaction_id)
        print(f"Sealed: {result.status_string}")
        return

    auth = WalletAuth(config)
    session = LendingSession(config, auth, client, client)
    try:
        await auth.log_in(args.address)
        if args.command == "position":
            print(session.render())
        elif args.command == "watch":
            interval = args.interval or config.monitor.refresh_interval_seconds
            await _watch(session, interval)
    finally:
        session.close()


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_run(args))
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except LedgerError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass
