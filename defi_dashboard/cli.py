"""Command-line interface for the DeFi dashboard."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import aiohttp

from . import report
from .config import load_config
from .impermanent_loss import InvalidInputError, impermanent_loss_table
from .logging_setup import configure_logging
from .models import PoolPosition
from .services import Dashboard

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="defi-dashboard",
        description="Read-only DeFi wallet dashboard for Ethereum and Solana",
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
    parser.add_argument(
        "--json", action="store_true", help="Print results as JSON"
    )

    sub = parser.add_subparsers(dest="command")

    il_parser = sub.add_parser("il", help="Impermanent loss calculator")
    il_parser.add_argument("amount_a", type=float, help="Deposited amount of token A")
    il_parser.add_argument("amount_b", type=float, help="Deposited amount of token B")
    il_parser.add_argument(
        "--initial", nargs=2, type=float, required=True, metavar=("PRICE_A", "PRICE_B"),
        help="USD prices at deposit time",
    )
    il_parser.add_argument(
        "--current", nargs=2, type=float, required=True, metavar=("PRICE_A", "PRICE_B"),
        help="USD prices now",
    )
    il_parser.add_argument(
        "--symbols", nargs=2, default=["A", "B"], metavar=("SYMBOL_A", "SYMBOL_B"),
    )

    sub.add_parser("il-table", help="Impermanent loss by price change")

    portfolio_parser = sub.add_parser("portfolio", help="Token balances of a wallet")
    portfolio_parser.add_argument("address")

    gas_parser = sub.add_parser("gas", help="Current gas / priority fees")
    gas_parser.add_argument("chain", choices=["ethereum", "solana"])

    yields_parser = sub.add_parser("yields", help="Yield opportunities")
    yields_parser.add_argument("--chain", choices=["ethereum", "solana"], default=None)
    yields_parser.add_argument("--risk", choices=["low", "medium", "high"], default=None)
    yields_parser.add_argument(
        "--type", choices=["LP", "Lending", "Staking", "Vault"], default=None
    )
    yields_parser.add_argument("--featured", action="store_true")

    lp_parser = sub.add_parser("lp", help="Liquidity-pool positions of a wallet")
    lp_parser.add_argument("address")

    summary_parser = sub.add_parser("summary", help="AI portfolio summary")
    summary_parser.add_argument("address")

    insights_parser = sub.add_parser("insights", help="AI portfolio insights")
    insights_parser.add_argument("address")

    return parser


def _run_offline(args: argparse.Namespace) -> str:
    """Commands that need neither configuration nor network."""
    if args.command == "il":
        position = PoolPosition(
            amount_a=args.amount_a,
            amount_b=args.amount_b,
            initial_price_a=args.initial[0],
            initial_price_b=args.initial[1],
            current_price_a=args.current[0],
            current_price_b=args.current[1],
            symbol_a=args.symbols[0],
            symbol_b=args.symbols[1],
        )
        result = Dashboard.impermanent_loss(position)
        return report.to_json(result) if args.json else report.render_il(position, result)

    rows = impermanent_loss_table()
    if args.json:
        return report.to_json([{"ratio": r, "il_percent": il} for r, il in rows])
    return report.render_il_table(rows)


async def _run(args: argparse.Namespace) -> str:
    """Execute the selected network command and return its rendering."""
    config = load_config(args.config)
    dashboard = Dashboard(config)

    if args.command == "portfolio":
        result = await dashboard.portfolio(args.address)
        return report.to_json(result) if args.json else report.render_portfolio(result)
    if args.command == "gas":
        quote = await dashboard.gas(args.chain)
        return report.to_json(quote) if args.json else report.render_gas(quote)
    if args.command == "yields":
        items = await dashboard.yields(
            chain=args.chain, risk=args.risk, type=args.type, featured_only=args.featured
        )
        return report.to_json(items) if args.json else report.render_yields(items)
    if args.command == "lp":
        positions = await dashboard.lp_positions(args.address)
        return report.to_json(positions) if args.json else report.render_lp_positions(positions)
    if args.command == "summary":
        summary = await dashboard.summary(args.address)
        return report.to_json(summary) if args.json else report.render_summary(summary)
    if args.command == "insights":
        insights = await dashboard.insights(args.address)
        return report.to_json(insights) if args.json else report.render_insights(insights)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level)

    try:
        if args.command in ("il", "il-table"):
            output = _run_offline(args)
        else:
            output = asyncio.run(_run(args))
    except (InvalidInputError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except (RuntimeError, FileNotFoundError, aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(output)
