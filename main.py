#!/usr/bin/env python3
"""
Binance Portfolio Tracker - Main Entry Point
"""

import asyncio
import argparse
import logging
import os
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from config.settings import create_config, validate_config
from src.agent.session import PortfolioSession
from src.core.exceptions import ConfigurationError, PortfolioTrackerError
from src.utils.logger import setup_logging
from src.utils.report import allocation_to_frame, format_portfolio, format_prices


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    # credential defaults below read the environment, so .env must be in it first
    load_dotenv(find_dotenv(usecwd=True))

    parser = argparse.ArgumentParser(description='Binance Portfolio Tracker')

    parser.add_argument(
        '--mode',
        choices=['prices', 'portfolio', 'watch', 'logout'],
        default='portfolio',
        help='What to do (default: portfolio)'
    )

    parser.add_argument(
        '--api-key',
        default=os.getenv('BINANCE_API_KEY', ''),
        help='Binance API key (default: $BINANCE_API_KEY)'
    )

    parser.add_argument(
        '--api-secret',
        default=os.getenv('BINANCE_API_SECRET', ''),
        help='Binance API secret (default: $BINANCE_API_SECRET)'
    )

    parser.add_argument(
        '--remember',
        action='store_true',
        help='Store credentials in the configured credentials file'
    )

    parser.add_argument(
        '--interval',
        type=int,
        help='Refresh interval in seconds for watch mode'
    )

    parser.add_argument(
        '--sort',
        choices=['coin', 'amount', 'value'],
        default='value',
        help='Asset table sort column (default: value)'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Path to custom config file'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )

    return parser.parse_args(argv)


async def authenticate(session: PortfolioSession, args: argparse.Namespace) -> bool:
    """Log in with explicit credentials, else fall back to stored ones"""
    if args.api_key or args.api_secret:
        await session.login(args.api_key, args.api_secret, remember=args.remember)
        return True
    return session.restore()


def print_dashboard(session: PortfolioSession, sort_by: str) -> None:
    view = session.view

    print("\n📈 Top Coin Prices")
    print(format_prices(view.top_prices, session.config.top_coin_symbols))

    if view.error:
        print(f"\n❌ Error: {view.error}")

    if view.portfolio is not None:
        print("\n💼 Your Assets")
        print(format_portfolio(view.portfolio, sort_by))
        if not view.portfolio.is_empty():
            print("\n🥧 Asset Allocation")
            print(allocation_to_frame(view.portfolio).to_string(index=False, float_format="{:,.2f}".format))
        print(f"\nLast updated: {view.last_updated:%H:%M:%S}")


async def show_prices(session: PortfolioSession) -> None:
    print("📊 Fetching top coin prices...")
    await session.refresh(interactive=True)
    print(format_prices(session.top_prices, session.config.top_coin_symbols))


async def show_portfolio(session: PortfolioSession, args: argparse.Namespace) -> None:
    if not await authenticate(session, args):
        print("❌ No credentials: pass --api-key/--api-secret or log in with --remember first")
        return
    await session.refresh(interactive=True)
    print_dashboard(session, args.sort)


async def watch(session: PortfolioSession, args: argparse.Namespace) -> None:
    if not await authenticate(session, args):
        print("❌ No credentials: pass --api-key/--api-secret or log in with --remember first")
        return

    print(f"👀 Watching portfolio every {session.config.refresh_interval}s (Ctrl+C to stop)")
    session.start()
    try:
        while True:
            await asyncio.sleep(session.config.refresh_interval)
            print_dashboard(session, args.sort)
    finally:
        await session.stop()


async def main() -> None:
    """Main entry point"""

    args = parse_arguments()

    config = create_config(config_path=args.config, refresh_interval=args.interval)
    setup_logging(level=args.log_level, log_to_file=config.log_to_file, log_dir=config.log_dir)
    logger = logging.getLogger(__name__)

    try:
        if not validate_config(config):
            raise ConfigurationError("Configuration validation failed")

        async with PortfolioSession(config) as session:
            if args.mode == 'prices':
                await show_prices(session)
            elif args.mode == 'portfolio':
                await show_portfolio(session, args)
            elif args.mode == 'watch':
                await watch(session, args)
            elif args.mode == 'logout':
                await session.logout()
                print("👋 Stored credentials removed")

    except PortfolioTrackerError as e:
        logger.error(f"❌ {e}")
        raise SystemExit(1)


def run() -> None:
    """Console script entry point"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")


if __name__ == "__main__":
    run()
