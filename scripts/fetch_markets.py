"""
Fetch script for exchange markets.

Fetches and normalizes the live instrument listing of one exchange and prints
a summary table.

Usage:
    python -m scripts.fetch_markets okex
    python -m scripts.fetch_markets okex --type Spot
    python -m scripts.fetch_markets whaleex --limit 20
"""

import argparse
import asyncio
import logging
from collections import Counter

from exchange_markets import (
    Market,
    MarketSourceError,
    create_default_registry,
)


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-5s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def print_banner(text: str) -> None:
    """Print a banner."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def print_market(market: Market) -> None:
    """Print a market."""
    print(
        f"  {market.pair:<14} | {market.type.value:<7} | {market.id:<22} | "
        f"price: {market.precision.price:>2} | base: {market.precision.base:>2} | "
        f"min: {market.min_quantity.base:>10} | active: {market.active}"
    )


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch normalized exchange markets")
    parser.add_argument("exchange", choices=["okex", "whaleex"])
    parser.add_argument("--type", dest="market_type", default=None,
                        help="Spot, Futures, Swap or Option (default: all supported)")
    parser.add_argument("--limit", type=int, default=10,
                        help="Markets to print (default: 10)")
    return parser.parse_args()


async def main() -> int:
    args = parse_args()

    async with create_default_registry() as registry:
        print_banner(f"{args.exchange.upper()} markets ({args.market_type or 'all types'})")
        try:
            markets = await registry.fetch_markets(args.exchange, args.market_type)
        except MarketSourceError as e:
            logger.error(f"Fetch failed: {e}")
            return 1

    for market in markets[: args.limit]:
        print_market(market)

    counts = Counter(m.type.value for m in markets)
    print(f"\nTotal: {len(markets)} ({', '.join(f'{t}={n}' for t, n in sorted(counts.items()))})")
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
