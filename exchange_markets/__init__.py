"""
Exchange Markets Package - Canonical market listings across exchanges.

Turns each exchange's "list instruments" response into the same Market record
so pricing, routing and analytics can treat all exchanges identically.

Features:
- One source per exchange, same contract for all
- Precision and minimum order size derived from tick/step sizes
- Static fee and currency-alias tables injected per exchange
- Volatile fields stripped from the retained raw payload
- Fresh fetch on every call, no caching

Quick Start:
    from exchange_markets import MarketType, fetch_markets, fetch_markets_by_type

    async def main():
        spot = await fetch_markets_by_type("okex", MarketType.SPOT)
        everything = await fetch_markets("okex")

        for market in spot:
            print(f"{market.pair}: price={market.precision.price} min={market.min_quantity.base}")

Adding New Exchanges:
    1. Create class extending BaseMarketSource
    2. Set SUPPORTED_TYPES, implement fetch_raw() and rules()
    3. Add an ExchangeConfig with its fee table and aliases
    4. Register with MarketRegistry
"""

from exchange_markets.base import BaseMarketSource
from exchange_markets.config import (
    OKEX_CONFIG,
    WHALEEX_CONFIG,
    ExchangeConfig,
    load_config,
)
from exchange_markets.exceptions import (
    ConfigurationError,
    DuplicateMarketError,
    FetchError,
    MarketSourceError,
    MarketTypeError,
    NormalizationError,
    PairMismatchError,
    UnhandledQuoteCurrencyError,
    UnknownMarketTypeError,
    UnsupportedMarketTypeError,
)
from exchange_markets.models import (
    UNKNOWN,
    Fees,
    Market,
    MarketType,
    MinQuantity,
    Precision,
    SourceMetadata,
)
from exchange_markets.pairs import normalize_pair
from exchange_markets.providers import OKExMarketSource, WhaleExMarketSource
from exchange_markets.registry import (
    MarketRegistry,
    create_default_registry,
    fetch_markets,
    fetch_markets_by_type,
)
from exchange_markets.utils import calc_precision


__version__ = "1.0.0"

__all__ = [
    # Base
    "BaseMarketSource",

    # Models
    "Market",
    "MarketType",
    "Fees",
    "Precision",
    "MinQuantity",
    "SourceMetadata",
    "UNKNOWN",

    # Config
    "ExchangeConfig",
    "OKEX_CONFIG",
    "WHALEEX_CONFIG",
    "load_config",

    # Exceptions
    "MarketSourceError",
    "FetchError",
    "MarketTypeError",
    "UnsupportedMarketTypeError",
    "UnknownMarketTypeError",
    "NormalizationError",
    "UnhandledQuoteCurrencyError",
    "PairMismatchError",
    "DuplicateMarketError",
    "ConfigurationError",

    # Providers
    "OKExMarketSource",
    "WhaleExMarketSource",

    # Registry
    "MarketRegistry",
    "create_default_registry",
    "fetch_markets",
    "fetch_markets_by_type",

    # Helpers
    "calc_precision",
    "normalize_pair",
]
