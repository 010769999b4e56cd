"""
Market Registry - Central lookup of exchange sources.

Provides:
- Source registration and discovery by exchange name
- fetch_markets_by_type(exchange, type) / fetch_markets(exchange, type=None)
- Cross-exchange fetch merged into one sorted list
"""

import asyncio
import logging
from typing import Optional, Union

from exchange_markets.base import BaseMarketSource
from exchange_markets.exceptions import ConfigurationError, UnsupportedMarketTypeError
from exchange_markets.models import Market, MarketType, SourceMetadata
from exchange_markets.utils import ensure_unique, sort_markets


logger = logging.getLogger(__name__)


class MarketRegistry:
    """
    Registry of exchange market sources.

    Usage:
        async with MarketRegistry() as registry:
            registry.register(OKExMarketSource())
            registry.register(WhaleExMarketSource())

            spot = await registry.fetch_markets_by_type("okex", MarketType.SPOT)
            everything = await registry.fetch_markets("okex")
    """

    def __init__(self) -> None:
        self._sources: dict[str, BaseMarketSource] = {}

    def register(self, source: BaseMarketSource) -> None:
        """Register a source under its name, replacing any previous one."""
        name = self._key(source.name)

        if name in self._sources:
            logger.warning(f"Source '{name}' already registered, replacing")

        self._sources[name] = source
        logger.info(
            f"Registered source '{name}' "
            f"({', '.join(t.value for t in source.supported_types)})"
        )

    def unregister(self, name: str) -> Optional[BaseMarketSource]:
        """Unregister a source."""
        source = self._sources.pop(self._key(name), None)
        if source is not None:
            logger.info(f"Unregistered source '{source.name}'")
        return source

    def get_source(self, name: str) -> BaseMarketSource:
        """
        Get a source by exchange name (case-insensitive).

        Raises:
            ConfigurationError: If no source is registered under that name
        """
        key = self._key(name)
        if key not in self._sources:
            raise ConfigurationError(
                message=f"No source registered for exchange: {name}",
                config_key="exchange",
                context={"registered": self.list_sources()},
            )
        return self._sources[key]

    def list_sources(self) -> list[str]:
        """List registered source names, sorted."""
        return sorted(self._sources)

    def get_all_metadata(self) -> dict[str, SourceMetadata]:
        """Get metadata for all registered sources."""
        return {name: source.metadata() for name, source in self._sources.items()}

    async def fetch_markets_by_type(
        self,
        exchange: str,
        market_type: Union[MarketType, str],
    ) -> list[Market]:
        """Fetch one market type from one exchange."""
        return await self.get_source(exchange).fetch_markets_by_type(market_type)

    async def fetch_markets(
        self,
        exchange: str,
        market_type: Optional[Union[MarketType, str]] = None,
    ) -> list[Market]:
        """Fetch one market type, or all supported types, from one exchange."""
        return await self.get_source(exchange).fetch_markets(market_type)

    async def fetch_all_markets(
        self,
        market_type: Optional[Union[MarketType, str]] = None,
    ) -> list[Market]:
        """
        Fetch from every registered exchange concurrently.

        With a market type, exchanges that don't offer it are skipped.
        Any failure aborts the whole call.

        Raises:
            UnsupportedMarketTypeError: If no registered exchange offers the type
        """
        sources = list(self._sources.values())
        if market_type is not None:
            parsed = MarketType.parse(market_type)
            sources = [s for s in sources if parsed in s.supported_types]
            if not sources:
                raise UnsupportedMarketTypeError(
                    message=f"No registered exchange offers {parsed.value} markets",
                    market_type=parsed,
                    source_name="registry",
                    context={"registered": self.list_sources()},
                )

        results = await asyncio.gather(
            *(source.fetch_markets(market_type) for source in sources)
        )

        combined: list[Market] = []
        for markets in results:
            combined.extend(markets)

        combined = sort_markets(combined)
        ensure_unique(combined, "registry")
        return combined

    async def close(self) -> None:
        """Close all sources."""
        for source in self._sources.values():
            await source.close()

        self._sources.clear()
        logger.info("Registry closed")

    async def __aenter__(self) -> "MarketRegistry":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().lower()


def create_default_registry() -> MarketRegistry:
    """Create a new registry populated with OKEx and WhaleEx."""
    from exchange_markets.config import load_config
    from exchange_markets.providers.okex import OKExMarketSource
    from exchange_markets.providers.whaleex import WhaleExMarketSource

    registry = MarketRegistry()
    registry.register(OKExMarketSource(config=load_config("okex")))
    registry.register(WhaleExMarketSource(config=load_config("whaleex")))
    return registry


async def fetch_markets_by_type(
    exchange: str,
    market_type: Union[MarketType, str],
) -> list[Market]:
    """Fetch one market type from an exchange. Sessions live for this call only."""
    async with create_default_registry() as registry:
        return await registry.fetch_markets_by_type(exchange, market_type)


async def fetch_markets(
    exchange: str,
    market_type: Optional[Union[MarketType, str]] = None,
) -> list[Market]:
    """Fetch markets from an exchange. Sessions live for this call only."""
    async with create_default_registry() as registry:
        return await registry.fetch_markets(exchange, market_type)
