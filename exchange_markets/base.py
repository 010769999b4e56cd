"""
Base Market Source - Abstract interface for all exchange providers.

All providers MUST implement this interface so that:
- Each exchange is isolated and replaceable
- Every exchange produces the same canonical Market records
- Adding an exchange never touches shared code
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Union

import aiohttp

from exchange_markets.config import ExchangeConfig
from exchange_markets.exceptions import (
    FetchError,
    MarketSourceError,
    NormalizationError,
    PairMismatchError,
    UnsupportedMarketTypeError,
)
from exchange_markets.models import Market, MarketType, SourceMetadata
from exchange_markets.pairs import PairCanonicalizer, normalize_pair
from exchange_markets.utils import ensure_unique, sanitize_info, sort_markets


logger = logging.getLogger(__name__)

RawInstrument = dict[str, Any]
NormalizeRule = Callable[[RawInstrument, MarketType], Market]


class BaseMarketSource(ABC):
    """
    Abstract base class for all exchange market sources.

    Each source implementation must:
    1. Declare SUPPORTED_TYPES - market types the exchange lists
    2. Implement fetch_raw() - Get raw instruments for one market type
    3. Implement rules() - One normalization rule per normalizable type

    Provided here:
    - normalize() with type dispatch, pair cross-check and error wrapping
    - fetch_markets_by_type() / fetch_markets() aggregation
    - aiohttp session handling; any non-2xx response raises FetchError
    """

    SUPPORTED_TYPES: tuple[MarketType, ...] = ()

    def __init__(
        self,
        config: ExchangeConfig,
        session: Optional[aiohttp.ClientSession] = None,
        canonicalizer: Optional[PairCanonicalizer] = normalize_pair,
    ) -> None:
        self._config = config
        self._session = session
        self._owns_session = session is None
        self._canonicalizer = canonicalizer

    @property
    def name(self) -> str:
        """Unique identifier for this source."""
        return self._config.name

    @property
    def config(self) -> ExchangeConfig:
        return self._config

    @property
    def supported_types(self) -> tuple[MarketType, ...]:
        return self.SUPPORTED_TYPES

    def metadata(self) -> SourceMetadata:
        """Return source metadata."""
        return SourceMetadata(
            name=self.name,
            display_name=self._config.display_name,
            supported_types=list(self.SUPPORTED_TYPES),
            base_url=self._config.base_url,
            documentation_url=self._config.documentation_url,
            fee_url=self._config.fee_url,
        )

    @abstractmethod
    async def fetch_raw(self, market_type: MarketType) -> list[RawInstrument]:
        """
        Fetch raw instruments from the exchange API.

        Args:
            market_type: A type from SUPPORTED_TYPES

        Returns:
            Decoded JSON instruments, unmodified

        Raises:
            FetchError: On any transport failure
        """
        pass

    @abstractmethod
    def rules(self) -> dict[MarketType, NormalizeRule]:
        """Normalization rule per market type. Missing types are unsupported."""
        pass

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def check_market_type(self, market_type: Union[MarketType, str]) -> MarketType:
        """
        Parse a market type and verify the exchange offers it.

        Raises:
            UnknownMarketTypeError: If outside the known set
            UnsupportedMarketTypeError: If the exchange does not offer it
        """
        parsed = MarketType.parse(market_type)
        if parsed not in self.SUPPORTED_TYPES:
            raise UnsupportedMarketTypeError(
                message=f"Unsupported market type: {parsed.value}",
                market_type=parsed,
                source_name=self.name,
            )
        return parsed

    def normalize(
        self,
        raw: RawInstrument,
        market_type: Union[MarketType, str],
    ) -> Market:
        """
        Convert one raw instrument into a Market. Pure, no I/O.

        Raises:
            UnknownMarketTypeError: If market_type is outside the known set
            UnsupportedMarketTypeError: If no rule exists for market_type
            NormalizationError: If the instrument violates a rule assumption
        """
        parsed = MarketType.parse(market_type)
        rule = self.rules().get(parsed)
        if rule is None:
            raise UnsupportedMarketTypeError(
                message=f"Unsupported market type: {parsed.value}",
                market_type=parsed,
                source_name=self.name,
            )

        try:
            market = rule(raw, parsed)
        except MarketSourceError:
            raise
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise NormalizationError(
                message=f"Failed to normalize instrument: {e}",
                source_name=self.name,
                raw_data=raw,
                original_error=e,
            ) from e

        self._check_pair(market, raw)
        return market

    def normalize_all(
        self,
        raw_data: list[RawInstrument],
        market_type: Union[MarketType, str],
    ) -> list[Market]:
        """Normalize a full listing, sorted by pair."""
        markets = sort_markets(self.normalize(raw, market_type) for raw in raw_data)
        ensure_unique(markets, self.name)
        return markets

    def _check_pair(self, market: Market, raw: RawInstrument) -> None:
        if self._canonicalizer is None:
            return
        try:
            canonical = self._canonicalizer(market.id, self.name)
        except ValueError as e:
            raise NormalizationError(
                message=f"Cannot canonicalize {market.id}: {e}",
                source_name=self.name,
                raw_data=raw,
                field_name="id",
                original_error=e,
            ) from e
        if canonical != market.pair:
            raise PairMismatchError(
                computed_pair=market.pair,
                canonical_pair=canonical,
                instrument_id=market.id,
                source_name=self.name,
                raw_data=raw,
            )

    def _sanitize(self, raw: RawInstrument) -> dict[str, Any]:
        return sanitize_info(raw, self._config.volatile_fields)

    # ------------------------------------------------------------------
    # Fetch + aggregate
    # ------------------------------------------------------------------

    async def fetch_markets_by_type(
        self,
        market_type: Union[MarketType, str],
    ) -> list[Market]:
        """Fetch and normalize one market type (main entry point)."""
        parsed = self.check_market_type(market_type)

        raw_data = await self.fetch_raw(parsed)
        markets = self.normalize_all(raw_data, parsed)

        logger.info(f"[{self.name}] Normalized {len(markets)} {parsed.value} markets")
        return markets

    async def fetch_markets(
        self,
        market_type: Optional[Union[MarketType, str]] = None,
    ) -> list[Market]:
        """
        Fetch markets of one type, or of every supported type when omitted.

        Per-type pipelines run concurrently; the combined list is sorted
        by pair. Any failure aborts the whole call.
        """
        if market_type is not None:
            return await self.fetch_markets_by_type(market_type)

        results = await asyncio.gather(
            *(self.fetch_markets_by_type(t) for t in self.SUPPORTED_TYPES)
        )

        combined: list[Market] = []
        for markets in results:
            combined.extend(markets)

        combined = sort_markets(combined)
        ensure_unique(combined, self.name)
        return combined

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._config.timeout),
                headers=self._get_default_headers(),
            )
            self._owns_session = True
        return self._session

    def _get_default_headers(self) -> dict[str, str]:
        """Get default HTTP headers."""
        return {
            "Accept": "application/json",
            "User-Agent": self._config.user_agent,
        }

    async def _make_request(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """GET a JSON document. Raises FetchError on any non-2xx status."""
        session = await self._get_session()

        start_time = time.time()
        try:
            async with session.get(url, params=params) as response:
                latency_ms = (time.time() - start_time) * 1000

                if not 200 <= response.status < 300:
                    body = await response.text()
                    raise FetchError(
                        message=f"HTTP {response.status}",
                        source_name=self.name,
                        status_code=response.status,
                        response_body=body[:1000],
                        request_url=url,
                    )

                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    body = await response.text()
                    raise FetchError(
                        message=f"Response body is not JSON: {e}",
                        source_name=self.name,
                        status_code=response.status,
                        response_body=body[:1000],
                        request_url=url,
                        original_error=e,
                    ) from e

                logger.debug(f"[{self.name}] GET {url} completed in {latency_ms:.1f}ms")
                return data

        except aiohttp.ClientError as e:
            raise FetchError(
                message=f"Connection error: {e}",
                source_name=self.name,
                request_url=url,
                original_error=e,
            ) from e
        except asyncio.TimeoutError as e:
            raise FetchError(
                message=f"Timed out after {self._config.timeout}s",
                source_name=self.name,
                request_url=url,
                original_error=e,
            ) from e

    async def _get_list(self, url: str) -> list[RawInstrument]:
        """GET a JSON array of objects."""
        data = await self._make_request(url)
        if not isinstance(data, list):
            raise NormalizationError(
                message=f"Expected a JSON array from {url}, got {type(data).__name__}",
                source_name=self.name,
                raw_data=data,
            )
        return data

    async def close(self) -> None:
        """Close resources."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "BaseMarketSource":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def __repr__(self) -> str:
        types = ",".join(t.value for t in self.SUPPORTED_TYPES)
        return f"<{self.__class__.__name__}(name={self.name}, types={types})>"
