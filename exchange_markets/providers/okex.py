"""
OKEx Market Source - Public v3 instruments API adapter.

Endpoints used:
- /api/spot/v3/instruments
- /api/futures/v3/instruments
- /api/swap/v3/instruments

No authentication required.
"""

import logging
from typing import Optional

import aiohttp

from exchange_markets.base import BaseMarketSource, NormalizeRule, RawInstrument
from exchange_markets.config import OKEX_CONFIG, ExchangeConfig
from exchange_markets.exceptions import UnhandledQuoteCurrencyError
from exchange_markets.models import (
    UNKNOWN,
    Market,
    MarketType,
    MinQuantity,
    Precision,
)
from exchange_markets.pairs import PairCanonicalizer, normalize_pair
from exchange_markets.utils import calc_precision, to_float


logger = logging.getLogger(__name__)


class OKExMarketSource(BaseMarketSource):
    """
    OKEx instruments source.

    Raw instrument fields (v3):
        instrument_id, base_currency, quote_currency, tick_size,
        size_increment, min_size (spot), trade_increment and
        contract_val (futures/swap), delivery (futures)
    """

    SUPPORTED_TYPES = (MarketType.SPOT, MarketType.FUTURES, MarketType.SWAP)

    # Futures settled in this currency have a contract-size rule.
    LINEAR_QUOTE = "USDT"
    # Coin-margined futures: listed, but quantities are not derivable yet.
    INVERSE_QUOTE = "USD"

    def __init__(
        self,
        config: ExchangeConfig = OKEX_CONFIG,
        session: Optional[aiohttp.ClientSession] = None,
        canonicalizer: Optional[PairCanonicalizer] = normalize_pair,
    ) -> None:
        super().__init__(config, session, canonicalizer)

    def _instruments_url(self, market_type: MarketType) -> str:
        return f"{self._config.base_url}/api/{market_type.value.lower()}/v3/instruments"

    async def fetch_raw(self, market_type: MarketType) -> list[RawInstrument]:
        """Fetch the instrument listing for one market type."""
        return await self._get_list(self._instruments_url(market_type))

    def rules(self) -> dict[MarketType, NormalizeRule]:
        return {
            MarketType.SPOT: self._normalize_spot,
            MarketType.FUTURES: self._normalize_futures,
            MarketType.SWAP: self._normalize_swap,
        }

    def _build(
        self,
        raw: RawInstrument,
        market_type: MarketType,
        base_precision: int,
        min_base: float,
    ) -> Market:
        base = self._config.alias(raw["base_currency"])
        quote = self._config.alias(raw["quote_currency"])
        return Market(
            exchange=self._config.display_name,
            type=market_type,
            id=raw["instrument_id"],
            pair=f"{base}_{quote}",
            base=base,
            quote=quote,
            base_id=base,
            quote_id=quote,
            active=True,
            fees=self._config.fees_for(market_type),
            precision=Precision(
                price=calc_precision(raw["tick_size"]),
                base=base_precision,
            ),
            min_quantity=MinQuantity(base=min_base),
            info=self._sanitize(raw),
        )

    def _normalize_spot(self, raw: RawInstrument, market_type: MarketType) -> Market:
        return self._build(
            raw,
            market_type,
            base_precision=calc_precision(raw["size_increment"]),
            min_base=to_float(raw["min_size"]),
        )

    def _normalize_futures(self, raw: RawInstrument, market_type: MarketType) -> Market:
        """
        Futures trade in contracts; one contract is contract_val base units.

        USDT-quoted: min quantity = trade_increment * contract_val.
        USD-quoted: not derivable yet, UNKNOWN sentinel.
        """
        quote = raw["quote_currency"]
        if quote == self.LINEAR_QUOTE:
            min_base = to_float(raw["trade_increment"]) * to_float(raw["contract_val"])
            return self._build(
                raw,
                market_type,
                base_precision=calc_precision(min_base),
                min_base=min_base,
            )
        if quote == self.INVERSE_QUOTE:
            logger.debug(f"[{self.name}] No quantity rule for {raw['instrument_id']}")
            return self._build(raw, market_type, base_precision=UNKNOWN, min_base=float(UNKNOWN))
        raise UnhandledQuoteCurrencyError(quote, source_name=self.name, raw_data=raw)

    def _normalize_swap(self, raw: RawInstrument, market_type: MarketType) -> Market:
        # Listing only; contract sizing for swaps isn't mapped.
        return self._build(raw, market_type, base_precision=UNKNOWN, min_base=float(UNKNOWN))
