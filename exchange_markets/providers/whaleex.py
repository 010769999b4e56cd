"""
WhaleEx Market Source - Public BUSINESS API adapter.

Endpoints used:
- /BUSINESS/api/public/symbol   - Spot pair listing
- /BUSINESS/api/public/currency - Currency metadata (quote contract lookup)

WhaleEx only lists spot pairs.
"""

import logging
from typing import Any, Optional

import aiohttp

from exchange_markets.base import BaseMarketSource, NormalizeRule, RawInstrument
from exchange_markets.config import WHALEEX_CONFIG, ExchangeConfig
from exchange_markets.models import Market, MarketType, MinQuantity, Precision
from exchange_markets.pairs import PairCanonicalizer, normalize_pair
from exchange_markets.utils import calc_precision, to_float


logger = logging.getLogger(__name__)


def build_contract_map(currencies: list[dict[str, Any]]) -> dict[str, str]:
    """Quotable, visible and enabled currencies keyed by short name."""
    return {
        c["shortName"]: c["contract"]
        for c in currencies
        if c.get("quotable") and c.get("visible") and c.get("status") == "ON"
        and c.get("shortName") and c.get("contract")
    }


def populate_quote_contracts(
    pair_infos: list[RawInstrument],
    contracts: dict[str, str],
) -> list[RawInstrument]:
    """
    Return copies of pair_infos with quoteContract filled from contracts.

    A quoteContract already on the listing is kept. When neither source has
    one the key is left out.
    """
    result = []
    for pair_info in pair_infos:
        populated = dict(pair_info)
        contract = populated.get("quoteContract") or contracts.get(populated.get("quoteCurrency", ""))
        if contract:
            populated["quoteContract"] = contract
        else:
            populated.pop("quoteContract", None)
            logger.debug(f"No quote contract for {populated.get('name')}")
        result.append(populated)
    return result


class WhaleExMarketSource(BaseMarketSource):
    """WhaleEx spot pair source."""

    SUPPORTED_TYPES = (MarketType.SPOT,)

    def __init__(
        self,
        config: ExchangeConfig = WHALEEX_CONFIG,
        session: Optional[aiohttp.ClientSession] = None,
        canonicalizer: Optional[PairCanonicalizer] = normalize_pair,
    ) -> None:
        super().__init__(config, session, canonicalizer)

    async def fetch_raw(self, market_type: MarketType) -> list[RawInstrument]:
        """Fetch spot pairs joined with their quote-currency contracts."""
        base = f"{self._config.base_url}/BUSINESS/api/public"
        pair_infos = await self._get_list(f"{base}/symbol")
        currencies = await self._get_list(f"{base}/currency")
        return populate_quote_contracts(pair_infos, build_contract_map(currencies))

    def rules(self) -> dict[MarketType, NormalizeRule]:
        return {MarketType.SPOT: self._normalize_spot}

    def _normalize_spot(self, raw: RawInstrument, market_type: MarketType) -> Market:
        base = self._config.alias(raw["baseCurrency"])
        quote = self._config.alias(raw["quoteCurrency"])
        return Market(
            exchange=self._config.display_name,
            type=market_type,
            id=raw["name"],
            pair=f"{base}_{quote}",
            base=base,
            quote=quote,
            base_id=base,
            quote_id=quote,
            active=bool(raw["enable"]) and raw["status"] == "ON",
            fees=self._config.fees_for(market_type),
            precision=Precision(
                price=calc_precision(raw["tickSize"]),
                base=int(raw["basePrecision"]),
                quote=int(raw["quotePrecision"]),
            ),
            min_quantity=MinQuantity(
                base=to_float(raw["minQty"]),
                quote=to_float(raw["minNotional"]),
            ),
            info=self._sanitize(raw),
        )
