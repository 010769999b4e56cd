"""
OKEx Market Source Tests.

TEST CATEGORIES:
- Spot, Futures and Swap normalization rules
- Option / unknown type rejection
- Fetch + aggregation through a fake HTTP session
"""

import math

import pytest

from exchange_markets import (
    UNKNOWN,
    FetchError,
    MarketType,
    NormalizationError,
    OKExMarketSource,
    PairMismatchError,
    UnhandledQuoteCurrencyError,
    UnknownMarketTypeError,
    UnsupportedMarketTypeError,
)
from fakes import OKEX_URL, FakeResponse, FakeSession


@pytest.fixture
def source() -> OKExMarketSource:
    return OKExMarketSource()


# ============================================================
# SPOT
# ============================================================

class TestSpotNormalization:
    """Tests for OKEx spot instruments."""

    def test_reference_instrument(self, source, okex_spot_raw):
        market = source.normalize(okex_spot_raw[1], MarketType.SPOT)

        assert market.exchange == "OKEx"
        assert market.type == MarketType.SPOT
        assert market.id == "BTC-USDT"
        assert market.pair == "BTC_USDT"
        assert market.base == "BTC"
        assert market.quote == "USDT"
        assert market.base_id == "BTC"
        assert market.quote_id == "USDT"
        assert market.active is True
        assert market.precision.price == 2
        assert market.precision.base == 3
        assert market.precision.quote is None
        assert market.min_quantity.base == 1
        assert market.min_quantity.quote is None

    def test_fees_from_static_table(self, source, okex_spot_raw):
        market = source.normalize(okex_spot_raw[0], MarketType.SPOT)

        assert market.fees.maker == 0.001
        assert market.fees.taker == 0.0015

    def test_precision_follows_log10_of_steps(self, source, okex_spot_raw):
        for raw in okex_spot_raw:
            market = source.normalize(raw, MarketType.SPOT)

            assert market.precision.price == round(-math.log10(float(raw["tick_size"])))
            assert market.precision.base == round(-math.log10(float(raw["size_increment"])))

    def test_accepts_string_market_type(self, source, okex_spot_raw):
        market = source.normalize(okex_spot_raw[1], "spot")

        assert market.type == MarketType.SPOT

    def test_info_is_a_copy(self, source, okex_spot_raw):
        raw = okex_spot_raw[1]
        market = source.normalize(raw, MarketType.SPOT)

        assert market.info == raw
        assert market.info is not raw

    def test_missing_field_raises_normalization_error(self, source, okex_spot_raw):
        raw = dict(okex_spot_raw[1])
        del raw["min_size"]

        with pytest.raises(NormalizationError) as exc_info:
            source.normalize(raw, MarketType.SPOT)

        assert isinstance(exc_info.value.original_error, KeyError)
        assert exc_info.value.raw_data == raw

    def test_unparsable_number_raises_normalization_error(self, source, okex_spot_raw):
        raw = dict(okex_spot_raw[1], tick_size="n/a")

        with pytest.raises(NormalizationError):
            source.normalize(raw, MarketType.SPOT)


# ============================================================
# FUTURES
# ============================================================

class TestFuturesNormalization:
    """Tests for OKEx futures instruments."""

    def test_usdt_min_quantity_is_increment_times_contract_value(self, source, okex_futures_raw):
        market = source.normalize(okex_futures_raw[0], MarketType.FUTURES)

        assert market.min_quantity.base == 100
        assert market.precision.base == 0
        assert market.precision.price == 1
        assert market.pair == "BTC_USDT"

    def test_usdt_fractional_contract_value(self, source, okex_futures_raw):
        market = source.normalize(okex_futures_raw[1], MarketType.FUTURES)

        assert market.min_quantity.base == pytest.approx(0.1)
        assert market.precision.base == 1

    def test_usd_quoted_is_marked_unknown(self, source, okex_futures_raw):
        market = source.normalize(okex_futures_raw[2], MarketType.FUTURES)

        assert market.pair == "BTC_USD"
        assert market.precision.base == UNKNOWN
        assert market.min_quantity.base == UNKNOWN
        assert market.precision.price == 2
        assert not market.has_known_precision()

    def test_other_quote_currency_raises(self, source, okex_futures_raw):
        raw = dict(
            okex_futures_raw[0],
            instrument_id="BTC-EUR-201225",
            quote_currency="EUR",
        )

        with pytest.raises(UnhandledQuoteCurrencyError) as exc_info:
            source.normalize(raw, MarketType.FUTURES)

        assert exc_info.value.quote_currency == "EUR"
        assert isinstance(exc_info.value, NormalizationError)

    def test_delivery_is_stripped(self, source, okex_futures_raw):
        market = source.normalize(okex_futures_raw[0], MarketType.FUTURES)

        assert "delivery" not in market.info
        assert market.info["listing"] == "2020-06-12"
        assert "delivery" in okex_futures_raw[0]

    def test_futures_fees(self, source, okex_futures_raw):
        market = source.normalize(okex_futures_raw[0], MarketType.FUTURES)

        assert market.fees.maker == 0.0002
        assert market.fees.taker == 0.0005


# ============================================================
# SWAP / OPTION / UNKNOWN
# ============================================================

class TestOtherTypes:
    """Tests for partially supported and unsupported types."""

    def test_swap_uses_sentinel(self, source, okex_swap_raw):
        market = source.normalize(okex_swap_raw[0], MarketType.SWAP)

        assert market.precision.base == -1
        assert market.min_quantity.base == -1
        assert market.precision.price == 1
        assert market.pair == "BTC_USDT"
        assert market.id == "BTC-USDT-SWAP"
        assert market.active is True
        assert "delivery" not in market.info

    def test_option_normalize_rejected(self, source):
        raw = {
            "instrument_id": "BTC-USD-201225-12000-C",
            "base_currency": "BTC",
            "quote_currency": "USD",
            "tick_size": "0.0005",
        }

        with pytest.raises(UnsupportedMarketTypeError):
            source.normalize(raw, MarketType.OPTION)

    def test_unknown_type_rejected(self, source, okex_spot_raw):
        with pytest.raises(UnknownMarketTypeError):
            source.normalize(okex_spot_raw[0], "Perpetual")

    def test_pair_mismatch_surfaces(self, okex_spot_raw):
        source = OKExMarketSource(canonicalizer=lambda native_id, exchange: "XBT_USDT")

        with pytest.raises(PairMismatchError) as exc_info:
            source.normalize(okex_spot_raw[1], MarketType.SPOT)

        assert exc_info.value.computed_pair == "BTC_USDT"
        assert exc_info.value.canonical_pair == "XBT_USDT"

    def test_canonicalizer_can_be_disabled(self, okex_spot_raw):
        source = OKExMarketSource(canonicalizer=None)

        market = source.normalize(okex_spot_raw[1], MarketType.SPOT)

        assert market.pair == "BTC_USDT"


# ============================================================
# FETCH + AGGREGATE
# ============================================================

class TestFetchMarkets:
    """Tests for fetching through the HTTP layer."""

    @pytest.mark.asyncio
    async def test_fetch_by_type_sorted_by_pair(self, okex_session):
        source = OKExMarketSource(session=okex_session)

        markets = await source.fetch_markets_by_type(MarketType.SPOT)

        assert [m.pair for m in markets] == ["BTC_USDT", "ETH_USDT"]
        assert okex_session.calls == [OKEX_URL.format("spot")]

    @pytest.mark.asyncio
    async def test_fetch_all_types(self, okex_session):
        source = OKExMarketSource(session=okex_session)

        markets = await source.fetch_markets()

        assert [(m.pair, m.type) for m in markets] == [
            ("BTC_USD", MarketType.FUTURES),
            ("BTC_USDT", MarketType.SPOT),
            ("BTC_USDT", MarketType.FUTURES),
            ("BTC_USDT", MarketType.SWAP),
            ("ETH_USDT", MarketType.SPOT),
            ("ETH_USDT", MarketType.FUTURES),
        ]
        assert sorted(okex_session.calls) == sorted(
            OKEX_URL.format(t) for t in ("spot", "futures", "swap")
        )

    @pytest.mark.asyncio
    async def test_fetch_all_has_unique_keys(self, okex_session):
        source = OKExMarketSource(session=okex_session)

        markets = await source.fetch_markets()

        keys = [m.key for m in markets]
        assert len(keys) == len(set(keys))
        assert [m.pair for m in markets] == sorted(m.pair for m in markets)

    @pytest.mark.asyncio
    async def test_option_fetch_rejected_without_request(self, okex_session):
        source = OKExMarketSource(session=okex_session)

        with pytest.raises(UnsupportedMarketTypeError):
            await source.fetch_markets(MarketType.OPTION)

        assert okex_session.calls == []

    @pytest.mark.asyncio
    async def test_unknown_type_fetch_rejected(self, okex_session):
        source = OKExMarketSource(session=okex_session)

        with pytest.raises(UnknownMarketTypeError):
            await source.fetch_markets_by_type("Index")

        assert okex_session.calls == []

    @pytest.mark.asyncio
    async def test_failed_type_aborts_aggregation(self, okex_spot_raw, okex_swap_raw):
        session = FakeSession({
            OKEX_URL.format("spot"): FakeResponse(payload=okex_spot_raw),
            OKEX_URL.format("futures"): FakeResponse(status=503, text="maintenance"),
            OKEX_URL.format("swap"): FakeResponse(payload=okex_swap_raw),
        })
        source = OKExMarketSource(session=session)

        with pytest.raises(FetchError) as exc_info:
            await source.fetch_markets()

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_bad_instrument_aborts_listing(self, okex_spot_raw):
        okex_spot_raw.append({"instrument_id": "BROKEN"})
        session = FakeSession({OKEX_URL.format("spot"): FakeResponse(payload=okex_spot_raw)})
        source = OKExMarketSource(session=session)

        with pytest.raises(NormalizationError):
            await source.fetch_markets_by_type(MarketType.SPOT)

    @pytest.mark.asyncio
    async def test_each_call_fetches_fresh(self, okex_session):
        source = OKExMarketSource(session=okex_session)

        first = await source.fetch_markets_by_type(MarketType.SPOT)
        second = await source.fetch_markets_by_type(MarketType.SPOT)

        assert first == second
        assert first[0] is not second[0]
        assert len(okex_session.calls) == 2
