"""
Shared fixtures for exchange market tests.

The HTTP layer is replaced by FakeSession, which serves canned JSON per URL
and records every GET.
"""

from typing import Any

import pytest

from fakes import OKEX_URL, WHALEEX_URL, FakeResponse, FakeSession


# ============================================================
# OKEX PAYLOADS
# ============================================================

@pytest.fixture
def okex_spot_raw() -> list[dict[str, Any]]:
    return [
        {
            "base_currency": "ETH",
            "category": "1",
            "instrument_id": "ETH-USDT",
            "min_size": "0.001",
            "quote_currency": "USDT",
            "size_increment": "0.000001",
            "tick_size": "0.01",
        },
        {
            "base_currency": "BTC",
            "category": "1",
            "instrument_id": "BTC-USDT",
            "min_size": "1",
            "quote_currency": "USDT",
            "size_increment": "0.001",
            "tick_size": "0.01",
        },
    ]


@pytest.fixture
def okex_futures_raw() -> list[dict[str, Any]]:
    return [
        {
            "instrument_id": "BTC-USDT-201225",
            "underlying": "BTC-USDT",
            "base_currency": "BTC",
            "quote_currency": "USDT",
            "settlement_currency": "USDT",
            "contract_val": "100",
            "listing": "2020-06-12",
            "delivery": "2020-12-25",
            "tick_size": "0.1",
            "trade_increment": "1",
            "alias": "quarter",
            "is_inverse": "false",
            "contract_val_currency": "BTC",
        },
        {
            "instrument_id": "ETH-USDT-201225",
            "underlying": "ETH-USDT",
            "base_currency": "ETH",
            "quote_currency": "USDT",
            "settlement_currency": "USDT",
            "contract_val": "0.1",
            "listing": "2020-06-12",
            "delivery": "2020-12-25",
            "tick_size": "0.01",
            "trade_increment": "1",
            "alias": "quarter",
            "is_inverse": "false",
            "contract_val_currency": "ETH",
        },
        {
            "instrument_id": "BTC-USD-201225",
            "underlying": "BTC-USD",
            "base_currency": "BTC",
            "quote_currency": "USD",
            "settlement_currency": "BTC",
            "contract_val": "100",
            "listing": "2020-06-12",
            "delivery": "2020-12-25",
            "tick_size": "0.01",
            "trade_increment": "1",
            "alias": "quarter",
            "is_inverse": "true",
            "contract_val_currency": "USD",
        },
    ]


@pytest.fixture
def okex_swap_raw() -> list[dict[str, Any]]:
    return [
        {
            "instrument_id": "BTC-USDT-SWAP",
            "underlying_index": "BTC",
            "quote_currency": "USDT",
            "base_currency": "BTC",
            "coin": "USDT",
            "contract_val": "0.01",
            "listing": "2019-12-11T07:47:03.000Z",
            "delivery": "2020-06-12T08:00:00.000Z",
            "size_increment": "1",
            "tick_size": "0.1",
        },
    ]


@pytest.fixture
def okex_session(okex_spot_raw, okex_futures_raw, okex_swap_raw) -> FakeSession:
    return FakeSession({
        OKEX_URL.format("spot"): FakeResponse(payload=okex_spot_raw),
        OKEX_URL.format("futures"): FakeResponse(payload=okex_futures_raw),
        OKEX_URL.format("swap"): FakeResponse(payload=okex_swap_raw),
    })


# ============================================================
# WHALEEX PAYLOADS
# ============================================================

@pytest.fixture
def whaleex_symbols_raw() -> list[dict[str, Any]]:
    return [
        {
            "name": "KEYEOS",
            "baseCurrency": "KEY",
            "basePrecision": 0,
            "quoteCurrency": "EOS",
            "quotePrecision": 4,
            "precision": 6,
            "enable": True,
            "status": "ON",
            "baseContract": "mykeysupport",
            "quoteContract": "",
            "tickSize": "0.000001",
            "lotSize": "1",
            "minQty": "100",
            "minNotional": "0.1",
            "lastPrice": "0.000351",
            "high": "0.000372",
            "low": "0.000340",
            "baseVolume": "1523888",
            "quoteVolume": "539.0231",
            "priceChangePercent": "-2.1",
            "updatedTime": 1590000000000,
            "weight": 10,
            "weightChange": 0,
            "weightVolume": 0,
        },
        {
            "name": "EOSUSDT",
            "baseCurrency": "EOS",
            "basePrecision": 4,
            "quoteCurrency": "USDT",
            "quotePrecision": 4,
            "precision": 4,
            "enable": True,
            "status": "OFF",
            "baseContract": "eosio.token",
            "quoteContract": "",
            "tickSize": "0.0001",
            "lotSize": "0.0001",
            "minQty": "0.1",
            "minNotional": "1",
            "lastPrice": "2.6102",
            "high": "2.7",
            "low": "2.5",
            "baseVolume": "1000",
            "quoteVolume": "2610",
            "priceChangePercent": "0.4",
            "updatedTime": 1590000000000,
            "weight": 20,
            "weightChange": 1,
            "weightVolume": 5,
        },
    ]


@pytest.fixture
def whaleex_currencies_raw() -> list[dict[str, Any]]:
    return [
        {
            "shortName": "EOS",
            "token": "EOS",
            "contract": "eosio.token",
            "quotable": True,
            "visible": True,
            "status": "ON",
        },
        {
            "shortName": "USDT",
            "token": "USDT",
            "contract": "tethertether",
            "quotable": True,
            "visible": False,
            "status": "ON",
        },
        {
            "shortName": "KEY",
            "token": "KEY",
            "contract": "mykeysupport",
            "quotable": False,
            "visible": True,
            "status": "ON",
        },
    ]


@pytest.fixture
def whaleex_session(whaleex_symbols_raw, whaleex_currencies_raw) -> FakeSession:
    return FakeSession({
        WHALEEX_URL.format("symbol"): FakeResponse(payload=whaleex_symbols_raw),
        WHALEEX_URL.format("currency"): FakeResponse(payload=whaleex_currencies_raw),
    })
