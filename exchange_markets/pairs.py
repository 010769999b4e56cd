"""
Pair canonicalization - maps exchange-native instrument ids to BASE_QUOTE.

Sources use this only as a cross-check: the pair they build from base/quote
fields must agree with what the canonicalizer derives from the raw id.
Any callable with the `normalize_pair` signature can be injected instead.
"""

from typing import Callable

from exchange_markets.config import WHALEEX_CONFIG


PairCanonicalizer = Callable[[str, str], str]

# Checked longest first so "USDT" wins over a hypothetical "USD" suffix.
WHALEEX_QUOTES = ("USDT", "USDC", "EOS", "BTC", "ETH")


def _okex_pair(native_id: str) -> str:
    # BTC-USDT, BTC-USD-200925, BTC-USDT-SWAP
    parts = native_id.split("-")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Unrecognized OKEx instrument id: {native_id}")
    return f"{parts[0]}_{parts[1]}".upper()


def _whaleex_pair(native_id: str) -> str:
    # Default alias table, independent of any config injected into a source.
    symbol = native_id.upper()
    for quote in sorted(WHALEEX_QUOTES, key=len, reverse=True):
        if symbol.endswith(quote) and len(symbol) > len(quote):
            base = symbol[: -len(quote)]
            return f"{WHALEEX_CONFIG.alias(base)}_{quote}"
    raise ValueError(f"Unrecognized WhaleEx symbol: {native_id}")


_CANONICALIZERS: dict[str, Callable[[str], str]] = {
    "okex": _okex_pair,
    "whaleex": _whaleex_pair,
}


def normalize_pair(native_id: str, exchange: str) -> str:
    """
    Canonical BASE_QUOTE pair for an exchange-native instrument id.

    Raises:
        ValueError: If the exchange is unknown or the id can't be split
    """
    key = exchange.strip().lower()
    if key not in _CANONICALIZERS:
        raise ValueError(f"No pair canonicalizer for exchange: {exchange}")
    return _CANONICALIZERS[key](native_id.strip())
