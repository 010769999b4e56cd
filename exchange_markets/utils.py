"""
Shared helpers for precision derivation, payload sanitization and ordering.
"""

import copy
import math
from typing import Any, Iterable, Union

from exchange_markets.exceptions import DuplicateMarketError
from exchange_markets.models import Market


def to_float(value: Union[str, int, float]) -> float:
    """Parse an exchange numeric field (usually a string)."""
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    result = float(value)
    if math.isnan(result) or math.isinf(result):
        raise ValueError(f"Expected a finite number, got {value!r}")
    return result


def calc_precision(step: Union[str, int, float]) -> int:
    """
    Number of decimal digits implied by a tick or step size.

    Computed as round(-log10(step)) and clamped at zero, so steps of 1 or
    more (e.g. 100 contracts) give precision 0.

    Examples:
        calc_precision("0.01")  -> 2
        calc_precision("0.005") -> 2
        calc_precision("100")   -> 0
    """
    value = to_float(step)
    if value <= 0:
        raise ValueError(f"Step size must be positive, got {step!r}")
    return max(0, int(round(-math.log10(value))))


def sanitize_info(raw: dict[str, Any], volatile_fields: Iterable[str]) -> dict[str, Any]:
    """Deep copy of a raw instrument without its volatile keys."""
    excluded = set(volatile_fields)
    return {
        key: copy.deepcopy(value)
        for key, value in raw.items()
        if key not in excluded
    }


def sort_markets(markets: Iterable[Market]) -> list[Market]:
    """Sort by pair; ties by type order, then id."""
    return sorted(markets, key=lambda m: (m.pair, m.type.order, m.id))


def ensure_unique(markets: Iterable[Market], source_name: str = "") -> None:
    """Raise DuplicateMarketError if two markets share (exchange, type, id)."""
    seen: set[tuple[str, str, str]] = set()
    for market in markets:
        if market.key in seen:
            raise DuplicateMarketError(market.key, source_name=source_name or market.exchange)
        seen.add(market.key)
