"""
Exchange Market Models - Canonical market record and supporting types.

Every provider MUST normalize its instruments to `Market`.
No downstream module depends on exchange-specific field names.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from exchange_markets.exceptions import UnknownMarketTypeError


# Marks a precision or minimum quantity that cannot be derived yet.
UNKNOWN = -1


class MarketType(Enum):
    """Instrument categories."""
    SPOT = "Spot"
    FUTURES = "Futures"
    SWAP = "Swap"
    OPTION = "Option"

    @classmethod
    def parse(cls, value: Union["MarketType", str]) -> "MarketType":
        """Accept a MarketType or its name/value, case-insensitive."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        raise UnknownMarketTypeError(
            message=f"Unknown market type: {value!r}",
            market_type=value,
        )

    @property
    def order(self) -> int:
        """Fixed aggregation order."""
        return list(MarketType).index(self)


@dataclass(frozen=True)
class Fees:
    """Fractional maker/taker fee rates."""
    maker: float
    taker: float

    def to_dict(self) -> dict[str, float]:
        return {"maker": self.maker, "taker": self.taker}


@dataclass(frozen=True)
class Precision:
    """Decimal digits for price and quantities; UNKNOWN means not derivable."""
    price: int
    base: int
    quote: Optional[int] = None

    def to_dict(self) -> dict[str, int]:
        data = {"price": self.price, "base": self.base}
        if self.quote is not None:
            data["quote"] = self.quote
        return data


@dataclass(frozen=True)
class MinQuantity:
    """Smallest tradable size in base and, optionally, quote units."""
    base: float
    quote: Optional[float] = None

    def to_dict(self) -> dict[str, float]:
        data = {"base": self.base}
        if self.quote is not None:
            data["quote"] = self.quote
        return data


@dataclass(frozen=True)
class Market:
    """
    Canonical market record - STRICT schema.

    Built fresh from raw JSON on every fetch and never mutated afterwards.
    `info` is a sanitized copy of the raw instrument, not the payload itself.
    """
    exchange: str
    type: MarketType
    id: str
    pair: str
    base: str
    quote: str
    base_id: str
    quote_id: str
    active: bool
    fees: Fees
    precision: Precision
    min_quantity: MinQuantity
    info: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity within one result list."""
        return (self.exchange, self.type.value, self.id)

    def has_known_precision(self) -> bool:
        """Check if base precision was derivable."""
        return self.precision.base != UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "exchange": self.exchange,
            "type": self.type.value,
            "id": self.id,
            "pair": self.pair,
            "base": self.base,
            "quote": self.quote,
            "base_id": self.base_id,
            "quote_id": self.quote_id,
            "active": self.active,
            "fees": self.fees.to_dict(),
            "precision": self.precision.to_dict(),
            "min_quantity": self.min_quantity.to_dict(),
            "info": dict(self.info),
        }


@dataclass
class SourceMetadata:
    """Metadata about a market source."""
    name: str
    display_name: str
    supported_types: list[MarketType]
    base_url: str = ""
    documentation_url: str = ""
    fee_url: str = ""

    def supports(self, market_type: MarketType) -> bool:
        """Check if market type is offered."""
        return market_type in self.supported_types

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "display_name": self.display_name,
            "supported_types": [t.value for t in self.supported_types],
            "base_url": self.base_url,
            "documentation_url": self.documentation_url,
            "fee_url": self.fee_url,
        }
