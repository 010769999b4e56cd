"""
Exchange Market Configuration - Static per-exchange tables.

Fee schedules, currency aliases and volatile-field lists are not provided by
the exchange APIs. They live here as immutable data and are injected into
each source at construction.

Endpoint overrides are read from environment variables:
    EXCHANGE_MARKETS_<NAME>_BASE_URL
    EXCHANGE_MARKETS_<NAME>_TIMEOUT
"""

import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from exchange_markets.exceptions import ConfigurationError
from exchange_markets.models import Fees, MarketType


ENV_PREFIX = "EXCHANGE_MARKETS"

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "exchange-markets/1.0"


@dataclass(frozen=True)
class ExchangeConfig:
    """Configuration for one exchange."""
    name: str
    display_name: str
    base_url: str
    fees: Mapping[MarketType, Fees]
    currency_aliases: Mapping[str, str] = field(default_factory=dict)
    volatile_fields: frozenset[str] = frozenset()
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    documentation_url: str = ""
    fee_url: str = ""

    def __post_init__(self) -> None:
        # Freeze the tables so a shared default can't be edited by one caller.
        object.__setattr__(self, "fees", MappingProxyType(dict(self.fees)))
        object.__setattr__(
            self, "currency_aliases", MappingProxyType(dict(self.currency_aliases))
        )
        object.__setattr__(self, "volatile_fields", frozenset(self.volatile_fields))
        if self.timeout <= 0:
            raise ConfigurationError(
                message=f"Timeout must be positive, got {self.timeout}",
                source_name=self.name,
                config_key="timeout",
            )

    def fees_for(self, market_type: MarketType) -> Fees:
        """Look up the fee schedule for a market type."""
        try:
            return self.fees[market_type]
        except KeyError:
            raise ConfigurationError(
                message=f"No fee schedule for {market_type.value}",
                source_name=self.name,
                config_key="fees",
            ) from None

    def alias(self, currency: str) -> str:
        """Map an exchange-native currency code to its canonical symbol."""
        return self.currency_aliases.get(currency, currency)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "base_url": self.base_url,
            "fees": {t.value: f.to_dict() for t, f in self.fees.items()},
            "currency_aliases": dict(self.currency_aliases),
            "volatile_fields": sorted(self.volatile_fields),
            "timeout": self.timeout,
        }


# see https://www.okex.com/pages/products/fees.html
OKEX_CONFIG = ExchangeConfig(
    name="okex",
    display_name="OKEx",
    base_url="https://www.okex.com",
    fees={
        MarketType.SPOT: Fees(maker=0.001, taker=0.0015),
        MarketType.FUTURES: Fees(maker=0.0002, taker=0.0005),
        MarketType.SWAP: Fees(maker=0.0002, taker=0.0005),
        MarketType.OPTION: Fees(maker=0.0002, taker=0.0005),
    },
    volatile_fields=frozenset({"delivery"}),
    documentation_url="https://www.okex.com/docs/en/",
    fee_url="https://www.okex.com/pages/products/fees.html",
)

WHALEEX_CONFIG = ExchangeConfig(
    name="whaleex",
    display_name="WhaleEx",
    base_url="https://api.whaleex.com",
    fees={
        MarketType.SPOT: Fees(maker=0.001, taker=0.001),
    },
    currency_aliases={"KEY": "MYKEY"},
    volatile_fields=frozenset({
        "baseVolume",
        "high",
        "low",
        "lastPrice",
        "priceChangePercent",
        "quoteVolume",
        "updatedTime",
        "weight",
        "weightChange",
        "weightVolume",
    }),
    documentation_url="https://github.com/WhaleEx/API",
    fee_url="https://whaleex.zendesk.com/hc/zh-cn/articles/360015324891",
)

DEFAULT_CONFIGS: Mapping[str, ExchangeConfig] = MappingProxyType({
    OKEX_CONFIG.name: OKEX_CONFIG,
    WHALEEX_CONFIG.name: WHALEEX_CONFIG,
})


def _env(name: str, key: str) -> Optional[str]:
    value = os.getenv(f"{ENV_PREFIX}_{name.upper()}_{key}")
    return value.strip() if value and value.strip() else None


def load_config(name: str) -> ExchangeConfig:
    """
    Get the default config for an exchange with environment overrides applied.

    Raises:
        ConfigurationError: If the exchange is unknown or an override is invalid
    """
    key = name.strip().lower()
    if key not in DEFAULT_CONFIGS:
        raise ConfigurationError(
            message=f"Unknown exchange: {name}",
            config_key="name",
        )
    config = DEFAULT_CONFIGS[key]

    overrides: dict[str, Any] = {}
    base_url = _env(key, "BASE_URL")
    if base_url:
        overrides["base_url"] = base_url.rstrip("/")

    timeout = _env(key, "TIMEOUT")
    if timeout:
        try:
            overrides["timeout"] = float(timeout)
        except ValueError as e:
            raise ConfigurationError(
                message=f"Invalid timeout: {timeout}",
                source_name=key,
                config_key="timeout",
                original_error=e,
            )

    return replace(config, **overrides) if overrides else config
