"""
Exchange Market Exceptions - Error hierarchy for market fetching and normalization.

Every fatal condition aborts the enclosing fetch-and-normalize call.
Nothing in this package swallows these errors; recovery is the caller's job.
"""

from datetime import datetime
from typing import Any, Optional


class MarketSourceError(Exception):
    """Base exception for all market source errors."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source_name = source_name
        self.original_error = original_error
        self.context = context or {}
        self.timestamp = datetime.utcnow()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "source_name": self.source_name,
            "original_error": str(self.original_error) if self.original_error else None,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        parts = [f"{self.__class__.__name__}: {self.message}"]
        if self.source_name:
            parts.append(f"[source={self.source_name}]")
        if self.original_error:
            parts.append(f"(caused by: {self.original_error})")
        return " ".join(parts)


class FetchError(MarketSourceError):
    """Transport error: non-success HTTP response or connection failure."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        request_url: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, source_name, original_error, context)
        self.status_code = status_code
        self.response_body = response_body
        self.request_url = request_url

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data.update({
            "status_code": self.status_code,
            "response_body": self.response_body,
            "request_url": self.request_url,
        })
        return data


class MarketTypeError(MarketSourceError):
    """A market type cannot be served."""

    def __init__(
        self,
        message: str,
        market_type: Any = None,
        source_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, source_name, original_error, context)
        self.market_type = market_type

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data["market_type"] = str(getattr(self.market_type, "value", self.market_type))
        return data


class UnsupportedMarketTypeError(MarketTypeError):
    """Known market type that the exchange does not offer or cannot normalize."""


class UnknownMarketTypeError(MarketTypeError):
    """Value outside Spot, Futures, Swap and Option."""


class NormalizationError(MarketSourceError):
    """Raw instrument violates an assumption of the normalization rules."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        raw_data: Optional[Any] = None,
        field_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, source_name, original_error, context)
        self.raw_data = raw_data
        self.field_name = field_name

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data.update({
            "raw_data": str(self.raw_data)[:500] if self.raw_data else None,  # Truncate
            "field_name": self.field_name,
        })
        return data


class UnhandledQuoteCurrencyError(NormalizationError):
    """Futures instrument quoted in a currency with no minimum-quantity rule."""

    def __init__(
        self,
        quote_currency: str,
        source_name: Optional[str] = None,
        raw_data: Optional[Any] = None,
    ) -> None:
        super().__init__(
            f"Unhandled quote currency: {quote_currency}",
            source_name=source_name,
            raw_data=raw_data,
            field_name="quote_currency",
        )
        self.quote_currency = quote_currency


class PairMismatchError(NormalizationError):
    """Computed pair disagrees with the pair canonicalizer."""

    def __init__(
        self,
        computed_pair: str,
        canonical_pair: str,
        instrument_id: str,
        source_name: Optional[str] = None,
        raw_data: Optional[Any] = None,
    ) -> None:
        super().__init__(
            f"Pair mismatch for {instrument_id}: computed {computed_pair}, "
            f"canonical {canonical_pair}",
            source_name=source_name,
            raw_data=raw_data,
            field_name="pair",
        )
        self.computed_pair = computed_pair
        self.canonical_pair = canonical_pair
        self.instrument_id = instrument_id

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data.update({
            "computed_pair": self.computed_pair,
            "canonical_pair": self.canonical_pair,
            "instrument_id": self.instrument_id,
        })
        return data


class DuplicateMarketError(NormalizationError):
    """Two markets share (exchange, type, id)."""

    def __init__(
        self,
        key: tuple[str, str, str],
        source_name: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"Duplicate market: {key}",
            source_name=source_name,
            field_name="id",
        )
        self.key = key


class ConfigurationError(MarketSourceError):
    """Configuration error for a market source or the registry."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        config_key: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, source_name, original_error, context)
        self.config_key = config_key

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data["config_key"] = self.config_key
        return data
