"""
Providers package - Exchange market source implementations.
"""

from exchange_markets.providers.okex import OKExMarketSource
from exchange_markets.providers.whaleex import WhaleExMarketSource


__all__ = [
    "OKExMarketSource",
    "WhaleExMarketSource",
]
