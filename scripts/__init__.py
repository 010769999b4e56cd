"""
Scripts Package.

Operational scripts around the exchange_markets library.

Scripts:
- fetch_markets: Fetch and print one exchange's normalized markets
"""

# Scripts are meant to be run directly, not imported
