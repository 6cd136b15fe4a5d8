"""
Exchange clients and portfolio valuation
"""

from .client import BinanceClient
from .signature import SignatureProvider
from .market_data import MarketDataClient
from .account import AccountClient
from .valuator import build_portfolio, value_portfolio

__all__ = [
    "BinanceClient",
    "SignatureProvider",
    "MarketDataClient",
    "AccountClient",
    "build_portfolio",
    "value_portfolio",
]
