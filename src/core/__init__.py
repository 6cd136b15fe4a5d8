"""
Core models, enums, and exceptions
"""

from .models import (
    Credentials,
    BalanceRecord,
    AccountSnapshot,
    ValuedAsset,
    Portfolio,
    ApiResult,
    DashboardView,
    PriceMap
)

from .enums import (
    SessionState,
    RefreshKind,
    PriceSourceKind,
    SortField
)

from .exceptions import (
    PortfolioTrackerError,
    SignatureError,
    APIError,
    PriceFetchError,
    AccountFetchError,
    ValidationError,
    ConfigurationError
)

__all__ = [
    "Credentials",
    "BalanceRecord",
    "AccountSnapshot",
    "ValuedAsset",
    "Portfolio",
    "ApiResult",
    "DashboardView",
    "PriceMap",
    "SessionState",
    "RefreshKind",
    "PriceSourceKind",
    "SortField",
    "PortfolioTrackerError",
    "SignatureError",
    "APIError",
    "PriceFetchError",
    "AccountFetchError",
    "ValidationError",
    "ConfigurationError"
]
