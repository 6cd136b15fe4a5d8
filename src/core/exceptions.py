"""
Custom exceptions for the portfolio tracker
"""

from typing import Optional


class PortfolioTrackerError(Exception):
    """Base exception for portfolio tracker errors"""
    pass


class SignatureError(PortfolioTrackerError):
    """Raised when a request signature cannot be produced"""
    pass


class APIError(PortfolioTrackerError):
    """Raised when exchange API calls fail"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class PriceFetchError(APIError):
    """Raised when price endpoints fail or return unparseable data"""
    pass


class AccountFetchError(APIError):
    """Raised when the authenticated account call fails"""
    pass


class ValidationError(PortfolioTrackerError):
    """Raised when validation fails"""
    pass


class ConfigurationError(PortfolioTrackerError):
    """Raised when configuration is invalid"""
    pass
