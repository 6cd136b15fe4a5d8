"""Portfolio session orchestration"""

from .session import PortfolioSession

__all__ = ["PortfolioSession"]
