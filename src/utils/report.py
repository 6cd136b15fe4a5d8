"""
Tabular rendering of prices and portfolios for terminal output
"""

from typing import Mapping, Optional, Sequence, Union

import pandas as pd

from src.core.enums import SortField
from src.core.models import Portfolio
from src.trading.allocation import allocation_slices, sort_assets

PORTFOLIO_COLUMNS = ["coin", "amount", "value", "allocation_pct", "price_source"]


def portfolio_to_frame(
    portfolio: Portfolio,
    sort_by: Union[SortField, str] = SortField.VALUE,
    descending: bool = True
) -> pd.DataFrame:
    """One row per asset with its share of the total"""
    assets = sort_assets(portfolio.assets, sort_by, descending)
    if not assets:
        return pd.DataFrame(columns=PORTFOLIO_COLUMNS)

    df = pd.DataFrame([a.to_dict() for a in assets])
    total = portfolio.total_value
    df["allocation_pct"] = df["value"] / total * 100 if total > 0 else 0.0
    return df[PORTFOLIO_COLUMNS].reset_index(drop=True)


def allocation_to_frame(portfolio: Portfolio, max_slices: int = 5) -> pd.DataFrame:
    rows = [
        {"name": s.name, "value": s.value, "percentage": s.percentage}
        for s in allocation_slices(portfolio, max_slices)
    ]
    return pd.DataFrame(rows, columns=["name", "value", "percentage"])


def prices_to_frame(prices: Mapping[str, float], symbols: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Price table in *symbols* order; missing prices show as NaN (unknown)"""
    symbols = list(symbols) if symbols is not None else sorted(prices)
    return pd.DataFrame(
        {"symbol": symbols, "price": [prices.get(s) for s in symbols]},
        columns=["symbol", "price"]
    ).astype({"price": "float64"})


def format_portfolio(portfolio: Portfolio, sort_by: Union[SortField, str] = SortField.VALUE) -> str:
    if portfolio.is_empty():
        return "No assets found in your portfolio"

    df = portfolio_to_frame(portfolio, sort_by)
    table = df.to_string(
        index=False,
        formatters={
            "amount": "{:.8g}".format,
            "value": "${:,.2f}".format,
            "allocation_pct": "{:.2f}%".format,
        }
    )
    return f"{table}\n\nTotal Portfolio Value: ${portfolio.total_value:,.2f}"


def format_prices(prices: Mapping[str, float], symbols: Optional[Sequence[str]] = None) -> str:
    if not prices:
        return "Unable to load market data"
    df = prices_to_frame(prices, symbols)
    return df.to_string(index=False, na_rep="n/a", float_format="{:,.4f}".format)
