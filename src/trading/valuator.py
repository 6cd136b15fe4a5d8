"""
Portfolio valuation: balances + price map -> ranked, valued assets.

Everything here is pure. No network access, no clock reads, no shared state,
so the whole pipeline can be tested from literals.
"""

import hashlib
import math
from typing import Iterable, List, Mapping, Optional, Tuple

from src.core.enums import (
    BRIDGE_ASSET,
    COIN_COLORS,
    DIRECT_PRICE_SOURCE,
    DUST_THRESHOLD,
    FALLBACK_QUOTE_ASSET,
    QUOTE_ASSET,
    PriceSourceKind,
)
from src.core.models import AccountSnapshot, BalanceRecord, Portfolio, ValuedAsset


def coin_color(coin: str) -> str:
    """Display colour for *coin*: a fixed one for majors, else derived from the symbol"""
    if coin in COIN_COLORS:
        return COIN_COLORS[coin]
    digest = hashlib.sha256(coin.encode("utf-8")).hexdigest()
    return f"#{digest[:6].upper()}"


def _price(prices: Mapping[str, float], symbol: str) -> Optional[float]:
    price = prices.get(symbol)
    if price is None or not math.isfinite(price) or price <= 0:
        return None
    return price


def resolve_value(
    coin: str,
    total: float,
    prices: Mapping[str, float],
    quote_asset: str = QUOTE_ASSET,
    fallback_quote_asset: str = FALLBACK_QUOTE_ASSET,
    bridge_asset: str = BRIDGE_ASSET
) -> Optional[Tuple[float, str, PriceSourceKind]]:
    """Value *total* units of *coin* in the quote asset.

    Tries, in order: the quote asset itself, ``<coin><quote>``,
    ``<coin><fallback>``, then the two-hop ``<coin><bridge>`` x
    ``<bridge><quote>``. Returns ``(value, source, kind)`` or ``None`` when
    no path exists.
    """
    if coin == quote_asset:
        return total, DIRECT_PRICE_SOURCE, PriceSourceKind.DIRECT

    for quote in (quote_asset, fallback_quote_asset):
        symbol = f"{coin}{quote}"
        price = _price(prices, symbol)
        if price is not None:
            return total * price, symbol, PriceSourceKind.PAIR

    first_leg = f"{coin}{bridge_asset}"
    second_leg = f"{bridge_asset}{quote_asset}"
    coin_in_bridge = _price(prices, first_leg)
    bridge_in_quote = _price(prices, second_leg)
    if coin_in_bridge is not None and bridge_in_quote is not None:
        return total * coin_in_bridge * bridge_in_quote, f"{first_leg} → {second_leg}", PriceSourceKind.BRIDGE

    return None


def value_balance(
    balance: BalanceRecord,
    prices: Mapping[str, float],
    dust_threshold: float = DUST_THRESHOLD,
    **resolve_kwargs
) -> Optional[ValuedAsset]:
    """Value one balance row, or ``None`` when it is empty, unvaluable or dust"""
    total = balance.total
    if total <= 0:
        return None

    resolved = resolve_value(balance.asset, total, prices, **resolve_kwargs)
    if resolved is None:
        return None

    value, source, kind = resolved
    if value < dust_threshold:
        return None

    return ValuedAsset(
        coin=balance.asset,
        amount=total,
        value=value,
        price_source=source,
        color=coin_color(balance.asset),
        source_kind=kind
    )


def value_portfolio(
    snapshot: AccountSnapshot,
    prices: Mapping[str, float],
    dust_threshold: float = DUST_THRESHOLD,
    **resolve_kwargs
) -> List[ValuedAsset]:
    """Value every balance and rank by value, highest first.

    ``sorted`` is stable, so equal values keep the exchange's balance order.
    """
    return _rank(
        value_balance(balance, prices, dust_threshold, **resolve_kwargs)
        for balance in snapshot.balances
    )


def _rank(candidates: Iterable[Optional[ValuedAsset]]) -> List[ValuedAsset]:
    assets = [asset for asset in candidates if asset is not None]
    return sorted(assets, key=lambda asset: asset.value, reverse=True)


def build_portfolio(
    snapshot: AccountSnapshot,
    prices: Mapping[str, float],
    dust_threshold: float = DUST_THRESHOLD,
    **resolve_kwargs
) -> Portfolio:
    """Value *snapshot* and wrap the result with its total"""
    return Portfolio.from_assets(value_portfolio(snapshot, prices, dust_threshold, **resolve_kwargs))
