"""
Public price endpoints
"""

import asyncio
import json
import math
from typing import Any, Dict, List, Optional, Sequence

from src.core.enums import TICKER_PRICE_ENDPOINT, TOP_COIN_SYMBOLS
from src.core.exceptions import APIError, PriceFetchError
from src.core.models import PriceMap
from src.trading.client import BinanceClient
from src.utils.logger import get_logger

logger = get_logger(__name__)


def _parse_ticker(item: Any) -> tuple:
    """Return ``(symbol, price)`` from a ``{symbol, price}`` ticker entry"""
    if not isinstance(item, dict) or "symbol" not in item or "price" not in item:
        raise PriceFetchError(f"Unexpected ticker entry: {item!r}")
    try:
        price = float(item["price"])
    except (TypeError, ValueError) as e:
        raise PriceFetchError(f"Non-numeric price for {item.get('symbol')}: {item.get('price')!r}") from e
    if not math.isfinite(price):
        raise PriceFetchError(f"Non-finite price for {item['symbol']}: {item['price']!r}")
    return str(item["symbol"]), price


def _decode(body: str) -> Any:
    try:
        return json.loads(body)
    except ValueError as e:
        raise PriceFetchError("Price response is not valid JSON") from e


class MarketDataClient:
    """Fetches current prices from the exchange's ticker endpoint"""

    def __init__(self, client: BinanceClient, top_coin_symbols: Optional[List[str]] = None):
        self.client = client
        self.top_coin_symbols = list(top_coin_symbols) if top_coin_symbols is not None else list(TOP_COIN_SYMBOLS)

    async def get_price(self, symbol: str) -> float:
        """Fetch a single symbol's price"""
        try:
            status, body = await self.client.get(TICKER_PRICE_ENDPOINT, query=f"symbol={symbol}")
        except APIError as e:
            raise PriceFetchError(f"Failed to fetch price for {symbol}: {e}") from e

        if status != 200:
            raise PriceFetchError(f"Failed to fetch price for {symbol}: {status}", status=status)

        _, price = _parse_ticker(_decode(body))
        return price

    async def get_prices(self, symbols: Sequence[str]) -> PriceMap:
        """Fetch prices for *symbols* concurrently.

        Raises ``PriceFetchError`` as soon as one lookup fails; the remaining
        requests are left to finish on their own. An empty symbol list is a
        no-op returning ``{}``; use ``get_all_prices`` for the full list.
        """
        if not symbols:
            return {}

        logger.debug(f"Fetching prices for symbols: {list(symbols)}")
        prices = await asyncio.gather(*(self.get_price(symbol) for symbol in symbols))
        return dict(zip(symbols, prices))

    async def get_all_prices(self) -> PriceMap:
        """Fetch the full exchange price list in one request"""
        try:
            status, body = await self.client.get(TICKER_PRICE_ENDPOINT)
        except APIError as e:
            raise PriceFetchError(f"Failed to fetch prices: {e}") from e

        if status != 200:
            logger.error(f"Failed to fetch prices: {status}")
            raise PriceFetchError(f"Failed to fetch prices: {status}", status=status)

        data = _decode(body)
        if not isinstance(data, list):
            raise PriceFetchError(f"Unexpected ticker payload type: {type(data).__name__}")

        prices: Dict[str, float] = {}
        for item in data:
            symbol, price = _parse_ticker(item)
            prices[symbol] = price
        return prices

    async def get_top_coin_prices(self) -> PriceMap:
        """Prices for the curated top coins. Never raises; ``{}`` means unknown."""
        try:
            return await self.get_prices(self.top_coin_symbols)
        except PriceFetchError as e:
            logger.warning(f"Error fetching top coin prices: {e}")
            return {}
