"""
Binance REST transport shared by the market data and account clients
"""

import asyncio
import logging
from typing import Dict, Optional, Tuple

import aiohttp

from config.settings import TrackerConfig
from src.core.exceptions import APIError

logger = logging.getLogger(__name__)


class BinanceClient:
    """Thin aiohttp wrapper: owns the session, enforces the request deadline"""

    def __init__(self, config: TrackerConfig):
        self.config = config
        self.session: Optional[aiohttp.ClientSession] = None
        self._request_count = 0

    async def __aenter__(self):
        """Async context manager entry"""
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()

    async def open(self) -> None:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.request_timeout),
                headers={"User-Agent": "BinancePortfolioTracker/1.0"}
            )

    async def close(self) -> None:
        if self.session:
            await self.session.close()
            self.session = None

    def url_for(self, endpoint: str, query: str = "") -> str:
        url = f"{self.config.api_base_url}{endpoint}"
        return f"{url}?{query}" if query else url

    async def get(
        self,
        endpoint: str,
        query: str = "",
        headers: Optional[Dict[str, str]] = None
    ) -> Tuple[int, str]:
        """Issue a GET and return ``(status, body_text)``.

        The query string is sent exactly as given so that signed queries
        reach the exchange byte for byte. Network failures and timeouts are
        raised as ``APIError`` with no status.
        """

        if not self.session:
            raise APIError("Client session not initialized")

        url = self.url_for(endpoint, query)
        self._request_count += 1

        try:
            async with self.session.get(url, headers=headers) as response:
                body = await response.text(errors="replace")
                if response.status == 200:
                    logger.debug(f"GET {endpoint} - {response.status}")
                else:
                    logger.warning(f"GET {endpoint} - {response.status}")
                return response.status, body

        except asyncio.TimeoutError as e:
            logger.error(f"⏰ GET {endpoint} - Timeout")
            raise APIError("Request timeout") from e
        except aiohttp.ClientError as e:
            logger.error(f"❌ GET {endpoint} - {e}")
            raise APIError(str(e)) from e
        except UnicodeDecodeError as e:
            logger.error(f"❌ GET {endpoint} - undecodable body")
            raise APIError(f"Undecodable response body: {e.reason}") from e

    def get_request_stats(self) -> Dict[str, int]:
        """Get API request statistics"""
        return {"total_requests": self._request_count}
