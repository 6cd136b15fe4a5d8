"""
Authenticated account endpoint
"""

import json
import time
from typing import Callable, Optional

from src.core.enums import ACCOUNT_ENDPOINT, API_KEY_HEADER
from src.core.exceptions import APIError, AccountFetchError
from src.core.models import AccountSnapshot, ApiResult, Credentials
from src.trading.client import BinanceClient
from src.trading.signature import SignatureProvider
from src.utils.logger import get_logger, mask_key

logger = get_logger(__name__)


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


class AccountClient:
    """Signs and issues ``GET /api/v3/account``"""

    def __init__(
        self,
        client: BinanceClient,
        recv_window: Optional[int] = None,
        clock: Callable[[], int] = current_timestamp_ms
    ):
        self.client = client
        self.recv_window = recv_window
        self.clock = clock

    def build_query(self) -> str:
        query = f"timestamp={self.clock()}"
        if self.recv_window:
            query += f"&recvWindow={self.recv_window}"
        return query

    async def fetch(self, credentials: Credentials, signer: SignatureProvider) -> ApiResult:
        """Perform the signed call and return a tagged result.

        ``SignatureError`` propagates: a request that cannot be signed is
        never sent.
        """
        query = self.build_query()
        signature = signer.sign(query, credentials.api_secret)

        logger.debug(f"Getting account info with API key: {credentials.masked_key}")

        try:
            status, body = await self.client.get(
                ACCOUNT_ENDPOINT,
                query=f"{query}&signature={signature}",
                headers={API_KEY_HEADER: credentials.api_key}
            )
        except APIError as e:
            return ApiResult.failure("network", str(e))

        if status != 200:
            logger.error(f"Account info error: {status}")
            return ApiResult.from_error_body(status, body)

        try:
            payload = json.loads(body)
        except ValueError:
            return ApiResult.failure("parse", "Account response is not valid JSON", status)

        return ApiResult.success(AccountSnapshot.from_payload(payload), status)

    async def get_account_info(self, credentials: Credentials, signer: SignatureProvider) -> AccountSnapshot:
        """Return the account snapshot or raise ``AccountFetchError``"""
        result = await self.fetch(credentials, signer)
        if not result.ok:
            logger.warning(f"Account request for {mask_key(credentials.api_key)} failed: {result.message}")
            raise AccountFetchError(result.message, status=result.status)
        return result.value
