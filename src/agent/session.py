"""
Portfolio session: credentials, refresh cycle and polling
"""

import asyncio
import time
from typing import Optional

from config.settings import TrackerConfig
from src.core.enums import STORAGE_API_KEY, STORAGE_API_SECRET, RefreshKind, SessionState
from src.core.exceptions import (
    AccountFetchError,
    PriceFetchError,
    SignatureError,
    ValidationError,
)
from src.core.models import Credentials, DashboardView, Portfolio, PriceMap
from src.trading.account import AccountClient
from src.trading.client import BinanceClient
from src.trading.credential_store import CredentialStore, create_credential_store
from src.trading.market_data import MarketDataClient
from src.trading.signature import SignatureProvider
from src.trading.valuator import build_portfolio
from src.utils.logger import PortfolioLogger, get_logger

logger = get_logger(__name__)


class PortfolioSession:
    """
    Owns the credentials and sequences price fetch, account fetch and
    valuation. One instance per application; pass it to whatever renders it.
    """

    def __init__(
        self,
        config: TrackerConfig,
        client: Optional[BinanceClient] = None,
        market_data: Optional[MarketDataClient] = None,
        account: Optional[AccountClient] = None,
        signer: Optional[SignatureProvider] = None,
        store: Optional[CredentialStore] = None
    ):
        self.config = config
        self.client = client or BinanceClient(config)
        self.market_data = market_data or MarketDataClient(self.client, config.top_coin_symbols)
        self.account = account or AccountClient(self.client, recv_window=config.recv_window)
        self.signer = signer or SignatureProvider()
        self.store = store if store is not None else create_credential_store(config.credentials_path)

        self.state = SessionState.LOGGED_OUT
        self._credentials: Optional[Credentials] = None

        # Published results, each replaced by a single assignment
        self.portfolio: Optional[Portfolio] = None
        self.top_prices: PriceMap = {}
        self.prices: PriceMap = {}

        self.loading = False
        self.refreshing = False
        self.error = ""
        self.last_refresh_kind: Optional[RefreshKind] = None
        self._loaded = False

        self._poll_task: Optional[asyncio.Task] = None
        self.cycle_logger = PortfolioLogger(__name__)

    async def __aenter__(self):
        await self.client.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
        await self.client.close()

    @property
    def is_authenticated(self) -> bool:
        return self.state in (SessionState.AUTHENTICATED, SessionState.REFRESHING)

    @property
    def credentials(self) -> Optional[Credentials]:
        return self._credentials

    @property
    def view(self) -> DashboardView:
        return DashboardView(
            state=self.state,
            portfolio=self.portfolio,
            top_prices=self.top_prices,
            loading=self.loading,
            refreshing=self.refreshing,
            error=self.error,
            last_refresh_kind=self.last_refresh_kind,
            last_updated=self.portfolio.updated_at if self.portfolio else None
        )

    def restore(self) -> bool:
        """Pick up remembered credentials without contacting the exchange"""
        api_key = self.store.get(STORAGE_API_KEY)
        api_secret = self.store.get(STORAGE_API_SECRET)
        if not (api_key and api_secret):
            return False

        self._credentials = Credentials(api_key, api_secret)
        self.state = SessionState.AUTHENTICATED
        logger.info(f"🔑 Restored stored credentials for {self._credentials.masked_key}")
        return True

    async def login(self, api_key: str, api_secret: str, remember: bool = False) -> None:
        """Validate credentials with a signed account request and keep them on success.

        Raises ``ValidationError`` before any network access when either
        value is blank; exchange errors are re-raised unchanged.
        """
        credentials = Credentials(api_key or "", api_secret or "")
        if not credentials.is_complete():
            raise ValidationError("API Key and Secret are required")

        logger.info(f"Attempting login with API key {credentials.masked_key}")
        self.state = SessionState.AUTHENTICATING

        try:
            await self.account.get_account_info(credentials, self.signer)
        except Exception:
            self.state = SessionState.AUTHENTICATED if self._credentials else SessionState.LOGGED_OUT
            raise

        self._credentials = credentials
        self.state = SessionState.AUTHENTICATED
        self._loaded = False

        if remember:
            self.store.set(STORAGE_API_KEY, credentials.api_key)
            self.store.set(STORAGE_API_SECRET, credentials.api_secret)

        logger.info("✅ Login successful")

    async def logout(self) -> None:
        """Stop polling, forget credentials everywhere and drop the current portfolio"""
        await self.stop()
        self._credentials = None
        self.store.remove(STORAGE_API_KEY)
        self.store.remove(STORAGE_API_SECRET)
        self.state = SessionState.LOGGED_OUT
        self.portfolio = None
        self.prices = {}
        self.error = ""
        self._loaded = False
        logger.info("👋 Logged out")

    async def refresh(self, interactive: bool = False) -> Optional[Portfolio]:
        """Run one refresh cycle and return the portfolio now on display.

        Top coin prices are always fetched. When authenticated, the full price
        map and the account snapshot are fetched and valued. Failures in that
        leg are recorded in ``error`` and leave the previous portfolio and the
        credentials untouched.
        """
        self.last_refresh_kind = RefreshKind.INTERACTIVE if interactive else RefreshKind.BACKGROUND
        # Only the first load blanks the dashboard; later ones refresh in place
        if self._loaded:
            self.refreshing = True
        else:
            self.loading = True
        self.error = ""

        self.cycle_logger.log_refresh_start(interactive)
        started = time.monotonic()
        credentials = self._credentials

        try:
            self.top_prices = await self.market_data.get_top_coin_prices()
            if not self.top_prices:
                logger.warning("Top coin prices unavailable")

            if credentials is not None:
                await self._refresh_account(credentials)
        finally:
            if self._credentials is credentials:
                self._loaded = True
            self.loading = False
            self.refreshing = False
            self.cycle_logger.log_refresh_end(time.monotonic() - started)

        return self.portfolio

    async def _refresh_account(self, credentials: Credentials) -> None:
        if self.state is SessionState.AUTHENTICATED:
            self.state = SessionState.REFRESHING

        try:
            try:
                prices = await self.market_data.get_all_prices()
            except PriceFetchError as e:
                self.cycle_logger.log_error_with_context(e, "Failed to load all prices, using top coin prices")
                prices = self.top_prices

            snapshot = await self.account.get_account_info(credentials, self.signer)
            portfolio = build_portfolio(
                snapshot,
                prices,
                dust_threshold=self.config.dust_threshold,
                quote_asset=self.config.quote_asset,
                fallback_quote_asset=self.config.fallback_quote_asset,
                bridge_asset=self.config.bridge_asset
            )
        except (AccountFetchError, SignatureError) as e:
            self.cycle_logger.log_error_with_context(e, "Error fetching account")
            self.error = f"Failed to load account data: {e}"
            return
        finally:
            if self.state is SessionState.REFRESHING:
                self.state = SessionState.AUTHENTICATED

        # A logout while the requests were in flight wins
        if self._credentials is not credentials:
            logger.debug("Credentials changed during refresh, discarding result")
            return

        self.prices = prices
        self.portfolio = portfolio
        self.cycle_logger.log_portfolio_update(portfolio)

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def start(self) -> None:
        """Refresh now and then every ``refresh_interval`` seconds until stopped"""
        if self.is_polling:
            return
        self._poll_task = asyncio.create_task(self._poll_loop())
        logger.info(f"⏱️ Polling every {self.config.refresh_interval}s")

    async def stop(self) -> None:
        """Cancel the polling task and wait for it to finish"""
        task = self._poll_task
        self._cancel_polling()
        # logout() may be reached from inside the polling task itself
        if task is not None and task is not asyncio.current_task():
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _cancel_polling(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

    async def _poll_loop(self) -> None:
        while True:
            try:
                await self.refresh(interactive=False)
            except Exception as e:
                logger.error(f"❌ Error in refresh cycle: {e}", exc_info=True)
            await asyncio.sleep(self.config.refresh_interval)
