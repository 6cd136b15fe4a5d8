"""
Enums and constants for the portfolio tracker
"""

from enum import Enum


class SessionState(Enum):
    """Lifecycle states of a portfolio session"""
    LOGGED_OUT = "logged_out"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    REFRESHING = "refreshing"


class RefreshKind(Enum):
    """Who triggered a refresh; only affects UI flags"""
    BACKGROUND = "background"
    INTERACTIVE = "interactive"


class PriceSourceKind(Enum):
    """How an asset value was resolved"""
    DIRECT = "direct"
    PAIR = "pair"
    BRIDGE = "bridge"


class SortField(Enum):
    """Columns an asset table can be sorted by"""
    COIN = "coin"
    AMOUNT = "amount"
    VALUE = "value"


# Quote / pricing constants
QUOTE_ASSET = "USDT"
FALLBACK_QUOTE_ASSET = "BUSD"
BRIDGE_ASSET = "BTC"
DUST_THRESHOLD = 1.0
DIRECT_PRICE_SOURCE = "direct"
TOP_COIN_SYMBOLS = ["BTCUSDT", "ETHUSDT", "SOLUSDT", "XRPUSDT", "BNBUSDT"]

# Display colours for well-known coins
COIN_COLORS = {
    "BTC": "#F7931A",
    "ETH": "#627EEA",
    "BNB": "#F3BA2F",
    "SOL": "#00FFA3",
    "XRP": "#23292F",
    "USDT": "#26A17B",
    "USDC": "#2775CA",
    "BUSD": "#F0B90B",
}
OTHERS_LABEL = "Others"
OTHERS_COLOR = "#6B7280"

# Exchange endpoints
DEFAULT_API_URL = "https://api.binance.com"
TICKER_PRICE_ENDPOINT = "/api/v3/ticker/price"
ACCOUNT_ENDPOINT = "/api/v3/account"
API_KEY_HEADER = "X-MBX-APIKEY"

# Credential storage keys
STORAGE_API_KEY = "binance_api_key"
STORAGE_API_SECRET = "binance_api_secret"

# Timing
DEFAULT_REFRESH_INTERVAL = 30  # seconds
DEFAULT_REQUEST_TIMEOUT = 10.0  # seconds

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
