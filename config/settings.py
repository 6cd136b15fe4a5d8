"""
Configuration management for the portfolio tracker
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import find_dotenv, load_dotenv

from src.core.enums import (
    BRIDGE_ASSET,
    DEFAULT_API_URL,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    DUST_THRESHOLD,
    FALLBACK_QUOTE_ASSET,
    QUOTE_ASSET,
    TOP_COIN_SYMBOLS,
)

logger = logging.getLogger(__name__)


@dataclass
class TrackerConfig:
    """Main configuration for the portfolio tracker"""

    # API Configuration
    api_base_url: str = DEFAULT_API_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    recv_window: Optional[int] = None

    # Valuation
    quote_asset: str = QUOTE_ASSET
    fallback_quote_asset: str = FALLBACK_QUOTE_ASSET
    bridge_asset: str = BRIDGE_ASSET
    dust_threshold: float = DUST_THRESHOLD
    top_coin_symbols: List[str] = field(default_factory=lambda: list(TOP_COIN_SYMBOLS))

    # Timing
    refresh_interval: int = DEFAULT_REFRESH_INTERVAL

    # Credential storage ("" keeps credentials in memory only)
    credentials_path: str = ""

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"

    def validate(self) -> bool:
        """Validate configuration parameters"""

        if not self.api_base_url:
            logger.error("api_base_url is required")
            return False

        if not self.api_base_url.startswith(("http://", "https://")):
            logger.error(f"api_base_url must be an http(s) URL: {self.api_base_url}")
            return False

        if self.request_timeout <= 0:
            logger.error("request_timeout must be positive")
            return False

        if self.refresh_interval <= 0:
            logger.error("refresh_interval must be positive")
            return False

        if self.dust_threshold < 0:
            logger.error("dust_threshold cannot be negative")
            return False

        if self.recv_window is not None and not 0 < self.recv_window <= 60000:
            logger.error("recv_window must be between 1 and 60000 ms")
            return False

        if not self.top_coin_symbols:
            logger.warning("No top coin symbols configured, price overview will be empty")

        # Trailing slashes would double up with endpoint paths
        self.api_base_url = self.api_base_url.rstrip("/")

        return True

    def to_dict(self) -> Dict:
        """Convert config to dictionary"""
        return {key: (list(value) if isinstance(value, list) else value)
                for key, value in self.__dict__.items()}

    def save(self, filepath: str) -> None:
        """Save configuration to file"""
        config_dict = self.to_dict()
        with open(filepath, 'w') as f:
            json.dump(config_dict, f, indent=2)
        logger.info(f"Configuration saved to {filepath}")


def load_env_config() -> Dict:
    """Load configuration from environment variables"""

    env_config = {}

    env_config['api_base_url'] = os.getenv('BINANCE_API_URL', '')
    env_config['credentials_path'] = os.getenv('CREDENTIALS_PATH', '')
    env_config['log_level'] = os.getenv('LOG_LEVEL', '')

    if os.getenv('REQUEST_TIMEOUT'):
        env_config['request_timeout'] = float(os.getenv('REQUEST_TIMEOUT'))

    if os.getenv('REFRESH_INTERVAL'):
        env_config['refresh_interval'] = int(os.getenv('REFRESH_INTERVAL'))

    if os.getenv('DUST_THRESHOLD'):
        env_config['dust_threshold'] = float(os.getenv('DUST_THRESHOLD'))

    if os.getenv('RECV_WINDOW'):
        env_config['recv_window'] = int(os.getenv('RECV_WINDOW'))

    return {k: v for k, v in env_config.items() if v != ''}


def load_config_file(filepath: str) -> Dict:
    """Load configuration from JSON file"""

    if not os.path.exists(filepath):
        logger.warning(f"Config file not found: {filepath}")
        return {}

    try:
        with open(filepath, 'r') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Error loading config file {filepath}: {e}")
        return {}


def create_config(config_path: Optional[str] = None, **overrides) -> TrackerConfig:
    """Create configuration with precedence: overrides > env vars > config file > defaults"""

    load_dotenv(find_dotenv(usecwd=True))

    config_data = {}

    if config_path:
        config_data.update(load_config_file(config_path))
    else:
        default_config_path = Path(__file__).parent / "tracker_config.json"
        if default_config_path.exists():
            config_data.update(load_config_file(str(default_config_path)))

    config_data.update(load_env_config())
    config_data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = TrackerConfig(**config_data)
    except TypeError as e:
        logger.error(f"Configuration error: {e}")
        known = set(TrackerConfig.__dataclass_fields__)
        config = TrackerConfig(**{k: v for k, v in config_data.items() if k in known})

    return config


def validate_config(config: TrackerConfig) -> bool:
    """Validate configuration and log warnings"""

    if not config.validate():
        return False

    if config.refresh_interval < 10:
        logger.warning(f"Short refresh_interval: {config.refresh_interval}s may hit exchange rate limits")

    if config.api_base_url.startswith("http://"):
        logger.warning("api_base_url is not using TLS, signed requests travel in clear text")

    return True


def create_default_config_file() -> None:
    """Create default configuration file"""

    config = TrackerConfig()

    config_path = Path(__file__).parent / "tracker_config.json"
    config.save(str(config_path))

    logger.info(f"Default config created at {config_path}")


if __name__ == "__main__":
    create_default_config_file()
