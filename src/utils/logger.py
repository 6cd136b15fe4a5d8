"""
Logging utilities for the portfolio tracker
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from src.core.enums import LOG_FORMAT, LOG_DATE_FORMAT


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_dir: str = "logs"
) -> None:
    """
    Setup logging configuration for the portfolio tracker

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_to_file: Whether to log to file
        log_dir: Directory for log files
    """

    if log_to_file:
        Path(log_dir).mkdir(exist_ok=True)

    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # Console output goes to stderr so tables printed on stdout stay clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_to_file:
        log_filename = f"portfolio_tracker_{datetime.now().strftime('%Y%m%d')}.log"
        log_filepath = Path(log_dir) / log_filename

        file_handler = logging.FileHandler(log_filepath)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Suppress noisy external loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug("Logging system initialized")
    logger.debug(f"Log level: {level}")
    if log_to_file:
        logger.debug(f"Log file: {log_filepath}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def mask_key(api_key: Optional[str]) -> str:
    """Return the first characters of an API key for log output"""
    if not api_key:
        return "<none>"
    return f"{api_key[:5]}..."


class PortfolioLogger:
    """
    Logger for refresh cycles and portfolio updates
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self.cycle_count = 0

    def log_refresh_start(self, interactive: bool) -> None:
        self.cycle_count += 1
        kind = "interactive" if interactive else "background"
        self.logger.debug(f"🔄 Starting {kind} refresh #{self.cycle_count}")

    def log_refresh_end(self, duration: float) -> None:
        self.logger.debug(f"✅ Refresh #{self.cycle_count} completed in {duration:.2f}s")

    def log_portfolio_update(self, portfolio) -> None:
        """Log totals and per-asset allocation of a freshly built portfolio"""

        self.logger.info(f"💼 Portfolio: ${portfolio.total_value:,.2f} across {len(portfolio.assets)} assets")

        for asset in portfolio.assets:
            self.logger.debug(
                f"   📊 {asset.coin}: {asset.amount:.8g} = ${asset.value:,.2f} "
                f"({portfolio.allocation(asset.coin):.1f}%) via {asset.price_source}"
            )

    def log_error_with_context(self, error: Exception, context: str) -> None:
        """Log a recoverable error with the step that produced it"""
        self.logger.error(f"❌ {context}: {error}")
