import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from config.settings import TrackerConfig
from src.core.models import AccountSnapshot, BalanceRecord
from src.trading.credential_store import InMemoryCredentialStore


def ticker_body(symbol, price):
    return json.dumps({"symbol": symbol, "price": str(price)})


def make_snapshot(*rows):
    """rows: (asset, free, locked) tuples"""
    return AccountSnapshot(balances=tuple(BalanceRecord(a, f, l) for a, f, l in rows))


@pytest.fixture
def config():
    return TrackerConfig(api_base_url="https://api.test", refresh_interval=30)


@pytest.fixture
def fake_client():
    client = MagicMock()
    client.get = AsyncMock()
    client.open = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def store():
    return InMemoryCredentialStore()
