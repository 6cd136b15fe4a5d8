import asyncio
import json

import pytest

from src.core.enums import TICKER_PRICE_ENDPOINT
from src.core.exceptions import APIError, PriceFetchError
from src.trading.market_data import MarketDataClient
from tests.conftest import ticker_body


def route(prices, failing=()):
    """Build a side effect answering single-symbol ticker lookups"""
    async def _get(endpoint, query="", headers=None):
        symbol = query.split("=", 1)[1]
        if symbol in failing:
            return 400, json.dumps({"code": -1121, "msg": "Invalid symbol."})
        return 200, ticker_body(symbol, prices[symbol])
    return _get


@pytest.mark.asyncio
async def test_get_prices_merges_results(fake_client):
    fake_client.get.side_effect = route({"BTCUSDT": 60000, "ETHUSDT": "3000.5"})
    market = MarketDataClient(fake_client)

    prices = await market.get_prices(["BTCUSDT", "ETHUSDT"])

    assert prices == {"BTCUSDT": 60000.0, "ETHUSDT": 3000.5}
    queries = sorted(call.kwargs["query"] for call in fake_client.get.await_args_list)
    assert queries == ["symbol=BTCUSDT", "symbol=ETHUSDT"]


@pytest.mark.asyncio
async def test_get_prices_fails_when_any_symbol_fails(fake_client):
    fake_client.get.side_effect = route({"BTCUSDT": 60000}, failing={"NOPEUSDT"})
    market = MarketDataClient(fake_client)

    with pytest.raises(PriceFetchError) as exc_info:
        await market.get_prices(["BTCUSDT", "NOPEUSDT"])
    assert exc_info.value.status == 400


@pytest.mark.asyncio
async def test_get_prices_runs_lookups_concurrently(fake_client):
    in_flight = 0
    peak = 0

    async def slow_get(endpoint, query="", headers=None):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return 200, ticker_body(query.split("=")[1], 1)

    fake_client.get.side_effect = slow_get
    await MarketDataClient(fake_client).get_prices(["A", "B", "C"])
    assert peak == 3


@pytest.mark.asyncio
async def test_get_prices_with_no_symbols_is_a_noop(fake_client):
    assert await MarketDataClient(fake_client).get_prices([]) == {}
    fake_client.get.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_all_prices(fake_client):
    payload = [{"symbol": "BTCUSDT", "price": "60000.00"}, {"symbol": "ETHBTC", "price": "0.05"}]
    fake_client.get.return_value = (200, json.dumps(payload))

    prices = await MarketDataClient(fake_client).get_all_prices()

    assert prices == {"BTCUSDT": 60000.0, "ETHBTC": 0.05}
    fake_client.get.assert_awaited_once_with(TICKER_PRICE_ENDPOINT)


@pytest.mark.asyncio
async def test_get_all_prices_carries_status(fake_client):
    fake_client.get.return_value = (503, "Service Unavailable")

    with pytest.raises(PriceFetchError) as exc_info:
        await MarketDataClient(fake_client).get_all_prices()
    assert exc_info.value.status == 503


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    '[{"symbol": "BTCUSDT", "price": "abc"}]',
    '[{"symbol": "BTCUSDT"}]',
    '{"symbol": "BTCUSDT", "price": "1"}',
    "<html>oops</html>",
])
async def test_get_all_prices_rejects_malformed_payloads(fake_client, body):
    fake_client.get.return_value = (200, body)
    with pytest.raises(PriceFetchError):
        await MarketDataClient(fake_client).get_all_prices()


@pytest.mark.asyncio
async def test_network_error_becomes_price_fetch_error(fake_client):
    fake_client.get.side_effect = APIError("Request timeout")
    with pytest.raises(PriceFetchError):
        await MarketDataClient(fake_client).get_all_prices()


@pytest.mark.asyncio
async def test_top_coin_prices_use_configured_symbols(fake_client):
    fake_client.get.side_effect = route({"BTCUSDT": 1, "ETHUSDT": 2})
    market = MarketDataClient(fake_client, top_coin_symbols=["BTCUSDT", "ETHUSDT"])
    assert await market.get_top_coin_prices() == {"BTCUSDT": 1.0, "ETHUSDT": 2.0}


@pytest.mark.asyncio
async def test_top_coin_prices_never_raise(fake_client):
    fake_client.get.side_effect = APIError("connection refused")
    assert await MarketDataClient(fake_client).get_top_coin_prices() == {}


@pytest.mark.asyncio
async def test_top_coin_prices_empty_on_partial_failure(fake_client):
    fake_client.get.side_effect = route({"BTCUSDT": 1}, failing={"ETHUSDT"})
    market = MarketDataClient(fake_client, top_coin_symbols=["BTCUSDT", "ETHUSDT"])
    assert await market.get_top_coin_prices() == {}


@pytest.mark.asyncio
async def test_top_coin_prices_empty_when_transport_cannot_decode(fake_client):
    fake_client.get.side_effect = APIError("Undecodable response body: invalid start byte")
    assert await MarketDataClient(fake_client).get_top_coin_prices() == {}


@pytest.mark.asyncio
async def test_replacement_characters_in_price_are_rejected(fake_client):
    fake_client.get.return_value = (200, '{"symbol": "BTCUSDT", "price": "\ufffd"}')
    market = MarketDataClient(fake_client, top_coin_symbols=["BTCUSDT"])

    with pytest.raises(PriceFetchError):
        await market.get_prices(["BTCUSDT"])
    assert await market.get_top_coin_prices() == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("price", ["NaN", "inf", "-Infinity"])
async def test_non_finite_prices_are_rejected(fake_client, price):
    fake_client.get.return_value = (200, ticker_body("BTCUSDT", price))
    market = MarketDataClient(fake_client, top_coin_symbols=["BTCUSDT"])

    with pytest.raises(PriceFetchError, match="Non-finite"):
        await market.get_prices(["BTCUSDT"])
    assert await market.get_top_coin_prices() == {}


@pytest.mark.asyncio
async def test_get_all_prices_rejects_non_finite_entries(fake_client):
    payload = [{"symbol": "BTCUSDT", "price": "60000"}, {"symbol": "ETHUSDT", "price": "NaN"}]
    fake_client.get.return_value = (200, json.dumps(payload))
    with pytest.raises(PriceFetchError):
        await MarketDataClient(fake_client).get_all_prices()
