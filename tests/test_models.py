import pytest

from src.core.enums import SessionState
from src.core.models import (
    AccountSnapshot,
    ApiResult,
    BalanceRecord,
    Credentials,
    DashboardView,
    Portfolio,
    ValuedAsset,
)


def asset(coin, value):
    return ValuedAsset(coin=coin, amount=1.0, value=value, price_source="direct", color="#000000")


def test_credentials_repr_hides_secret():
    creds = Credentials("abcdefgh", "super-secret")
    assert "super-secret" not in repr(creds)
    assert creds.masked_key == "abcde..."


def test_credentials_completeness():
    assert Credentials("k", "s").is_complete()
    assert not Credentials("k", " ").is_complete()
    assert not Credentials("", "s").is_complete()


def test_balance_total_parses_decimal_strings():
    assert BalanceRecord("BTC", "0.10000000", "0.05000000").total == pytest.approx(0.15)


def test_snapshot_from_payload():
    snapshot = AccountSnapshot.from_payload({
        "balances": [{"asset": "BTC", "free": "1", "locked": "0"}, "junk"],
        "canTrade": True,
    })
    assert snapshot.balances == (BalanceRecord("BTC", "1", "0"),)
    assert snapshot.raw["canTrade"] is True


@pytest.mark.parametrize("payload", [None, [], {}, {"balances": None}, {"balances": "x"}])
def test_snapshot_from_odd_payloads_is_empty(payload):
    assert AccountSnapshot.from_payload(payload).balances == ()


def test_portfolio_from_assets_totals_and_allocation():
    portfolio = Portfolio.from_assets([asset("BTC", 75.0), asset("ETH", 25.0)])
    assert portfolio.total_value == 100.0
    assert portfolio.allocation("BTC") == pytest.approx(75.0)
    assert portfolio.allocation("XRP") == 0.0
    assert portfolio.get_asset("ETH").value == 25.0


def test_portfolio_is_immutable():
    portfolio = Portfolio.from_assets([asset("BTC", 1.0)])
    with pytest.raises(AttributeError):
        portfolio.total_value = 5.0


@pytest.mark.parametrize("status,body,message,kind", [
    (401, '{"code": -2015, "msg": "Invalid API-key."}', "Invalid API-key.", "exchange"),
    (500, '{"code": -1000}', "API Error (500)", "http"),
    (502, "Bad Gateway", "API Error (502): Bad Gateway", "http"),
    (504, "", "API Error (504)", "http"),
    (400, "[1, 2]", "API Error (400)", "http"),
])
def test_api_result_from_error_body(status, body, message, kind):
    result = ApiResult.from_error_body(status, body)
    assert not result.ok
    assert result.message == message
    assert result.kind == kind
    assert result.status == status


def test_dashboard_view_authenticated_states():
    view = DashboardView(state=SessionState.REFRESHING, portfolio=None, top_prices={})
    assert view.is_authenticated
    view = DashboardView(state=SessionState.AUTHENTICATING, portfolio=None, top_prices={})
    assert not view.is_authenticated
