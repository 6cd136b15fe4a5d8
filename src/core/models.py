"""
Core data models for the portfolio tracker
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .enums import PriceSourceKind, RefreshKind, SessionState

PriceMap = Dict[str, float]


@dataclass(frozen=True)
class Credentials:
    """API key pair held by a session"""
    api_key: str
    api_secret: str = field(repr=False)

    @property
    def masked_key(self) -> str:
        return f"{self.api_key[:5]}..." if self.api_key else ""

    def is_complete(self) -> bool:
        return bool(self.api_key and self.api_key.strip() and self.api_secret and self.api_secret.strip())


@dataclass(frozen=True)
class BalanceRecord:
    """Single balance row as delivered by the exchange"""
    asset: str
    free: str = "0"
    locked: str = "0"

    @property
    def total(self) -> float:
        return float(self.free) + float(self.locked)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BalanceRecord":
        return cls(
            asset=str(data.get("asset", "")),
            free=str(data.get("free", "0")),
            locked=str(data.get("locked", "0")),
        )


@dataclass(frozen=True)
class AccountSnapshot:
    """Authenticated account payload reduced to its balances"""
    balances: Tuple[BalanceRecord, ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_payload(cls, payload: Any) -> "AccountSnapshot":
        if not isinstance(payload, dict):
            return cls()
        rows = payload.get("balances")
        if not isinstance(rows, list):
            return cls(raw=payload)
        balances = tuple(BalanceRecord.from_dict(row) for row in rows if isinstance(row, dict))
        return cls(balances=balances, raw=payload)


@dataclass(frozen=True)
class ValuedAsset:
    """An asset holding priced in the quote unit"""
    coin: str
    amount: float
    value: float
    price_source: str
    color: str
    source_kind: PriceSourceKind = PriceSourceKind.PAIR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coin": self.coin,
            "amount": self.amount,
            "value": self.value,
            "price_source": self.price_source,
            "color": self.color,
        }


@dataclass(frozen=True)
class Portfolio:
    """Ranked, valued asset list. Replaced wholesale on every refresh."""
    assets: Tuple[ValuedAsset, ...] = ()
    total_value: float = 0.0
    updated_at: datetime = field(default_factory=datetime.now, compare=False)

    @classmethod
    def from_assets(cls, assets: List[ValuedAsset]) -> "Portfolio":
        return cls(assets=tuple(assets), total_value=sum(a.value for a in assets))

    def is_empty(self) -> bool:
        return not self.assets

    def get_asset(self, coin: str) -> Optional[ValuedAsset]:
        for asset in self.assets:
            if asset.coin == coin:
                return asset
        return None

    def allocation(self, coin: str) -> float:
        """Percentage of total value held in *coin* (0 when absent)"""
        asset = self.get_asset(coin)
        if asset is None or self.total_value <= 0:
            return 0.0
        return asset.value / self.total_value * 100


@dataclass(frozen=True)
class ApiResult:
    """Tagged result of an exchange call: ok with a value, or a failure kind and message"""
    ok: bool
    value: Any = None
    kind: str = ""
    message: str = ""
    status: Optional[int] = None

    @classmethod
    def success(cls, value: Any, status: int = 200) -> "ApiResult":
        return cls(ok=True, value=value, status=status)

    @classmethod
    def failure(cls, kind: str, message: str, status: Optional[int] = None) -> "ApiResult":
        return cls(ok=False, kind=kind, message=message, status=status)

    @classmethod
    def from_error_body(cls, status: int, body: str) -> "ApiResult":
        """Parse an error response, preferring the exchange's ``msg`` field"""
        message = f"API Error ({status})"
        kind = "http"
        try:
            data = json.loads(body)
        except (TypeError, ValueError):
            if body:
                message += f": {body}"
        else:
            if isinstance(data, dict) and data.get("msg"):
                message = str(data["msg"])
                kind = "exchange"
        return cls.failure(kind, message, status)


@dataclass
class DashboardView:
    """What the presentation layer reads from a session"""
    state: SessionState
    portfolio: Optional[Portfolio]
    top_prices: PriceMap
    loading: bool = False
    refreshing: bool = False
    error: str = ""
    last_refresh_kind: Optional[RefreshKind] = None
    last_updated: Optional[datetime] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state in (SessionState.AUTHENTICATED, SessionState.REFRESHING)
