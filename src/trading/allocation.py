"""
Allocation view helpers: chart slices and table ordering
"""

from dataclasses import dataclass
from typing import List, Sequence, Union

from src.core.enums import OTHERS_COLOR, OTHERS_LABEL, SortField
from src.core.models import Portfolio, ValuedAsset


@dataclass(frozen=True)
class AllocationSlice:
    """One slice of the allocation chart"""
    name: str
    value: float
    percentage: float
    color: str


def allocation_slices(portfolio: Portfolio, max_slices: int = 5) -> List[AllocationSlice]:
    """Chart slices for *portfolio*.

    With more than *max_slices* assets, the largest ``max_slices - 1`` are
    kept and the remainder is folded into a single "Others" slice.
    """
    if max_slices < 2:
        raise ValueError("max_slices must be at least 2")

    total = portfolio.total_value

    def pct(value: float) -> float:
        return value / total * 100 if total > 0 else 0.0

    assets = list(portfolio.assets)
    if len(assets) > max_slices:
        head, tail = assets[:max_slices - 1], assets[max_slices - 1:]
    else:
        head, tail = assets, []

    slices = [AllocationSlice(a.coin, a.value, pct(a.value), a.color) for a in head]
    if tail:
        rest = sum(a.value for a in tail)
        slices.append(AllocationSlice(OTHERS_LABEL, rest, pct(rest), OTHERS_COLOR))
    return slices


def sort_assets(
    assets: Sequence[ValuedAsset],
    field: Union[SortField, str] = SortField.VALUE,
    descending: bool = True
) -> List[ValuedAsset]:
    """Return *assets* ordered by coin name, amount or value"""
    field = SortField(field)
    if field is SortField.COIN:
        return sorted(assets, key=lambda a: a.coin, reverse=descending)
    return sorted(assets, key=lambda a: getattr(a, field.value), reverse=descending)
