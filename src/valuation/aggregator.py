from __future__ import annotations

from typing import Iterable

from valuation.config import DEFAULT_CONFIG
from valuation.data_models import Adjustment, Valuation, ValueRange


def aggregate(
    base_price: float,
    adjustments: Iterable[Adjustment],
    half_width: int = DEFAULT_CONFIG.value_range_half_width,
) -> Valuation:
    """Fold adjustments into a preliminary value with a fixed-width range.

    The preliminary value is not clamped at zero: large enough deductions
    produce a negative valuation.
    """
    ordered = tuple(adjustments)
    preliminary = base_price + sum(a.value_delta for a in ordered)
    return Valuation(
        base_price=base_price,
        adjustments=ordered,
        preliminary_value=preliminary,
        value_range=ValueRange(min=preliminary - half_width, max=preliminary + half_width),
    )
