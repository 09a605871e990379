from __future__ import annotations

from typing import Any, Iterable, Mapping

from valuation.aggregator import aggregate
from valuation.config import DEFAULT_CONFIG, ValuationConfig
from valuation.data_models import Adjustment, InteriorAssessment, Valuation
from valuation.rules import map_mileage, repair_adjustments


def build_valuation(
    *,
    base_price: float,
    mileage_km: int = 0,
    cost_breakdown: Iterable[Mapping[str, Any]] = (),
    interior: InteriorAssessment | None = None,
    config: ValuationConfig = DEFAULT_CONFIG,
) -> Valuation:
    """Collect repair, mileage and interior adjustments, in that order, and aggregate.

    ``interior`` is ``None`` only when no interior photo was assessed; a
    failed assessment arrives here as the degraded fallback.
    """
    adjustments: list[Adjustment] = repair_adjustments(cost_breakdown, config)

    mileage = map_mileage(mileage_km, base_price)
    if mileage is not None:
        adjustments.append(mileage)

    if interior is not None:
        adjustments.append(interior.to_adjustment())

    return aggregate(base_price, adjustments, half_width=config.value_range_half_width)
