from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from valuation.coercion import parse_price_with_default, round_half_up
from valuation.config import DEFAULT_CONFIG, ValuationConfig
from valuation.data_models import (
    Adjustment,
    ConditionAdjustment,
    ConditionLabel,
    InteriorAssessment,
    MileageBracket,
)
from valuation.errors import ParseError
from valuation.json_extract import parse_json_object

logger = logging.getLogger(__name__)


CONDITION_MAP: Mapping[str, ConditionAdjustment] = MappingProxyType(
    {
        "good": ConditionAdjustment(score_delta=0, value_percent=0.0),
        "moderate": ConditionAdjustment(score_delta=-5, value_percent=-0.03),
        "poor": ConditionAdjustment(score_delta=-12, value_percent=-0.07),
    }
)

# Mileage at or below the first lower bound carries no adjustment at all.
MILEAGE_BRACKETS: tuple[MileageBracket, ...] = (
    MileageBracket(lower_km=20_000, upper_km=40_000, score_delta=-3, value_percent=-0.02),
    MileageBracket(lower_km=40_000, upper_km=80_000, score_delta=-7, value_percent=-0.05),
    MileageBracket(lower_km=80_000, upper_km=None, score_delta=-12, value_percent=-0.10),
)


def normalize_condition(label: Any, fallback: str = DEFAULT_CONFIG.fallback_condition) -> ConditionLabel:
    if not isinstance(label, str):
        return fallback
    normalized = label.strip().lower()
    return normalized if normalized in CONDITION_MAP else fallback


def map_condition(label: Any) -> ConditionAdjustment:
    return CONDITION_MAP[normalize_condition(label)]


def mileage_bracket(km: int) -> MileageBracket | None:
    for bracket in MILEAGE_BRACKETS:
        if bracket.contains(km):
            return bracket
    return None


def map_mileage(km: int, base_price: float) -> Adjustment | None:
    bracket = mileage_bracket(km)
    if bracket is None:
        return None
    return Adjustment(
        label=f"Mileage Adjustment ({km:,} km)",
        category="mileage",
        score_delta=bracket.score_delta,
        value_delta=-round_half_up(base_price * abs(bracket.value_percent)),
    )


def interior_adjustment(condition: Any, base_price: float) -> Adjustment:
    label = normalize_condition(condition)
    mapped = CONDITION_MAP[label]
    return Adjustment(
        label=f"Interior: {label}",
        category="interior",
        score_delta=mapped.score_delta,
        value_delta=round_half_up(base_price * mapped.value_percent),
    )


def repair_adjustments(
    cost_breakdown: Iterable[Mapping[str, Any]],
    config: ValuationConfig = DEFAULT_CONFIG,
) -> list[Adjustment]:
    """One exterior adjustment per priced repair item, in input order."""
    adjustments: list[Adjustment] = []
    for item in cost_breakdown:
        cost = parse_price_with_default(item.get("cost"), 0)
        adjustments.append(
            Adjustment(
                label=f"Repair: {item.get('part', 'unknown')}",
                category="exterior",
                score_delta=config.repair_score_delta,
                value_delta=-round_half_up(cost),
            )
        )
    return adjustments


def fallback_interior(base_price: float, config: ValuationConfig = DEFAULT_CONFIG) -> InteriorAssessment:
    adjustment = interior_adjustment(config.fallback_condition, base_price)
    return InteriorAssessment(
        condition=config.fallback_condition,
        score_delta=adjustment.score_delta,
        value_delta=adjustment.value_delta,
        reasons=(config.fallback_reason,),
        degraded=True,
    )


def assess_interior(
    raw_text: str | None,
    base_price: float,
    config: ValuationConfig = DEFAULT_CONFIG,
) -> InteriorAssessment:
    """Turn interior classifier text into an assessment.

    Unparseable text degrades to the fallback condition instead of raising.
    """
    try:
        parsed = parse_json_object(raw_text)
    except ParseError as exc:
        logger.warning(
            "Interior classification unparseable, using fallback",
            extra={"extra_data": {"kind": exc.kind.value, "error": str(exc)}},
        )
        return fallback_interior(base_price, config)

    condition = normalize_condition(parsed.get("condition"), config.fallback_condition)
    adjustment = interior_adjustment(condition, base_price)
    reasons = parsed.get("reasons") or []
    if not isinstance(reasons, list):
        reasons = [reasons]
    return InteriorAssessment(
        condition=condition,
        score_delta=adjustment.score_delta,
        value_delta=adjustment.value_delta,
        reasons=tuple(str(r) for r in reasons),
    )
