from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


ConditionLabel = Literal["good", "moderate", "poor"]
AdjustmentCategory = Literal["exterior", "mileage", "interior"]


@dataclass(frozen=True)
class ConditionAdjustment:
    score_delta: int
    value_percent: float


@dataclass(frozen=True)
class MileageBracket:
    lower_km: int
    upper_km: int | None
    score_delta: int
    value_percent: float

    def contains(self, km: int) -> bool:
        # Lower bound exclusive, upper bound inclusive.
        if km <= self.lower_km:
            return False
        return self.upper_km is None or km <= self.upper_km


@dataclass(frozen=True)
class Adjustment:
    label: str
    category: AdjustmentCategory
    score_delta: int
    value_delta: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "category": self.category,
            "scoreDelta": self.score_delta,
            "valueDelta": self.value_delta,
        }


@dataclass(frozen=True)
class ValueRange:
    min: float
    max: float


@dataclass(frozen=True)
class Valuation:
    base_price: float
    adjustments: tuple[Adjustment, ...]
    preliminary_value: float
    value_range: ValueRange

    @property
    def total_delta(self) -> int:
        return sum(a.value_delta for a in self.adjustments)

    @property
    def total_score_delta(self) -> int:
        return sum(a.score_delta for a in self.adjustments)

    def to_dict(self) -> dict[str, Any]:
        return {
            "basePrice": self.base_price,
            "adjustments": [a.to_dict() for a in self.adjustments],
            "preliminaryValue": self.preliminary_value,
            "valueRange": {"min": self.value_range.min, "max": self.value_range.max},
        }


@dataclass(frozen=True)
class InteriorAssessment:
    condition: ConditionLabel
    score_delta: int
    value_delta: int
    reasons: tuple[str, ...] = field(default_factory=tuple)
    degraded: bool = False

    def to_adjustment(self) -> Adjustment:
        return Adjustment(
            label=f"Interior: {self.condition}",
            category="interior",
            score_delta=self.score_delta,
            value_delta=self.value_delta,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "condition": self.condition,
            "scoreDelta": self.score_delta,
            "valueDelta": self.value_delta,
            "reasons": list(self.reasons),
            "degraded": self.degraded,
        }
