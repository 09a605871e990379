from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValuationConfig:
    default_base_price: int = 500_000
    value_range_half_width: int = 10_000
    repair_score_delta: int = -10
    fallback_condition: str = "moderate"
    fallback_reason: str = "Fallback: analysis failed"


DEFAULT_CONFIG = ValuationConfig()
