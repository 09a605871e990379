from valuation.config import ValuationConfig
from valuation.pipeline import build_valuation
from valuation.rules import assess_interior, fallback_interior


def test_full_valuation_order_and_total():
    v = build_valuation(
        base_price=500000,
        mileage_km=54000,
        cost_breakdown=[{"part": "bumper", "cost": 12000}],
        interior=assess_interior('{"condition":"poor","reasons":["rip"]}', 500000),
    )
    assert [a.label for a in v.adjustments] == [
        "Repair: bumper",
        "Mileage Adjustment (54,000 km)",
        "Interior: poor",
    ]
    assert v.preliminary_value == 500000 - 12000 - 25000 - 35000
    assert v.total_score_delta == -10 - 7 - 12


def test_low_mileage_and_no_interior_photo():
    v = build_valuation(base_price=500000, mileage_km=12000)
    assert v.adjustments == ()
    assert v.preliminary_value == 500000


def test_failed_interior_still_contributes_fallback():
    v = build_valuation(base_price=500000, interior=fallback_interior(500000))
    assert [a.label for a in v.adjustments] == ["Interior: moderate"]
    assert v.preliminary_value == 485000


def test_config_half_width_applies():
    v = build_valuation(base_price=500000, config=ValuationConfig(value_range_half_width=5000))
    assert (v.value_range.min, v.value_range.max) == (495000, 505000)
