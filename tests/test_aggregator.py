import json

from valuation.aggregator import aggregate
from valuation.data_models import Adjustment


def _adj(value_delta, category="exterior"):
    return Adjustment(label="x", category=category, score_delta=0, value_delta=value_delta)


def test_no_adjustments():
    v = aggregate(500000, [])
    assert v.preliminary_value == 500000
    assert (v.value_range.min, v.value_range.max) == (490000, 510000)


def test_sum_of_deltas():
    v = aggregate(500000, [_adj(-35000), _adj(-15000)])
    assert v.preliminary_value == 450000
    assert (v.value_range.min, v.value_range.max) == (440000, 460000)
    assert v.total_delta == -50000


def test_order_independent_total_but_order_preserved():
    a, b = _adj(-35000, "interior"), _adj(-15000, "mileage")
    first = aggregate(500000, [a, b])
    second = aggregate(500000, [b, a])
    assert first.preliminary_value == second.preliminary_value
    assert first.adjustments == (a, b)


def test_negative_preliminary_value_is_not_clamped():
    v = aggregate(20000, [_adj(-35000)])
    assert v.preliminary_value == -15000
    assert v.value_range.min == -25000


def test_custom_half_width():
    v = aggregate(100000, [], half_width=2500)
    assert (v.value_range.min, v.value_range.max) == (97500, 102500)


def test_idempotent_serialization():
    adjustments = [_adj(-12000), _adj(-25000, "mileage")]
    first = json.dumps(aggregate(500000, adjustments).to_dict(), sort_keys=True)
    second = json.dumps(aggregate(500000, adjustments).to_dict(), sort_keys=True)
    assert first == second
