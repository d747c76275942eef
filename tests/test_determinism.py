import copy

from borewell.calculators.slab_cost import compute
from borewell.domain.models import SlabRate
from borewell.rates.telescopic import TELESCOPIC_RATES


def test_determinism_same_input_same_output(buffer_rates):
    out1 = compute(305, 0, 0, buffer_rates, 10)
    out2 = compute(305, 0, 0, buffer_rates, 10)

    assert out1 == out2
    assert out1.to_payload() == out2.to_payload()


def test_caller_table_is_not_mutated(buffer_rates):
    snapshot = copy.deepcopy(buffer_rates)

    compute(305, rates=buffer_rates, buffer_limit=10)

    assert buffer_rates == snapshot
    assert buffer_rates[0].max_depth == 300
    assert buffer_rates[1].min_depth == 300


def test_default_table_survives_repeated_calls():
    before = tuple(TELESCOPIC_RATES)

    for depth in (295, 305, 405, 1299):
        compute(depth, buffer_limit=10)

    assert TELESCOPIC_RATES == before
    assert TELESCOPIC_RATES[0] == SlabRate(0, 300, 85)
