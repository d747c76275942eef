from borewell.calculators.slab_cost import calculate_drilling_cost, compute
from borewell.domain.models import CalculationResult, CostBreakdownLine, SlabRate
from borewell.rates.telescopic import TELESCOPIC_RATES, default_rates

__all__ = [
    "calculate_drilling_cost",
    "compute",
    "CalculationResult",
    "CostBreakdownLine",
    "SlabRate",
    "TELESCOPIC_RATES",
    "default_rates",
]
