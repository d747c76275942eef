from .models import CalculationResult, CostBreakdownLine, SlabRate

__all__ = [
    "CalculationResult",
    "CostBreakdownLine",
    "SlabRate",
]
