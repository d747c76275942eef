from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


# -----------------------------
# Rate table
# -----------------------------


@dataclass(frozen=True)
class SlabRate:
    """One tier of the rate table: depth in feet, rate per foot."""

    min_depth: float
    max_depth: float
    rate: float

    def to_payload(self) -> Dict[str, Any]:
        return {"minDepth": self.min_depth, "maxDepth": self.max_depth, "rate": self.rate}


# -----------------------------
# Calculation output
# -----------------------------


@dataclass(frozen=True)
class CostBreakdownLine:
    range: str  # display only
    depth: float
    rate: float
    amount: float

    def to_payload(self) -> Dict[str, Any]:
        return {
            "range": self.range,
            "depth": self.depth,
            "rate": self.rate,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class CalculationResult:
    """
    Drilling cost for one job.
    breakdown order = computation order (re-bore line first, then slabs in table order).
    """

    total_cost: float = 0.0
    breakdown: List[CostBreakdownLine] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "totalCost": self.total_cost,
            "breakdown": [line.to_payload() for line in self.breakdown],
        }
