from __future__ import annotations

import math
from dataclasses import replace
from decimal import Decimal
from typing import Any, List, Optional, Sequence

import structlog

from borewell.domain.models import CalculationResult, CostBreakdownLine, SlabRate
from borewell.rates.telescopic import default_rates

logger = structlog.get_logger(__name__)


def _num(x: Any) -> float:
    # form values arrive half-typed: None / NaN count as 0
    if x is None:
        return 0.0
    v = float(x)
    if math.isnan(v):
        return 0.0
    return v


def format_depth(x: float) -> str:
    """
    Depth as the invoice forms print numbers:
    300.0 -> '300', 305.5 -> '305.5', 1e-07 -> '1e-7', inf -> 'Infinity'.
    Exponent form only below 1e-6 or from 1e21 up.
    """
    v = float(x)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Infinity" if v > 0 else "-Infinity"

    a = abs(v)
    if a and (a < 1e-6 or a >= 1e21):
        mantissa, _, exp = repr(v).partition("e")
        sign = "-" if exp.startswith("-") else "+"
        return f"{mantissa}e{sign}{int(exp.lstrip('+-'))}"
    if v.is_integer():
        return str(int(v))
    return format(Decimal(repr(v)), "f")


def _range_label(start: float, end: float) -> str:
    return f"{format_depth(start)} - {format_depth(end)}"


def apply_buffer(
    rates: Sequence[SlabRate], total_depth: float, buffer_limit: float
) -> List[SlabRate]:
    """
    Effective rate table for one job.

    Always returns a new list. With buffer_limit > 0 the first slab that the
    depth overshoots by at most buffer_limit absorbs the overshoot at its own
    rate, and the next slab starts at total_depth. At most one boundary is
    adjusted per call.
    """
    effective = list(rates)
    if buffer_limit <= 0:
        return effective

    for i, slab in enumerate(effective):
        if slab.max_depth < total_depth <= slab.max_depth + buffer_limit:
            effective[i] = replace(slab, max_depth=total_depth)
            if i + 1 < len(effective):
                effective[i + 1] = replace(effective[i + 1], min_depth=total_depth)
            logger.debug(
                "buffer_absorbed",
                slab_index=i,
                slab_max_depth=slab.max_depth,
                total_depth=total_depth,
                buffer_limit=buffer_limit,
            )
            break

    return effective


def compute(
    total_depth: float,
    old_bore_depth: float = 0,
    flushing_rate: float = 0,
    rates: Optional[Sequence[SlabRate]] = None,
    buffer_limit: float = 0,
) -> CalculationResult:
    """
    Tiered (slab) drilling cost.

    1. Re-bore: the part of an existing bore that is flushed again is billed
       at flushing_rate, capped at min(total_depth, old_bore_depth).
    2. Buffer: see apply_buffer().
    3. New drilling starts at max(0, old_bore_depth); every slab bills the
       overlap [max(min_depth, start), min(max_depth, total_depth)) when it
       is non-empty. Slabs are processed in table order, never re-sorted.

    Never raises for numeric input; degenerate input gives a zero result.
    """
    total_depth = _num(total_depth)
    old_bore_depth = _num(old_bore_depth)
    flushing_rate = _num(flushing_rate)
    buffer_limit = _num(buffer_limit)
    table = default_rates() if rates is None else rates

    total_cost = 0.0
    breakdown: List[CostBreakdownLine] = []

    # 1) re-bore / flushing
    if old_bore_depth > 0:
        rebore_depth = min(total_depth, old_bore_depth)
        if rebore_depth > 0:
            amount = rebore_depth * flushing_rate
            total_cost += amount
            breakdown.append(
                CostBreakdownLine(
                    range=_range_label(0, rebore_depth),
                    depth=rebore_depth,
                    rate=flushing_rate,
                    amount=amount,
                )
            )

    # 2) effective table (private copy)
    effective = apply_buffer(table, total_depth, buffer_limit)

    # 3) new drilling
    drilling_start = max(0.0, old_bore_depth)
    for slab in effective:
        start = max(slab.min_depth, drilling_start)
        end = min(slab.max_depth, total_depth)
        if end > start:
            depth = end - start
            amount = depth * slab.rate
            total_cost += amount
            breakdown.append(
                CostBreakdownLine(
                    range=_range_label(start, end),
                    depth=depth,
                    rate=slab.rate,
                    amount=amount,
                )
            )

    logger.debug(
        "drilling_cost_computed",
        total_depth=total_depth,
        old_bore_depth=old_bore_depth,
        lines=len(breakdown),
        total_cost=total_cost,
    )
    return CalculationResult(total_cost=total_cost, breakdown=breakdown)


# name used by the invoice forms
calculate_drilling_cost = compute
