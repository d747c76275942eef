from __future__ import annotations

from pathlib import Path
from typing import Sequence

from borewell.domain.models import SlabRate

from .common import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    _err,
    _warn,
    get_cell,
    parse_csv,
    to_float,
)

DATASET = "slab_rates"

H_MIN = ["MinDepth", "Min", "From"]
H_MAX = ["MaxDepth", "Max", "To"]
H_RATE = ["Rate", "RatePerFoot"]

REQUIRED_HEADERS = [H_MIN, H_MAX, H_RATE]


def validate_slab_table(rates: Sequence[SlabRate]) -> ValidationResult:
    """
    Editor-side checks. The calculator itself accepts any table; these only
    tell the operator where a table would bill depth twice or not at all.

    Errors: EMPTY_TABLE, NEGATIVE_VALUE, INVALID_RANGE
    Warnings: ZERO_WIDTH, UNSORTED, OVERLAP, COVERAGE_GAP, NOT_FROM_ZERO
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []

    if not rates:
        errors.append(_err(DATASET, None, None, "EMPTY_TABLE", "Rate table has no slabs."))
        return ValidationResult(ok=False, errors=errors, warnings=warnings)

    for idx, s in enumerate(rates):
        rownum = idx + 1
        for name, v in (("minDepth", s.min_depth), ("maxDepth", s.max_depth), ("rate", s.rate)):
            if v < 0:
                errors.append(_err(DATASET, rownum, name, "NEGATIVE_VALUE", f"{name} must be >= 0."))
        if s.max_depth < s.min_depth:
            errors.append(
                _err(
                    DATASET,
                    rownum,
                    "maxDepth",
                    "INVALID_RANGE",
                    f"maxDepth ({s.max_depth}) is below minDepth ({s.min_depth}).",
                )
            )
        elif s.max_depth == s.min_depth:
            warnings.append(
                _warn(DATASET, rownum, "maxDepth", "ZERO_WIDTH", "Slab covers no depth and never bills.")
            )

    if errors:
        return ValidationResult(ok=False, errors=errors, warnings=warnings)

    # table order is billing order
    for idx in range(len(rates) - 1):
        prev, nxt = rates[idx], rates[idx + 1]
        rownum = idx + 2
        if nxt.min_depth < prev.min_depth:
            warnings.append(
                _warn(
                    DATASET,
                    rownum,
                    "minDepth",
                    "UNSORTED",
                    f"Slab starts at {nxt.min_depth}, before the previous slab ({prev.min_depth}).",
                )
            )
        elif nxt.min_depth < prev.max_depth:
            warnings.append(
                _warn(
                    DATASET,
                    rownum,
                    "minDepth",
                    "OVERLAP",
                    f"Ranges overlap: previous ends at {prev.max_depth}, next starts at {nxt.min_depth}.",
                )
            )
        elif nxt.min_depth > prev.max_depth:
            warnings.append(
                _warn(
                    DATASET,
                    rownum,
                    "minDepth",
                    "COVERAGE_GAP",
                    f"Gap found: previous ends at {prev.max_depth}, next starts at {nxt.min_depth}.",
                )
            )

    if min(s.min_depth for s in rates) > 0:
        warnings.append(
            _warn(DATASET, None, "minDepth", "NOT_FROM_ZERO", "First slab does not start at 0 ft.")
        )

    return ValidationResult(ok=True, errors=errors, warnings=warnings)


def load_slab_table_csv(file_path: Path) -> tuple[list[SlabRate], ValidationResult]:
    """
    MinDepth;MaxDepth;Rate
    0;300;85
    300;400;90

    Returns ([], result) when any row is unusable.
    """
    rows = parse_csv(file_path, required_headers=REQUIRED_HEADERS)

    errors: list[ValidationError] = []
    parsed: list[SlabRate] = []

    for idx, r in enumerate(rows):
        rownum = idx + 2  # header is row 1
        values = {}
        for name, aliases in (("minDepth", H_MIN), ("maxDepth", H_MAX), ("rate", H_RATE)):
            v = to_float(get_cell(r, aliases))
            if v is None:
                errors.append(_err(DATASET, rownum, name, "INVALID_NUMBER", f"{name} must be a number."))
            values[name] = v

        if any(v is None for v in values.values()):
            continue
        parsed.append(SlabRate(values["minDepth"], values["maxDepth"], values["rate"]))

    if errors:
        return [], ValidationResult(ok=False, errors=errors, warnings=[])

    return parsed, validate_slab_table(parsed)
