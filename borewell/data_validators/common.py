from __future__ import annotations

import csv
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

# =========================
# Parsing config (strict)
# =========================

CSV_DELIMITER = ";"


class ParseError(ValueError):
    """Raised when a file cannot be parsed deterministically according to our strict rules."""


def _trim(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip()
    return v


def _is_row_empty(values: Iterable[Any]) -> bool:
    for v in values:
        if v is None:
            continue
        if isinstance(v, str) and v.strip() == "":
            continue
        return False
    return True


def require_headers(headers: list[str], required: list[list[str]], *, source: str) -> None:
    """
    Fail fast if a required column is missing.
    Each required column is a list of accepted aliases; case-insensitive, trimmed.
    """
    normalized = {normalize_header(h) for h in headers if h is not None}
    missing = [
        aliases[0]
        for aliases in required
        if not any(normalize_header(a) in normalized for a in aliases)
    ]
    if missing:
        raise ParseError(f"{source}: missing required headers: {missing}")


def parse_csv(
    file_path: Path,
    *,
    required_headers: Optional[list[list[str]]] = None,
    delimiter: str = CSV_DELIMITER,
) -> list[dict[str, Any]]:
    """
    Strict CSV parsing:
    - delimiter fixed (default ';')
    - trims whitespace on headers + cells
    - skips empty lines
    - headers required (first non-empty row)
    - returns List[dict]
    """
    if not file_path.exists():
        raise ParseError(f"CSV not found: {file_path}")

    rows: list[dict[str, Any]] = []

    with file_path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.reader(f, delimiter=delimiter)

        header_row: Optional[list[str]] = None
        for raw in reader:
            if _is_row_empty(raw):
                continue
            header_row = [str(_trim(c)) for c in raw]
            break

        if header_row is None:
            raise ParseError(f"CSV empty/no header: {file_path}")

        headers = [h.strip() for h in header_row]
        if any(h == "" for h in headers):
            raise ParseError(f"CSV has empty header names: {file_path}")

        if required_headers:
            require_headers(headers, required_headers, source=str(file_path))

        for raw in reader:
            if _is_row_empty(raw):
                continue

            # strict: row length must match header length
            if len(raw) != len(headers):
                raise ParseError(
                    f"CSV row has {len(raw)} cols but header has {len(headers)} cols: {file_path}"
                )

            rows.append({h: _trim(raw[i]) for i, h in enumerate(headers)})

    return rows


# =========================
# Validation outputs + helpers
# =========================


@dataclass(frozen=True)
class ValidationError:
    dataset: str
    row_number: Optional[int]  # None = table-level error
    field: Optional[str]
    error_code: str
    message: str


@dataclass(frozen=True)
class ValidationWarning:
    dataset: str
    row_number: Optional[int]
    field: Optional[str]
    warning_code: str
    message: str


@dataclass
class ValidationResult:
    ok: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    def codes(self) -> list[str]:
        return [e.error_code for e in self.errors] + [w.warning_code for w in self.warnings]


def _err(
    dataset: str,
    row_number: Optional[int],
    field: Optional[str],
    error_code: str,
    message: str,
) -> ValidationError:
    return ValidationError(dataset, row_number, field, error_code, message)


def _warn(
    dataset: str,
    row_number: Optional[int],
    field: Optional[str],
    warning_code: str,
    message: str,
) -> ValidationWarning:
    return ValidationWarning(dataset, row_number, field, warning_code, message)


def normalize_header(h: str) -> str:
    return (h or "").strip().lower()


def get_cell(row: dict[str, Any], header_aliases: list[str]) -> Any:
    """
    Header lookup case-insensitive, supports aliases.
    Uses the original keys as provided by parse_csv.
    """
    norm_map = {normalize_header(k): k for k in row.keys()}
    for alias in header_aliases:
        k = norm_map.get(normalize_header(alias))
        if k is not None:
            return row.get(k)
    return None


def to_str(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip()


def to_float(v: Any) -> Optional[float]:
    """'1,200.50' -> 1200.5; blank or garbage -> None"""
    s = to_str(v).replace(",", "")
    if s == "":
        return None
    try:
        f = float(s)
    except ValueError:
        return None
    return None if math.isnan(f) else f
