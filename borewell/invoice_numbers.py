from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, Mapping, Optional

from borewell.core.settings import get_settings


def next_invoice_number(existing: Iterable[str], prefix: Optional[str] = None) -> str:
    """
    INV-001, INV-002, ... : highest suffix among existing numbers + 1.
    Numbers with another prefix or no numeric suffix are ignored.
    """
    prefix = prefix or get_settings().invoice_number_prefix
    pattern = re.compile(rf"^{re.escape(prefix)}-(\d+)$")

    highest = 0
    for number in existing:
        m = pattern.match((number or "").strip())
        if m:
            highest = max(highest, int(m.group(1)))

    return f"{prefix}-{highest + 1:03d}"


def monthly_invoice_number(
    counters: Mapping[str, int], now: datetime
) -> tuple[str, dict[str, int]]:
    """
    YYMM-NNN, one sequence per month (2501-001, 2501-002, 2502-001, ...).
    Returns the number and a new counters dict; the input mapping is not touched.
    """
    key = now.strftime("%y%m")
    seq = int(counters.get(key, 0)) + 1
    updated = dict(counters)
    updated[key] = seq
    return f"{key}-{seq:03d}", updated
