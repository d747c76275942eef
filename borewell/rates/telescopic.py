from __future__ import annotations

from typing import List, Tuple

from borewell.domain.models import SlabRate

# Factory telescopic schedule: each deeper tier is priced higher.
TELESCOPIC_RATES: Tuple[SlabRate, ...] = (
    SlabRate(0, 300, 85),
    SlabRate(300, 400, 90),
    SlabRate(400, 500, 100),
    SlabRate(500, 600, 120),
    SlabRate(600, 700, 150),
    SlabRate(700, 800, 190),
    SlabRate(800, 900, 240),
    SlabRate(900, 1000, 300),
    SlabRate(1000, 1100, 400),
    SlabRate(1100, 1200, 500),
    SlabRate(1200, 1300, 600),
)


def default_rates() -> List[SlabRate]:
    """Fresh list per call; callers may edit it freely."""
    return list(TELESCOPIC_RATES)
