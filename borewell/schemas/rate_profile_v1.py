# borewell/schemas/rate_profile_v1.py
from __future__ import annotations

from typing import Any, Iterable, List

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, constr, model_validator

from borewell.domain.models import SlabRate


class SlabRateV1(BaseModel):
    """
    One slab as the rate editor persists it (camelCase JSON).
    Numeric strings ("300") are coerced; anything else non-numeric is rejected.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    min_depth: NonNegativeFloat = Field(alias="minDepth")
    max_depth: NonNegativeFloat = Field(alias="maxDepth")
    rate: NonNegativeFloat

    @model_validator(mode="after")
    def _check_range(self) -> "SlabRateV1":
        if self.max_depth < self.min_depth:
            raise ValueError(
                f"maxDepth ({self.max_depth}) must be >= minDepth ({self.min_depth})"
            )
        return self

    def to_domain(self) -> SlabRate:
        return SlabRate(min_depth=self.min_depth, max_depth=self.max_depth, rate=self.rate)


class RateProfileV1(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: constr(strip_whitespace=True, min_length=1)  # type: ignore
    rates: List[SlabRateV1] = Field(default_factory=list)

    def to_domain(self) -> List[SlabRate]:
        return [r.to_domain() for r in self.rates]


def rates_from_payload(items: Iterable[Any]) -> List[SlabRate]:
    """list[dict] (or SlabRate) -> list[SlabRate], validated."""
    out: List[SlabRate] = []
    for it in items:
        if isinstance(it, SlabRate):
            out.append(it)
        else:
            out.append(SlabRateV1.model_validate(it).to_domain())
    return out


def rates_to_payload(rates: Iterable[SlabRate]) -> List[dict]:
    return [r.to_payload() for r in rates]
