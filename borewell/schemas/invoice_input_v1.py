# borewell/schemas/invoice_input_v1.py
from __future__ import annotations

import math
import re
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator, model_validator

from borewell.calculators.invoice_total import (
    BorewellJob,
    BoreType,
    CasingLine,
    DocumentType,
    InvoiceItem,
    InvoiceTotals,
    assemble_invoice,
)
from borewell.core.settings import Settings
from borewell.domain.models import SlabRate
from borewell.schemas.rate_profile_v1 import SlabRateV1

_PHONE_STRIP_RE = re.compile(r"[\s\-().]")

_NUMERIC_FIELDS = (
    "depth",
    "casing_depth_7",
    "casing_rate_7",
    "casing_depth_10",
    "casing_rate_10",
    "bata",
    "extra_time",
    "transport_charges",
    "discount_amount",
    "old_bore_depth",
    "flushing_rate",
    "drilling_buffer",
)


def _safe_number(v: Any) -> float:
    if v is None or (isinstance(v, str) and not v.strip()):
        return 0.0
    try:
        f = float(v)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(f) else f


class BorewellDetailsV1(BaseModel):
    """
    Job inputs as the invoice form stores them.
    Blank / non-numeric values count as 0 so a half-filled form still totals.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    depth: float = 0.0
    casing_depth_7: float = Field(0.0, alias="casingDepth7")
    casing_rate_7: float = Field(0.0, alias="casingRate7")
    casing_depth_10: float = Field(0.0, alias="casingDepth10")
    casing_rate_10: float = Field(0.0, alias="casingRate10")
    bata: float = 0.0
    extra_time: float = Field(0.0, alias="extraTime")
    transport_charges: float = Field(0.0, alias="transportCharges")
    discount_amount: float = Field(0.0, alias="discountAmount")

    # repair bore
    old_bore_depth: float = Field(0.0, alias="oldBoreDepth")
    flushing_rate: float = Field(0.0, alias="flushingRate")
    drilling_buffer: float = Field(0.0, alias="drillingBuffer")

    # rate table the document was priced with
    applied_rates: Optional[List[SlabRateV1]] = Field(None, alias="appliedRates")

    @model_validator(mode="before")
    @classmethod
    def _migrate_single_casing(cls, data: Any) -> Any:
        # older documents had one casing size: casingDepth / casingRate
        if not isinstance(data, dict):
            return data
        if "casingDepth" not in data and "casingRate" not in data:
            return data
        data = dict(data)
        legacy_depth = data.pop("casingDepth", None)
        legacy_rate = data.pop("casingRate", None)
        if legacy_depth and not data.get("casingDepth7"):
            data["casingDepth7"] = legacy_depth
        if legacy_rate and not data.get("casingRate7"):
            data["casingRate7"] = legacy_rate
        return data

    @field_validator(*_NUMERIC_FIELDS, mode="before")
    @classmethod
    def _coerce_number(cls, v: Any) -> float:
        return _safe_number(v)

    @classmethod
    def from_settings(cls, s: Settings, buffer_enabled: Optional[bool] = None) -> "BorewellDetailsV1":
        """
        Blank form pre-filled with the remembered rates.
        buffer_enabled=True/False overrides the remembered buffer with
        enabled_drilling_buffer / 0.
        """
        buffer = s.default_drilling_buffer
        if buffer_enabled is not None:
            buffer = s.enabled_drilling_buffer if buffer_enabled else 0.0
        return cls(
            casing_rate_7=s.default_casing_rate_7,
            casing_rate_10=s.default_casing_rate_10,
            bata=s.default_bata,
            transport_charges=s.default_transport_charges,
            flushing_rate=s.default_flushing_rate,
            drilling_buffer=buffer,
        )

    def to_job(self, bore_type: BoreType = BoreType.NEW_BORE) -> BorewellJob:
        return BorewellJob(
            depth=self.depth,
            casings=[
                CasingLine('7"', self.casing_depth_7, self.casing_rate_7),
                CasingLine('10"', self.casing_depth_10, self.casing_rate_10),
            ],
            bata=self.bata,
            extra_time=self.extra_time,
            transport_charges=self.transport_charges,
            discount_amount=self.discount_amount,
            old_bore_depth=self.old_bore_depth,
            flushing_rate=self.flushing_rate,
            drilling_buffer=self.drilling_buffer,
            bore_type=bore_type,
        )


class InvoiceItemV1(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    description: constr(strip_whitespace=True, min_length=1)  # type: ignore
    quantity: float = 1.0
    rate: float = 0.0

    @property
    def amount(self) -> float:
        return self.quantity * self.rate

    def to_domain(self) -> InvoiceItem:
        return InvoiceItem(description=self.description, quantity=self.quantity, rate=self.rate)


class CustomerDetailsV1(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = ""
    phone: str = ""
    address: str = ""
    date: str = ""
    invoice_number: str = Field("", alias="invoiceNumber")

    @field_validator("phone", mode="before")
    @classmethod
    def _check_phone(cls, v: Any) -> str:
        if v is None:
            return ""
        digits = _PHONE_STRIP_RE.sub("", str(v))
        if digits and (len(digits) != 10 or not digits.isdigit()):
            raise ValueError("Phone number must be exactly 10 digits")
        return digits


class InvoiceV1(BaseModel):
    """Invoice / quotation document (as persisted by the caller)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    customer: CustomerDetailsV1 = Field(default_factory=CustomerDetailsV1)
    borewell: BorewellDetailsV1 = Field(default_factory=BorewellDetailsV1)
    items: List[InvoiceItemV1] = Field(default_factory=list)
    doc_type: DocumentType = Field(DocumentType.INVOICE, alias="type")
    bore_type: BoreType = Field(BoreType.NEW_BORE, alias="boreType")
    total_amount: Optional[float] = Field(None, alias="totalAmount")
    created_at: Optional[int] = Field(None, alias="createdAt")
    is_deleted: bool = Field(False, alias="isDeleted")

    def effective_rates(self, fallback: Optional[Sequence[SlabRate]] = None) -> Optional[List[SlabRate]]:
        if self.borewell.applied_rates:
            return [r.to_domain() for r in self.borewell.applied_rates]
        return list(fallback) if fallback is not None else None

    def compute_totals(self, fallback_rates: Optional[Sequence[SlabRate]] = None) -> InvoiceTotals:
        return assemble_invoice(
            self.borewell.to_job(self.bore_type),
            [i.to_domain() for i in self.items],
            self.effective_rates(fallback_rates),
        )
