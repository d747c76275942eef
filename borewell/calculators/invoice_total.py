from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

import structlog

from borewell.calculators.slab_cost import compute
from borewell.domain.models import CalculationResult, SlabRate

logger = structlog.get_logger(__name__)


class BoreType(str, Enum):
    NEW_BORE = "New Bore"
    REPAIR_BORE = "Repair Bore"


class DocumentType(str, Enum):
    INVOICE = "Invoice"
    QUOTATION = "Quotation"


@dataclass(frozen=True)
class CasingLine:
    label: str  # e.g. '7"', '10"'
    depth: float
    rate: float

    @property
    def amount(self) -> float:
        return self.depth * self.rate


@dataclass(frozen=True)
class InvoiceItem:
    """Extra itemised charge (cap, motor, ...)."""

    description: str
    quantity: float
    rate: float

    @property
    def amount(self) -> float:
        return self.quantity * self.rate


@dataclass(frozen=True)
class BorewellJob:
    depth: float
    casings: List[CasingLine] = field(default_factory=list)
    bata: float = 0.0
    extra_time: float = 0.0
    transport_charges: float = 0.0
    discount_amount: float = 0.0
    # repair bore
    old_bore_depth: float = 0.0
    flushing_rate: float = 0.0
    drilling_buffer: float = 0.0
    bore_type: BoreType = BoreType.NEW_BORE


@dataclass(frozen=True)
class InvoiceTotals:
    drilling: CalculationResult
    casing_lines: List[CasingLine]
    casing_cost: float
    flat_charges: float
    items_total: float
    discount: float
    grand_total: float

    def to_payload(self) -> Dict[str, Any]:
        return {
            "drilling": self.drilling.to_payload(),
            "casing": [
                {"label": c.label, "depth": c.depth, "rate": c.rate, "amount": c.amount}
                for c in self.casing_lines
            ],
            "casingCost": self.casing_cost,
            "flatCharges": self.flat_charges,
            "itemsTotal": self.items_total,
            "discount": self.discount,
            "grandTotal": self.grand_total,
        }


def assemble_invoice(
    job: BorewellJob,
    items: Iterable[InvoiceItem] = (),
    rates: Optional[Sequence[SlabRate]] = None,
) -> InvoiceTotals:
    """
    grand_total = drilling + casing + (transport + bata + extra_time) + items - discount

    Old-bore fields are billed whenever they are set, independent of bore_type.
    """
    drilling = compute(
        job.depth,
        job.old_bore_depth,
        job.flushing_rate,
        rates,
        job.drilling_buffer,
    )

    casing_lines = [c for c in job.casings if c.depth]
    casing_cost = sum(c.amount for c in casing_lines)
    flat_charges = job.transport_charges + job.bata + job.extra_time
    items_total = sum(i.amount for i in items)

    grand_total = (
        drilling.total_cost + casing_cost + flat_charges + items_total - job.discount_amount
    )

    logger.debug(
        "invoice_assembled",
        bore_type=job.bore_type.value,
        drilling=drilling.total_cost,
        casing=casing_cost,
        items=items_total,
        grand_total=grand_total,
    )

    return InvoiceTotals(
        drilling=drilling,
        casing_lines=casing_lines,
        casing_cost=casing_cost,
        flat_charges=flat_charges,
        items_total=items_total,
        discount=job.discount_amount,
        grand_total=grand_total,
    )
