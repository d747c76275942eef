from .slab_cost import apply_buffer, calculate_drilling_cost, compute
from .invoice_total import (
    BorewellJob,
    BoreType,
    CasingLine,
    DocumentType,
    InvoiceItem,
    InvoiceTotals,
    assemble_invoice,
)

__all__ = [
    "apply_buffer",
    "calculate_drilling_cost",
    "compute",
    "BorewellJob",
    "BoreType",
    "CasingLine",
    "DocumentType",
    "InvoiceItem",
    "InvoiceTotals",
    "assemble_invoice",
]
