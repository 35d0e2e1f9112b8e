"""
fulfillment_engines.purchase_status -- Fulfillment status derivation.

Responsibility:
    Turn the quantities and tag of a matched sourcing row into the
    purchase_status label written onto the order.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Idempotence: identical rows and labels always yield the same label.
    - Precedence: shipped beats received beats the sheet tag.

Precedence:
    1. quantity_shipped > 0 and == quantity_ordered  -> shipped label,
       followed by "\\n" + composition_note when the note is non-empty.
    2. quantity_imported > 0 and == quantity_ordered -> received label.
    3. otherwise the display name of sheet_tag; unmapped tags pass through.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from fulfillment_kernel.domain.dtos import SourcingRowData

DEFAULT_TAG_LABELS: Mapping[str, str] = MappingProxyType({
    "N": "NEW",
    "P": "PAID",
    "O": "IN_PROGRESS",
})


@dataclass(frozen=True)
class StatusLabels:
    """Display labels used by derive_purchase_status."""

    shipped: str = "SHIPPED"
    received: str = "RECEIVED"
    tag_labels: Mapping[str, str] = field(default_factory=lambda: DEFAULT_TAG_LABELS)

    def tag_label(self, sheet_tag: str) -> str:
        return self.tag_labels.get(sheet_tag, sheet_tag)


DEFAULT_LABELS = StatusLabels()


def is_fully_shipped(row: SourcingRowData) -> bool:
    return row.quantity_shipped > 0 and row.quantity_shipped == row.quantity_ordered


def is_fully_received(row: SourcingRowData) -> bool:
    return row.quantity_imported > 0 and row.quantity_imported == row.quantity_ordered


def derive_purchase_status(
    row: SourcingRowData,
    labels: StatusLabels = DEFAULT_LABELS,
) -> str:
    """Derive the purchase_status label for an order matched to ``row``.

    >>> derive_purchase_status(SourcingRowData(
    ...     id=1, row_ref="r1", shipment_info="P-1", quantity_ordered=5,
    ...     quantity_shipped=5, composition_note="BOX-1"))
    'SHIPPED\\nBOX-1'
    """
    if is_fully_shipped(row):
        if row.composition_note:
            return f"{labels.shipped}\n{row.composition_note}"
        return labels.shipped
    if is_fully_received(row):
        return labels.received
    return labels.tag_label(row.sheet_tag)
