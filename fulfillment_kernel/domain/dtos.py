"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable records that flow between the record stores, the
    pure engines and the entry points: OrderRow and SourcingRowData (matcher
    input), MatchResultEntry and ReconcileResult (matcher output),
    StockRecordData, ReservationData and NewReservation (allocator input and
    store payloads), ReservationInfo and AllocationResult (allocator output).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Free of ORM dependencies.  from_model() class methods are boundary
    converters invoked only from the store layer.

Invariants enforced:
    - Engines accept and return DTOs, never ORM entities.
    - All DTOs are frozen; sequences are tuples.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fulfillment_kernel.models.order import Order
    from fulfillment_kernel.models.sourcing import SourcingRow
    from fulfillment_kernel.models.stock import (
        ShipmentReservation,
        WarehouseStockRecord,
    )


# ============================================================================
# Matcher inputs
# ============================================================================


@dataclass(frozen=True)
class OrderRow:
    """The slice of an order the matcher needs."""

    id: int
    order_number: str
    recipient_name: str

    @classmethod
    def from_model(cls, model: Order) -> OrderRow:
        return cls(
            id=model.id,
            order_number=model.order_number or "",
            recipient_name=model.recipient_name or "",
        )


@dataclass(frozen=True)
class SourcingRowData:
    """One sourcing sheet row as seen by the matcher."""

    id: int
    row_ref: str
    shipment_info: str
    quantity_ordered: int = 0
    quantity_imported: int = 0
    quantity_shipped: int = 0
    composition_note: str = ""
    sheet_tag: str = ""

    @classmethod
    def from_model(cls, model: SourcingRow) -> SourcingRowData:
        return cls(
            id=model.id,
            row_ref=model.row_ref,
            shipment_info=model.shipment_info or "",
            quantity_ordered=model.quantity_ordered or 0,
            quantity_imported=model.quantity_imported or 0,
            quantity_shipped=model.quantity_shipped or 0,
            composition_note=model.composition_note or "",
            sheet_tag=model.sheet_tag or "",
        )


# ============================================================================
# Matcher outputs
# ============================================================================


@dataclass(frozen=True)
class MatchResultEntry:
    """One matched, non-cancelled order and the status derived for it."""

    order_id: int
    order_number: str
    recipient_name: str
    matched_row_id: int
    matched_row_ref: str
    match_type: str
    purchase_status: str
    written: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "order_id": self.order_id,
            "order_number": self.order_number,
            "recipient_name": self.recipient_name,
            "matched_row_id": self.matched_row_id,
            "matched_row_ref": self.matched_row_ref,
            "match_type": self.match_type,
            "purchase_status": self.purchase_status,
            "written": self.written,
        }


@dataclass(frozen=True)
class ReconcileResult:
    """
    Outcome of one matcher pass over a tenant.

    matched_count counts successful writes only; results lists every
    matched, non-cancelled order whether or not its write succeeded.
    """

    matched_count: int
    results: tuple[MatchResultEntry, ...] = ()
    total_orders: int = 0
    total_sourcing_rows: int = 0
    message: str = ""
    processing_time_ms: float = 0.0

    @property
    def failed_count(self) -> int:
        return sum(1 for entry in self.results if not entry.written)

    def to_dict(self) -> dict[str, Any]:
        return {
            "matched_count": self.matched_count,
            "failed_count": self.failed_count,
            "total_orders": self.total_orders,
            "total_sourcing_rows": self.total_sourcing_rows,
            "message": self.message,
            "processing_time_ms": self.processing_time_ms,
            "results": [entry.to_dict() for entry in self.results],
        }


# ============================================================================
# Allocator inputs / store payloads
# ============================================================================


@dataclass(frozen=True)
class StockRecordData:
    """A warehouse stock record."""

    id: int
    barcode: str
    quantity: int
    location: str | None = None
    note: str | None = None
    item_name: str | None = None

    @classmethod
    def from_model(cls, model: WarehouseStockRecord) -> StockRecordData:
        return cls(
            id=model.id,
            barcode=model.barcode,
            quantity=model.quantity or 0,
            location=model.location,
            note=model.note,
            item_name=model.item_name,
        )


@dataclass(frozen=True)
class ReservationData:
    """An existing shipment reservation (claim ticket)."""

    id: int
    source_record_id: int
    barcode: str
    quantity: int
    location: str | None = None
    note: str | None = None
    item_name: str | None = None

    @classmethod
    def from_model(cls, model: ShipmentReservation) -> ReservationData:
        return cls(
            id=model.id,
            source_record_id=model.source_record_id,
            barcode=model.barcode,
            quantity=model.quantity,
            location=model.location,
            note=model.note,
            item_name=model.item_name,
        )


@dataclass(frozen=True)
class NewReservation:
    """A reservation to be inserted; the store assigns its id."""

    source_record_id: int
    barcode: str
    quantity: int
    location: str | None = None
    note: str | None = None
    item_name: str | None = None


# ============================================================================
# Allocator outputs
# ============================================================================


@dataclass(frozen=True)
class ReservationInfo:
    """A reservation as reported back to callers."""

    id: int
    source_record_id: int
    barcode: str
    quantity: int
    location: str | None = None
    note: str | None = None

    @classmethod
    def from_data(cls, data: ReservationData) -> ReservationInfo:
        return cls(
            id=data.id,
            source_record_id=data.source_record_id,
            barcode=data.barcode,
            quantity=data.quantity,
            location=data.location,
            note=data.note,
        )


@dataclass(frozen=True)
class AllocationResult:
    """
    Outcome of one allocator call.

    Never a partial success: success is True only when the reservation set
    reflects the requested quantity exactly.
    """

    success: bool
    message: str
    barcode: str
    previous_total: int = 0
    new_total: int = 0
    shortfall: int = 0
    error_code: str | None = None
    reservations: tuple[ReservationInfo, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "barcode": self.barcode,
            "previous_total": self.previous_total,
            "new_total": self.new_total,
            "shortfall": self.shortfall,
            "error_code": self.error_code,
            "reservations": [
                {
                    "id": r.id,
                    "source_record_id": r.source_record_id,
                    "quantity": r.quantity,
                    "location": r.location,
                    "note": r.note,
                }
                for r in self.reservations
            ],
        }
