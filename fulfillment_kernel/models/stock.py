"""
Module: fulfillment_kernel.models.stock
Responsibility: ORM persistence for warehouse stock records and the shipment
    reservations (claim tickets) drawn against them.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    W1 -- Stock records represent total owned physical stock.  Allocation
          never decrements WarehouseStockRecord.quantity.
    W2 -- Every reservation names the stock record it was drawn from
          (source_record_id, NOT NULL, FK).  The reservation has its own
          surrogate id; it does not share the source record's key.
    W3 -- Remaining available stock of a record is derived:
          record.quantity - sum(reservation.quantity for that record).
          The ledger planner never lets that go negative.
    W4 -- Reservation ids increase in creation order; LIFO release walks
          them in descending id order.

Failure modes:
    - IntegrityError if a reservation references a missing stock record.
"""

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fulfillment_kernel.db.base import IdType, TenantScopedBase


class WarehouseStockRecord(TenantScopedBase):
    """
    Physical stock of one barcode at one warehouse location.

    Guarantees:
        - (tenant_id, barcode, id) index gives the draw order.
    """

    __tablename__ = "warehouse_stock"

    __table_args__ = (
        Index("idx_stock_tenant_barcode", "tenant_id", "barcode", "id"),
    )

    barcode: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    item_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    location: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    note: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<WarehouseStockRecord {self.id}: barcode={self.barcode} "
            f"qty={self.quantity} @ {self.location}>"
        )


class ShipmentReservation(TenantScopedBase):
    """
    A claim ticket earmarking part of one stock record for outbound shipment.

    Guarantees:
        - source_record_id always points at an existing stock record (W2).
        - barcode, location, note and item_name are copied from the source
          record at claim time.
    """

    __tablename__ = "shipment_reservations"

    __table_args__ = (
        Index("idx_reservation_tenant_barcode", "tenant_id", "barcode", "id"),
        Index("idx_reservation_source", "source_record_id"),
        {"sqlite_autoincrement": True},
    )

    source_record_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("warehouse_stock.id", ondelete="CASCADE"),
        nullable=False,
    )

    barcode: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    item_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    # Claimed quantity
    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    location: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    note: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<ShipmentReservation {self.id}: barcode={self.barcode} "
            f"qty={self.quantity} from stock {self.source_record_id}>"
        )
