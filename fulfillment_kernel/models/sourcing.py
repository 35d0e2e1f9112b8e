"""
Module: fulfillment_kernel.models.sourcing
Responsibility: ORM persistence for rows synced from the seller's external
    sourcing (procurement) sheet.  Each row is a batch being sourced to fulfill
    one or more customer orders.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Read-only to the kernel.  Rows are written by the sheet sync, which is
      outside this code base.
    - shipment_info holds either "P-<order_number> <recipient_name>" or
      "P-<recipient_name>"; rows without the prefix are never matched.
    - sheet_tag "C" marks a cancelled row, never used as a match target.
"""

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fulfillment_kernel.db.base import TenantScopedBase


class SheetTag:
    """Single-letter status tags used in the sourcing sheet."""

    NEW = "N"
    PAID = "P"
    IN_PROGRESS = "O"
    CANCELLED = "C"


class SourcingRow(TenantScopedBase):
    """
    One line of the sourcing sheet.

    Guarantees:
        - (tenant_id, shipment_info) index supports the prefix scan.
        - Quantities default to 0.
    """

    __tablename__ = "sourcing_rows"

    __table_args__ = (
        Index("idx_sourcing_tenant_id", "tenant_id", "id"),
        Index("idx_sourcing_tenant_shipment", "tenant_id", "shipment_info"),
    )

    # Human-facing reference of the sheet row (sheet name + row number)
    row_ref: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    shipment_info: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    quantity_ordered: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    quantity_imported: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    quantity_shipped: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    composition_note: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    sheet_tag: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<SourcingRow {self.id}: ref={self.row_ref} "
            f"info={self.shipment_info!r} tag={self.sheet_tag}>"
        )
