"""
Module: fulfillment_kernel.selectors.shipment_selector
Responsibility: Read-side queries over warehouse stock and shipment
    reservations: per-barcode reservation listings, per-tenant reserved
    totals, and remaining available stock under the claim ledger.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - available = sum(stock.quantity where quantity > 0)
                  - sum(reservations against those records), floored at 0
      per record (same rule as fulfillment_engines.allocation.build_lots).
"""

from __future__ import annotations

from sqlalchemy import func, select

from fulfillment_engines.allocation import build_lots
from fulfillment_kernel.domain.dtos import ReservationData, ReservationInfo
from fulfillment_kernel.models.stock import ShipmentReservation
from fulfillment_kernel.selectors.base import BaseSelector
from fulfillment_kernel.stores.reservation_store import ShipmentReservationStore
from fulfillment_kernel.stores.stock_store import WarehouseStockStore


class ShipmentSelector(BaseSelector):
    """Read-only views of the reservation ledger."""

    def reservations_for(self, tenant_id: str, barcode: str) -> list[ReservationInfo]:
        rows = ShipmentReservationStore(self.session).read(tenant_id, barcode)
        return [ReservationInfo.from_data(row) for row in rows]

    def reserved_total(self, tenant_id: str, barcode: str) -> int:
        total = self.session.execute(
            select(func.coalesce(func.sum(ShipmentReservation.quantity), 0))
            .where(
                ShipmentReservation.tenant_id == tenant_id,
                ShipmentReservation.barcode == barcode,
            )
        ).scalar_one()
        return int(total)

    def shipment_totals(self, tenant_id: str) -> dict[str, int]:
        """Reserved quantity per barcode for one tenant; barcodes with none are absent."""
        rows = self.session.execute(
            select(ShipmentReservation.barcode, func.sum(ShipmentReservation.quantity))
            .where(ShipmentReservation.tenant_id == tenant_id)
            .group_by(ShipmentReservation.barcode)
            .order_by(ShipmentReservation.barcode)
        ).all()
        return {barcode: int(total) for barcode, total in rows if total}

    def available_quantity(self, tenant_id: str, barcode: str) -> int:
        """Units of the barcode still free to claim without touching existing claims."""
        stock = WarehouseStockStore(self.session).read(tenant_id, barcode)
        reservations: list[ReservationData] = ShipmentReservationStore(
            self.session
        ).read(tenant_id, barcode)
        return sum(lot.available for lot in build_lots(stock, reservations))
