"""
ShipmentReservationStore -- Shipment Reservation Store over SQLAlchemy.

Every statement is scoped by tenant_id; ids from another tenant are never
touched even when passed in.
"""

from collections.abc import Sequence

from sqlalchemy import delete, select, update

from fulfillment_kernel.domain.dtos import NewReservation, ReservationData
from fulfillment_kernel.exceptions import StoreWriteError
from fulfillment_kernel.models.stock import ShipmentReservation
from fulfillment_kernel.stores.base import BaseStore


class ShipmentReservationStore(BaseStore):
    store_name = "shipment_reservations"

    def read(self, tenant_id: str, barcode: str) -> list[ReservationData]:
        """Reservations of one barcode in creation (ascending id) order."""
        with self._reading(tenant_id):
            rows = self.session.execute(
                select(ShipmentReservation)
                .where(
                    ShipmentReservation.tenant_id == tenant_id,
                    ShipmentReservation.barcode == barcode,
                )
                .order_by(ShipmentReservation.id)
            ).scalars().all()
        return [ReservationData.from_model(row) for row in rows]

    def delete(self, tenant_id: str, barcode: str) -> int:
        """Delete every reservation of the barcode; returns the row count."""
        with self._writing("delete"):
            result = self.session.execute(
                delete(ShipmentReservation)
                .where(
                    ShipmentReservation.tenant_id == tenant_id,
                    ShipmentReservation.barcode == barcode,
                )
            )
        return result.rowcount

    def insert(
        self, tenant_id: str, rows: Sequence[NewReservation]
    ) -> list[ReservationData]:
        """Insert reservations in the given order; ids increase with position."""
        models = [
            ShipmentReservation(
                tenant_id=tenant_id,
                source_record_id=row.source_record_id,
                barcode=row.barcode,
                quantity=row.quantity,
                location=row.location,
                note=row.note,
                item_name=row.item_name,
            )
            for row in rows
        ]
        with self._writing("insert"):
            for model in models:
                self.session.add(model)
                # One flush per row keeps ids in list order.
                self.session.flush()
        return [ReservationData.from_model(model) for model in models]

    def update(self, tenant_id: str, reservation_id: int, values: dict[str, int]) -> None:
        if set(values) != {"quantity"}:
            raise StoreWriteError(
                self.store_name, "update", f"only quantity is writable, got {sorted(values)}"
            )
        with self._writing("update"):
            result = self.session.execute(
                update(ShipmentReservation)
                .where(
                    ShipmentReservation.tenant_id == tenant_id,
                    ShipmentReservation.id == reservation_id,
                )
                .values(quantity=values["quantity"])
            )
        if result.rowcount == 0:
            raise StoreWriteError(
                self.store_name, "update", f"reservation {reservation_id} not found"
            )

    def delete_ids(self, tenant_id: str, reservation_ids: Sequence[int]) -> int:
        if not reservation_ids:
            return 0
        with self._writing("delete"):
            result = self.session.execute(
                delete(ShipmentReservation)
                .where(
                    ShipmentReservation.tenant_id == tenant_id,
                    ShipmentReservation.id.in_(list(reservation_ids)),
                )
            )
        return result.rowcount
