"""
OrderStore -- Order Store over SQLAlchemy.

page_read returns orders of a tenant in ascending id order so that
consecutive pages neither skip nor repeat rows.  write updates the single
column the matcher owns.
"""

from sqlalchemy import select, update

from fulfillment_kernel.domain.dtos import OrderRow
from fulfillment_kernel.exceptions import StoreWriteError
from fulfillment_kernel.models.order import Order
from fulfillment_kernel.stores.base import BaseStore

WRITABLE_COLUMNS = frozenset({"purchase_status"})


class OrderStore(BaseStore):
    store_name = "orders"

    def page_read(self, tenant_id: str, page: int, page_size: int) -> list[OrderRow]:
        with self._reading(tenant_id):
            rows = self.session.execute(
                select(Order)
                .where(Order.tenant_id == tenant_id)
                .order_by(Order.id)
                .offset(page * page_size)
                .limit(page_size)
            ).scalars().all()
        return [OrderRow.from_model(row) for row in rows]

    def write(self, order_id: int, tenant_id: str, values: dict[str, str]) -> None:
        """
        Update the writable columns of one order.

        Raises:
            StoreWriteError: unknown column, no such order, or a DB failure.
        """
        unknown = set(values) - WRITABLE_COLUMNS
        if unknown:
            raise StoreWriteError(
                self.store_name, "update", f"columns not writable: {sorted(unknown)}"
            )
        with self._writing("update"):
            result = self.session.execute(
                update(Order)
                .where(Order.id == order_id, Order.tenant_id == tenant_id)
                .values(**values)
            )
        if result.rowcount == 0:
            raise StoreWriteError(
                self.store_name, "update", f"order {order_id} not found for tenant"
            )
