"""
WarehouseStockStore -- read-only Warehouse Stock Store over SQLAlchemy.

Allocation never writes warehouse stock.  ``read(..., lock=True)`` takes
row locks (SELECT ... FOR UPDATE) on the barcode's records for the rest of
the caller's transaction, which serializes concurrent allocations of the
same barcode on PostgreSQL.
"""

from sqlalchemy import select

from fulfillment_kernel.domain.dtos import StockRecordData
from fulfillment_kernel.models.stock import WarehouseStockRecord
from fulfillment_kernel.stores.base import BaseStore


class WarehouseStockStore(BaseStore):
    store_name = "warehouse_stock"

    def read(
        self, tenant_id: str, barcode: str, *, lock: bool = False
    ) -> list[StockRecordData]:
        stmt = (
            select(WarehouseStockRecord)
            .where(
                WarehouseStockRecord.tenant_id == tenant_id,
                WarehouseStockRecord.barcode == barcode,
            )
            .order_by(WarehouseStockRecord.id)
        )
        if lock:
            stmt = stmt.with_for_update()
        with self._reading(tenant_id):
            rows = self.session.execute(stmt).scalars().all()
        return [StockRecordData.from_model(row) for row in rows]
