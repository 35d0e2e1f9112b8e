"""SQLAlchemy implementations of the four record stores."""

from fulfillment_kernel.stores.order_store import OrderStore
from fulfillment_kernel.stores.reservation_store import ShipmentReservationStore
from fulfillment_kernel.stores.sourcing_store import SourcingSheetStore
from fulfillment_kernel.stores.stock_store import WarehouseStockStore

__all__ = [
    "OrderStore",
    "ShipmentReservationStore",
    "SourcingSheetStore",
    "WarehouseStockStore",
]
