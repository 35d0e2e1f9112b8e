"""ORM models for the fulfillment kernel."""

from fulfillment_kernel.models.order import Order
from fulfillment_kernel.models.sourcing import SheetTag, SourcingRow
from fulfillment_kernel.models.stock import ShipmentReservation, WarehouseStockRecord

__all__ = [
    "Order",
    "SheetTag",
    "ShipmentReservation",
    "SourcingRow",
    "WarehouseStockRecord",
]
