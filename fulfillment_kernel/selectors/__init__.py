"""Selectors for the fulfillment kernel (read side)."""

from fulfillment_kernel.selectors.paging import DEFAULT_PAGE_SIZE, PagedReader
from fulfillment_kernel.selectors.shipment_selector import ShipmentSelector

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PagedReader",
    "ShipmentSelector",
]
