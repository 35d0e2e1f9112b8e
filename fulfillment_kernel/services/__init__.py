"""Kernel services: the order matcher and the shipment allocator."""

from fulfillment_kernel.services.base import BaseService
from fulfillment_kernel.services.key_locks import KeyedLockRegistry
from fulfillment_kernel.services.order_matcher import OrderMatcher
from fulfillment_kernel.services.shipment_allocator import ShipmentAllocator

__all__ = [
    "BaseService",
    "KeyedLockRegistry",
    "OrderMatcher",
    "ShipmentAllocator",
]
