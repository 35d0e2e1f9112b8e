"""
fulfillment_services -- Package init and public API.

Responsibility:
    Transactional entry points over the kernel services.  This is the
    only layer that commits or rolls back a session, reads runtime
    configuration, and serializes allocator calls per (tenant, barcode).

Architecture position:
    Services -- outermost layer.

    Dependency direction:
        fulfillment_services/ -> fulfillment_config/, fulfillment_kernel/,
                                 fulfillment_engines/  (allowed)
        fulfillment_kernel/   -> fulfillment_services/ (FORBIDDEN)
        fulfillment_engines/  -> fulfillment_services/ (FORBIDDEN)
"""

from fulfillment_services.reconciliation import reconcile_purchase_status
from fulfillment_services.shipments import (
    clear_shipment,
    decrease_shipment,
    increase_shipment,
    set_shipment_target,
)

__all__ = [
    "clear_shipment",
    "decrease_shipment",
    "increase_shipment",
    "reconcile_purchase_status",
    "set_shipment_target",
]
