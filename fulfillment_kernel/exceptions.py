"""
Typed Exception Hierarchy for the Fulfillment Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the matcher and the allocator need to tell a bad request apart
from a store outage and from a plain stock shortage.  Parsing messages for
that is fragile, so:
  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        allocator.increase(tenant_id, barcode, delta=5)
    except InsufficientStockError as e:
        log.warning("short by %s", e.shortfall)
        api_response(code=e.code, shortfall=e.shortfall)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    FulfillmentKernelError (base)
    |
    +-- InvalidInputError
    |
    +-- StoreError
    |   +-- StoreReadError
    |   +-- StoreWriteError
    |
    +-- AllocationError
    |   +-- InvalidBarcodeError
    |   +-- InsufficientStockError
    |   +-- ReservationNotFoundError
    |   +-- DecreaseExceedsReservedError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                       | When Raised
------------|----------------------------|-------------------------------------------
Input       | INVALID_INPUT              | Missing tenant/barcode, bad quantity
------------|----------------------------|-------------------------------------------
Store       | STORE_READ_FAILED          | Page load or lookup failed (fatal)
            | STORE_WRITE_FAILED         | Update/insert/delete failed
------------|----------------------------|-------------------------------------------
Allocation  | INVALID_BARCODE            | No warehouse stock rows for barcode
            | INSUFFICIENT_STOCK         | Requested more than is available
            | RESERVATION_NOT_FOUND      | Decrease on a barcode with no reservations
            | DECREASE_EXCEEDS_RESERVED  | Decrease larger than the reserved total
------------|----------------------------|-------------------------------------------
Config      | CONFIGURATION_ERROR        | YAML value missing or invalid

===============================================================================
HANDLING PATTERNS
===============================================================================

1. The matcher treats StoreWriteError as per-order and keeps going; a
   StoreReadError aborts the pass.

2. Allocator entry points convert any FulfillmentKernelError into a failed
   AllocationResult after rolling back, so callers see success/message and
   the error code, never a half-applied reservation set.
"""


class FulfillmentKernelError(Exception):
    """
    Base exception for all fulfillment kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "FULFILLMENT_KERNEL_ERROR"


# Input validation


class InvalidInputError(FulfillmentKernelError):
    """A required identifier is missing or a quantity is out of range."""

    code: str = "INVALID_INPUT"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


# Store-related exceptions


class StoreError(FulfillmentKernelError):
    """Base exception for record store failures."""

    code: str = "STORE_ERROR"


class StoreReadError(StoreError):
    """Reading from a record store failed."""

    code: str = "STORE_READ_FAILED"

    def __init__(self, store: str, tenant_id: str, detail: str):
        self.store = store
        self.tenant_id = tenant_id
        self.detail = detail
        super().__init__(f"Read from {store} failed for tenant {tenant_id}: {detail}")


class StoreWriteError(StoreError):
    """Writing to a record store failed."""

    code: str = "STORE_WRITE_FAILED"

    def __init__(self, store: str, operation: str, detail: str):
        self.store = store
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} on {store} failed: {detail}")


# Allocation-related exceptions


class AllocationError(FulfillmentKernelError):
    """Base exception for shipment allocation errors."""

    code: str = "ALLOCATION_ERROR"


class InvalidBarcodeError(AllocationError):
    """No warehouse stock rows exist for the barcode, so nothing can be drawn."""

    code: str = "INVALID_BARCODE"

    def __init__(self, barcode: str):
        self.barcode = barcode
        super().__init__(f"No warehouse stock found for barcode {barcode}")


class InsufficientStockError(AllocationError):
    """Available warehouse stock does not cover the requested quantity."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, barcode: str, requested: int, available: int):
        self.barcode = barcode
        self.requested = requested
        self.available = available
        self.shortfall = requested - available
        super().__init__(
            f"Insufficient stock for barcode {barcode}: requested {requested}, "
            f"only {available} available (short by {self.shortfall})"
        )


class ReservationNotFoundError(AllocationError):
    """There are no reservations to shrink for the barcode."""

    code: str = "RESERVATION_NOT_FOUND"

    def __init__(self, barcode: str):
        self.barcode = barcode
        super().__init__(f"No shipment reservations found for barcode {barcode}")


class DecreaseExceedsReservedError(AllocationError):
    """Decrease asks to release more than is currently reserved."""

    code: str = "DECREASE_EXCEEDS_RESERVED"

    def __init__(self, barcode: str, delta: int, reserved: int):
        self.barcode = barcode
        self.delta = delta
        self.reserved = reserved
        super().__init__(
            f"Cannot release {delta} from barcode {barcode}: "
            f"only {reserved} reserved"
        )


# Configuration


class ConfigurationError(FulfillmentKernelError):
    """Configuration document is missing a value or holds an invalid one."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration '{key}': {reason}")
