"""
fulfillment_services.shipments -- shipment allocator entry points.

Responsibility:
    Validate the request, serialize calls per (tenant, barcode), run the
    ShipmentAllocator inside one transaction and turn the outcome into an
    AllocationResult.

Invariants enforced:
    - All-or-nothing: the session is committed only after the whole plan
      was applied.  Any failure rolls back, so the reservation set is
      left exactly as it was before the call.
    - Never a partial success: a failed call returns success=False with
      the error code; InsufficientStockError also reports the shortfall.
    - InvalidInputError is reported before any store is touched.

Failure modes:
    - FulfillmentKernelError subclasses become failed results.
    - Anything else is rolled back and re-raised.
"""

from __future__ import annotations

from collections.abc import Callable
from uuid import uuid4

from sqlalchemy.orm import Session

from fulfillment_kernel.domain.dtos import AllocationResult
from fulfillment_kernel.domain.validation import (
    require_identifier,
    require_positive_quantity,
    require_quantity,
)
from fulfillment_kernel.exceptions import (
    FulfillmentKernelError,
    InsufficientStockError,
    InvalidInputError,
)
from fulfillment_kernel.logging_config import LogContext, get_logger
from fulfillment_kernel.services.key_locks import KeyedLockRegistry
from fulfillment_kernel.services.shipment_allocator import ShipmentAllocator

logger = get_logger("services.shipments")

_locks = KeyedLockRegistry()


def set_shipment_target(
    session: Session, tenant_id: str, barcode: str, new_quantity: int
) -> AllocationResult:
    """Make the barcode's reservations total exactly ``new_quantity``."""
    return _run(
        session, "set_shipment_target", tenant_id, barcode, new_quantity,
        "new_quantity", require_quantity, ShipmentAllocator.set_target,
    )


def increase_shipment(
    session: Session, tenant_id: str, barcode: str, delta: int
) -> AllocationResult:
    return _run(
        session, "increase_shipment", tenant_id, barcode, delta,
        "delta", require_positive_quantity, ShipmentAllocator.increase,
    )


def decrease_shipment(
    session: Session, tenant_id: str, barcode: str, delta: int
) -> AllocationResult:
    return _run(
        session, "decrease_shipment", tenant_id, barcode, delta,
        "delta", require_positive_quantity, ShipmentAllocator.decrease,
    )


def clear_shipment(session: Session, tenant_id: str, barcode: str) -> AllocationResult:
    return set_shipment_target(session, tenant_id, barcode, 0)


def _run(
    session: Session,
    operation: str,
    tenant_id: str,
    barcode: str,
    quantity: int,
    quantity_field: str,
    check_quantity: Callable[..., int],
    action: Callable[[ShipmentAllocator, str, str, int], AllocationResult],
) -> AllocationResult:
    try:
        tenant_id = require_identifier(tenant_id, "tenant_id")
        barcode = require_identifier(barcode, "barcode")
        quantity = check_quantity(quantity, quantity_field)
    except InvalidInputError as exc:
        logger.warning(
            "allocation_rejected",
            extra={"operation": operation, "field": exc.field, "reason": exc.reason},
        )
        return _failure(barcode if isinstance(barcode, str) else "", exc)

    with _locks.hold((tenant_id, barcode)), LogContext.bind(
        correlation_id=str(uuid4()),
        tenant_id=tenant_id,
        barcode=barcode,
        operation=operation,
    ):
        try:
            result = action(ShipmentAllocator(session), tenant_id, barcode, quantity)
            session.commit()
        except FulfillmentKernelError as exc:
            session.rollback()
            logger.warning(
                "allocation_failed",
                extra={"error_code": exc.code, "error": str(exc)},
            )
            return _failure(barcode, exc)
        except Exception:
            session.rollback()
            logger.exception("allocation_aborted")
            raise
        return result


def _failure(barcode: str, exc: FulfillmentKernelError) -> AllocationResult:
    shortfall = exc.shortfall if isinstance(exc, InsufficientStockError) else 0
    return AllocationResult(
        success=False,
        message=str(exc),
        barcode=barcode,
        shortfall=shortfall,
        error_code=exc.code,
    )
