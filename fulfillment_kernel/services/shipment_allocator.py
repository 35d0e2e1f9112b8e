"""
ShipmentAllocator -- keep a barcode's shipment reservations at a target.

Responsibility:
    Read the current reservations and the warehouse stock of one
    (tenant, barcode), ask the allocation engine for a plan, and apply the
    plan through the reservation store.

Architecture position:
    Kernel > Services.  Composes fulfillment_engines.allocation (pure)
    with the stock and reservation stores.  Never commits: the entry
    points in fulfillment_services own the transaction, so a failure
    after a partial apply is undone by their rollback.

Invariants enforced:
    - Plan then apply: every allocation error is raised while planning,
      before the first write.
    - The stock rows are locked with ``lock=True`` before the reservations
      are read, so the reservation snapshot reflects every claim committed
      by an earlier holder of the lock.
    - A NOOP plan issues zero store writes.

Failure modes:
    - InvalidBarcodeError, InsufficientStockError, ReservationNotFoundError,
      DecreaseExceedsReservedError -- from the planner, nothing written.
    - StoreReadError / StoreWriteError -- from the stores.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from fulfillment_engines.allocation import (
    AllocationAction,
    AllocationPlan,
    plan_decrease,
    plan_increase,
    plan_set_target,
)
from fulfillment_kernel.domain.dtos import (
    AllocationResult,
    ReservationData,
    ReservationInfo,
)
from fulfillment_kernel.domain.ports import (
    ShipmentReservationStorePort,
    WarehouseStockStorePort,
)
from fulfillment_kernel.logging_config import get_logger
from fulfillment_kernel.services.base import BaseService
from fulfillment_kernel.stores.reservation_store import ShipmentReservationStore
from fulfillment_kernel.stores.stock_store import WarehouseStockStore

logger = get_logger("services.shipment_allocator")


class ShipmentAllocator(BaseService):
    """Plans and applies reservation changes for one barcode at a time."""

    def __init__(
        self,
        session: Session,
        *,
        stock_store: WarehouseStockStorePort | None = None,
        reservation_store: ShipmentReservationStorePort | None = None,
    ):
        super().__init__(session)
        self.stock_store = stock_store or WarehouseStockStore(session)
        self.reservation_store = reservation_store or ShipmentReservationStore(session)

    def set_target(self, tenant_id: str, barcode: str, quantity: int) -> AllocationResult:
        """Replace the barcode's reservations so they total ``quantity``."""
        stock = self.stock_store.read(tenant_id, barcode, lock=True)
        reservations = self.reservation_store.read(tenant_id, barcode)
        plan = plan_set_target(
            barcode=barcode, reservations=reservations, stock=stock, quantity=quantity
        )
        return self._apply(tenant_id, plan)

    def clear(self, tenant_id: str, barcode: str) -> AllocationResult:
        return self.set_target(tenant_id, barcode, 0)

    def increase(self, tenant_id: str, barcode: str, delta: int) -> AllocationResult:
        """Claim ``delta`` more units from stock not yet claimed."""
        stock = self.stock_store.read(tenant_id, barcode, lock=True)
        reservations = self.reservation_store.read(tenant_id, barcode)
        plan = plan_increase(
            barcode=barcode, reservations=reservations, stock=stock, quantity=delta
        )
        return self._apply(tenant_id, plan)

    def decrease(self, tenant_id: str, barcode: str, delta: int) -> AllocationResult:
        """Release ``delta`` units, newest reservation first."""
        self.stock_store.read(tenant_id, barcode, lock=True)
        reservations = self.reservation_store.read(tenant_id, barcode)
        plan = plan_decrease(barcode=barcode, reservations=reservations, quantity=delta)
        return self._apply(tenant_id, plan)

    def _apply(self, tenant_id: str, plan: AllocationPlan) -> AllocationResult:
        if plan.has_writes:
            if plan.discard_existing:
                self.reservation_store.delete(tenant_id, plan.barcode)
            deletes = [r.reservation_id for r in plan.releases if r.deletes_row]
            self.reservation_store.delete_ids(tenant_id, deletes)
            for release in plan.releases:
                if not release.deletes_row:
                    self.reservation_store.update(
                        tenant_id, release.reservation_id, {"quantity": release.remaining}
                    )
            if plan.claims:
                self.reservation_store.insert(tenant_id, plan.claims)

        current: list[ReservationData] = self.reservation_store.read(tenant_id, plan.barcode)
        logger.info(
            "allocation_applied",
            extra={
                "action": plan.action.value,
                "previous_total": plan.previous_total,
                "new_total": plan.new_total,
                "claimed": plan.claimed_quantity,
                "released": plan.released_quantity,
                "reservation_count": len(current),
            },
        )
        return AllocationResult(
            success=True,
            message=_success_message(plan),
            barcode=plan.barcode,
            previous_total=plan.previous_total,
            new_total=plan.new_total,
            reservations=tuple(ReservationInfo.from_data(r) for r in current),
        )


def _success_message(plan: AllocationPlan) -> str:
    if plan.action is AllocationAction.NOOP:
        return f"Shipment quantity for {plan.barcode} already {plan.new_total}"
    if plan.action is AllocationAction.CLEAR:
        return f"Cleared shipment reservations for {plan.barcode}"
    return (
        f"Shipment quantity for {plan.barcode} changed "
        f"from {plan.previous_total} to {plan.new_total}"
    )
