"""
OrderMatcher -- reconcile order fulfillment status from the sourcing sheet.

Responsibility:
    One pass over a tenant: page in every order and every sourcing row
    whose shipment_info carries the shipment prefix, match each order to
    a row (fulfillment_engines.matching), derive its status
    (fulfillment_engines.purchase_status) and write it back.

Architecture position:
    Kernel > Services.  Composes the pure engines with the order and
    sourcing stores.  Never commits.

Invariants enforced:
    - Idempotence: running twice over unchanged data writes the same
      statuses again and returns the same matched_count.
    - An order matched to a cancelled row is skipped entirely: no write,
      no result entry.
    - Reads happen before any write.  A failed read aborts the pass with
      StoreReadError before anything is written.

Failure modes:
    - StoreReadError propagates.
    - StoreWriteError for one order is logged and recorded as
      written=False on its result entry; the pass continues.
"""

from __future__ import annotations

import time

from sqlalchemy.orm import Session

from fulfillment_engines.matching import SourcingIndex, match_orders
from fulfillment_engines.purchase_status import (
    DEFAULT_LABELS,
    StatusLabels,
    derive_purchase_status,
)
from fulfillment_kernel.domain.dtos import (
    MatchResultEntry,
    OrderRow,
    ReconcileResult,
    SourcingRowData,
)
from fulfillment_kernel.domain.ports import OrderStorePort, SourcingSheetStorePort
from fulfillment_kernel.exceptions import StoreWriteError
from fulfillment_kernel.logging_config import get_logger
from fulfillment_kernel.models.sourcing import SheetTag
from fulfillment_kernel.selectors.paging import DEFAULT_PAGE_SIZE, PagedReader
from fulfillment_kernel.services.base import BaseService
from fulfillment_kernel.stores.order_store import OrderStore
from fulfillment_kernel.stores.sourcing_store import SourcingSheetStore

logger = get_logger("services.order_matcher")

NO_ORDERS_MESSAGE = "No orders found"
NO_SOURCING_ROWS_MESSAGE = "No sourcing rows with shipment info found"


class OrderMatcher(BaseService):
    """Matches orders to sourcing rows and writes purchase_status."""

    def __init__(
        self,
        session: Session,
        *,
        order_store: OrderStorePort | None = None,
        sourcing_store: SourcingSheetStorePort | None = None,
        labels: StatusLabels = DEFAULT_LABELS,
        page_size: int = DEFAULT_PAGE_SIZE,
        shipment_prefix: str = "P-",
        cancelled_tag: str = SheetTag.CANCELLED,
    ):
        super().__init__(session)
        self.order_store = order_store or OrderStore(session)
        self.sourcing_store = sourcing_store or SourcingSheetStore(session)
        self.labels = labels
        self.page_size = page_size
        self.shipment_prefix = shipment_prefix
        self.cancelled_tag = cancelled_tag

    def load_orders(self, tenant_id: str) -> list[OrderRow]:
        return PagedReader(
            lambda page, size: self.order_store.page_read(tenant_id, page, size),
            self.page_size,
        ).read_all()

    def load_sourcing_rows(self, tenant_id: str) -> list[SourcingRowData]:
        return PagedReader(
            lambda page, size: self.sourcing_store.page_read(
                tenant_id, self.shipment_prefix, page, size
            ),
            self.page_size,
        ).read_all()

    def reconcile(self, tenant_id: str) -> ReconcileResult:
        """Run one reconciliation pass for ``tenant_id``."""
        started = time.monotonic()
        logger.info("reconcile_started", extra={"page_size": self.page_size})

        orders = self.load_orders(tenant_id)
        if not orders:
            logger.info("reconcile_no_orders")
            return ReconcileResult(
                matched_count=0,
                message=NO_ORDERS_MESSAGE,
                processing_time_ms=_elapsed_ms(started),
            )

        rows = self.load_sourcing_rows(tenant_id)
        if not rows:
            logger.info("reconcile_no_sourcing_rows", extra={"total_orders": len(orders)})
            return ReconcileResult(
                matched_count=0,
                total_orders=len(orders),
                message=NO_SOURCING_ROWS_MESSAGE,
                processing_time_ms=_elapsed_ms(started),
            )

        index = SourcingIndex.build(rows, self.shipment_prefix)
        matches = match_orders(orders=orders, index=index)

        results: list[MatchResultEntry] = []
        matched_count = 0
        skipped_cancelled = 0
        for match in matches:
            if match.row.sheet_tag == self.cancelled_tag:
                skipped_cancelled += 1
                continue

            status = derive_purchase_status(match.row, self.labels)
            written = self._write_status(tenant_id, match.order.id, status)
            if written:
                matched_count += 1
            results.append(
                MatchResultEntry(
                    order_id=match.order.id,
                    order_number=match.order.order_number,
                    recipient_name=match.order.recipient_name,
                    matched_row_id=match.row.id,
                    matched_row_ref=match.row.row_ref,
                    match_type=match.match_type.value,
                    purchase_status=status,
                    written=written,
                )
            )

        result = ReconcileResult(
            matched_count=matched_count,
            results=tuple(results),
            total_orders=len(orders),
            total_sourcing_rows=len(rows),
            message=f"{matched_count} orders matched",
            processing_time_ms=_elapsed_ms(started),
        )
        logger.info(
            "reconcile_completed",
            extra={
                "total_orders": result.total_orders,
                "total_sourcing_rows": result.total_sourcing_rows,
                "matched_count": result.matched_count,
                "failed_count": result.failed_count,
                "skipped_cancelled": skipped_cancelled,
                "processing_time_ms": result.processing_time_ms,
            },
        )
        return result

    def _write_status(self, tenant_id: str, order_id: int, status: str) -> bool:
        try:
            self.order_store.write(order_id, tenant_id, {"purchase_status": status})
        except StoreWriteError as exc:
            logger.warning(
                "order_status_write_failed",
                extra={"order_id": order_id, "error": exc.detail},
            )
            return False
        return True


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 3)
