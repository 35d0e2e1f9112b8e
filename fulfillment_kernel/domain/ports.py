"""
Store ports -- the record-store contracts the kernel depends on.

The SQLAlchemy implementations live in ``fulfillment_kernel.stores``; any
object satisfying these protocols can be injected instead (tests use this to
simulate store failures).  Every read raises StoreReadError and every write
raises StoreWriteError on failure.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from fulfillment_kernel.domain.dtos import (
    NewReservation,
    OrderRow,
    ReservationData,
    SourcingRowData,
    StockRecordData,
)


@runtime_checkable
class OrderStorePort(Protocol):
    def page_read(self, tenant_id: str, page: int, page_size: int) -> list[OrderRow]:
        ...

    def write(self, order_id: int, tenant_id: str, values: dict[str, str]) -> None:
        ...


@runtime_checkable
class SourcingSheetStorePort(Protocol):
    def page_read(
        self, tenant_id: str, prefix: str, page: int, page_size: int
    ) -> list[SourcingRowData]:
        ...


@runtime_checkable
class WarehouseStockStorePort(Protocol):
    def read(
        self, tenant_id: str, barcode: str, *, lock: bool = False
    ) -> list[StockRecordData]:
        ...


@runtime_checkable
class ShipmentReservationStorePort(Protocol):
    def read(self, tenant_id: str, barcode: str) -> list[ReservationData]:
        ...

    def delete(self, tenant_id: str, barcode: str) -> int:
        ...

    def insert(self, tenant_id: str, rows: Sequence[NewReservation]) -> list[ReservationData]:
        ...

    def update(self, tenant_id: str, reservation_id: int, values: dict[str, int]) -> None:
        ...

    def delete_ids(self, tenant_id: str, reservation_ids: Sequence[int]) -> int:
        ...
