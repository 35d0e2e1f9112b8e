"""
SourcingSheetStore -- read-only Sourcing Sheet Store over SQLAlchemy.
"""

from sqlalchemy import select

from fulfillment_kernel.domain.dtos import SourcingRowData
from fulfillment_kernel.models.sourcing import SourcingRow
from fulfillment_kernel.stores.base import BaseStore


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SourcingSheetStore(BaseStore):
    store_name = "sourcing_rows"

    def page_read(
        self, tenant_id: str, prefix: str, page: int, page_size: int
    ) -> list[SourcingRowData]:
        """Rows of the tenant whose shipment_info starts with prefix, ascending id."""
        with self._reading(tenant_id):
            rows = self.session.execute(
                select(SourcingRow)
                .where(
                    SourcingRow.tenant_id == tenant_id,
                    SourcingRow.shipment_info.like(
                        _escape_like(prefix) + "%", escape="\\"
                    ),
                )
                .order_by(SourcingRow.id)
                .offset(page * page_size)
                .limit(page_size)
            ).scalars().all()
        return [SourcingRowData.from_model(row) for row in rows]
