"""
Module: fulfillment_kernel.models.order
Responsibility: ORM persistence for customer orders as taken by the
    order-taking subsystem.  The kernel only reads these rows and writes the
    derived purchase_status back.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - purchase_status is the ONLY column the matcher mutates.
    - Orders are never deleted by the kernel.
"""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fulfillment_kernel.db.base import TenantScopedBase


class Order(TenantScopedBase):
    """
    A customer order of one seller account.

    Guarantees:
        - (tenant_id, id) index supports stable paged reads.
        - purchase_status is NULL until the matcher first writes it.
    """

    __tablename__ = "orders"

    __table_args__ = (
        Index("idx_order_tenant_id", "tenant_id", "id"),
        Index("idx_order_tenant_number", "tenant_id", "order_number"),
    )

    order_number: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    recipient_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    # Derived by the matcher; may span two lines ("SHIPPED\n<note>")
    purchase_status: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<Order {self.id}: tenant={self.tenant_id} "
            f"number={self.order_number!r} status={self.purchase_status!r}>"
        )
