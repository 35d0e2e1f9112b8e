"""
Module: fulfillment_kernel.db.base
Responsibility: Declarative base classes for all SQLAlchemy ORM models.  Provides
    the integer primary key convention, the tenant scoping column, and the
    type annotation map for consistent column types.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, stores/, services/, selectors/, or outer layers.

Invariants enforced:
    - Ordered identity: every table has an auto-incrementing integer primary
      key.  "Ordered by id ascending" is the draw order for warehouse stock
      and the creation order of reservations, so ids must be sortable.
    - Tenant scoping: every row carries a non-null tenant_id; every store query
      filters on it.

Failure modes:
    - IntegrityError if a row is flushed without a tenant_id.
"""

from datetime import datetime
from typing import ClassVar

from sqlalchemy import BigInteger, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# SQLite only auto-increments INTEGER PRIMARY KEY columns.
IdType = BigInteger().with_variant(Integer(), "sqlite")

TENANT_ID_LENGTH = 64


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - id is an auto-incrementing integer, strictly increasing in insert order.
        - datetime maps to DateTime(timezone=True).
        - int maps to BigInteger (Integer on SQLite).
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
        int: IdType,
    }

    id: Mapped[int] = mapped_column(
        IdType,
        primary_key=True,
        autoincrement=True,
    )


class TenantScopedBase(Base):
    """
    Abstract base for rows owned by a single seller account.

    Guarantees:
        - tenant_id is NOT NULL.
        - created_at is set by the server on INSERT.
    """

    __abstract__ = True

    tenant_id: Mapped[str] = mapped_column(
        String(TENANT_ID_LENGTH),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
