"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for the
    matcher and the allocator.  Services receive a SQLAlchemy ``Session``
    and work inside the caller's transaction.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    - Transaction boundaries: services flush (through the stores) within
      the caller's transaction and never commit or rollback themselves.
      The entry points in ``fulfillment_services`` own commit/rollback.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseService(ABC):
    """
    Abstract base class for kernel services.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
        - Does NOT provide query-only methods; those belong in
          ``fulfillment_kernel/selectors/``.
    """

    def __init__(self, session: Session):
        self.session = session
