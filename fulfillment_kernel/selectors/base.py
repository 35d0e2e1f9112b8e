"""
Module: fulfillment_kernel.selectors.base
Responsibility: Abstract base class for read-only query selectors.
Architecture position: Kernel > Selectors.  May import from db/, models/ and
    domain/.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Read-only access: selectors MUST NOT add, delete, flush or commit.
    - Selectors return DTOs or plain values, never ORM instances.
    - The caller owns the session and its transaction scope.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseSelector(ABC):
    """Abstract base class for all selectors."""

    def __init__(self, session: Session):
        self.session = session
