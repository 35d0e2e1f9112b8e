"""
fulfillment_services.reconciliation -- purchase status reconciliation entry point.

Failure modes:
    - InvalidInputError  -- blank tenant id; raised before any store access.
    - StoreReadError     -- a page load failed; the session is rolled back
                            and the error re-raised.
    Per-order write failures do not fail the call; they show up as
    written=False entries in the result.
"""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy.orm import Session

from fulfillment_config import FulfillmentConfig, get_active_config
from fulfillment_config.bridges import status_labels
from fulfillment_kernel.domain.dtos import ReconcileResult
from fulfillment_kernel.domain.validation import require_identifier
from fulfillment_kernel.logging_config import LogContext, get_logger
from fulfillment_kernel.services.order_matcher import OrderMatcher

logger = get_logger("services.reconciliation")


def reconcile_purchase_status(
    session: Session,
    tenant_id: str,
    config: FulfillmentConfig | None = None,
) -> ReconcileResult:
    """Match every order of the tenant and commit the derived statuses."""
    tenant_id = require_identifier(tenant_id, "tenant_id")
    matcher_config = (config or get_active_config()).matcher

    with LogContext.bind(
        correlation_id=str(uuid4()),
        tenant_id=tenant_id,
        operation="reconcile_purchase_status",
    ):
        matcher = OrderMatcher(
            session,
            labels=status_labels(matcher_config),
            page_size=matcher_config.page_size,
            shipment_prefix=matcher_config.shipment_prefix,
            cancelled_tag=matcher_config.cancelled_tag,
        )
        try:
            result = matcher.reconcile(tenant_id)
            session.commit()
        except Exception:
            session.rollback()
            logger.exception("reconcile_aborted")
            raise
        return result
