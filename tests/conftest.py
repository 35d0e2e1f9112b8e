"""
Pytest fixtures for the fulfillment kernel test suite.

Provides:
- A database engine and tables created once per test session
- Per-test sessions isolated by an outer transaction that is rolled back
- Seed-data factories for orders, sourcing rows and warehouse stock
- A captured_logs fixture parsing the structured JSON log stream

Environment Variables:
- DATABASE_URL: connection URL.  Defaults to in-memory SQLite; point it at
  PostgreSQL to run the same suite against the production backend.
"""

import json
import logging
import os
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from fulfillment_kernel.db.engine import (
    create_tables,
    drop_tables,
    init_engine_from_url,
    reset_engine,
)
from fulfillment_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from fulfillment_kernel.models import (
    Order,
    ShipmentReservation,
    SourcingRow,
    WarehouseStockRecord,
)

DEFAULT_DATABASE_URL = "sqlite://"

TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"


def get_database_url() -> str:
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture fulfillment_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, session):
            reconcile_purchase_status(session, TENANT)
            logs = captured_logs()
            assert any(r["message"] == "reconcile_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("fulfillment_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Session-scoped DB infrastructure
# =============================================================================


@pytest.fixture(scope="session")
def db_engine():
    eng = init_engine_from_url(get_database_url(), echo=False)
    yield eng
    reset_engine()


@pytest.fixture(scope="session")
def db_tables(db_engine):
    """Create all tables once per session, drop once at end."""
    drop_tables()
    create_tables()
    yield
    drop_tables()


@pytest.fixture(scope="function")
def session(db_tables, db_engine) -> Generator[Session, None, None]:
    """Provide a database session for testing.

    The session joins an outer transaction on a dedicated connection.
    ``session.commit()`` inside a test only releases a savepoint; the outer
    transaction is rolled back at teardown, undoing every change the test
    made.
    """
    conn = db_engine.connect()
    trans = conn.begin()
    sess = Session(bind=conn, join_transaction_mode="create_savepoint", expire_on_commit=False)
    yield sess
    try:
        sess.close()
    finally:
        try:
            trans.rollback()
        finally:
            conn.close()


# =============================================================================
# Seed-data factories
# =============================================================================


@pytest.fixture
def make_order(session):
    def _make(
        order_number: str = "",
        recipient_name: str = "",
        tenant_id: str = TENANT,
        purchase_status: str | None = None,
    ) -> Order:
        order = Order(
            tenant_id=tenant_id,
            order_number=order_number,
            recipient_name=recipient_name,
            purchase_status=purchase_status,
        )
        session.add(order)
        session.flush()
        return order

    return _make


@pytest.fixture
def make_sourcing_row(session):
    counter = iter(range(1, 10_000))

    def _make(
        shipment_info: str,
        quantity_ordered: int = 0,
        quantity_imported: int = 0,
        quantity_shipped: int = 0,
        composition_note: str | None = None,
        sheet_tag: str | None = "N",
        tenant_id: str = TENANT,
        row_ref: str | None = None,
    ) -> SourcingRow:
        row = SourcingRow(
            tenant_id=tenant_id,
            row_ref=row_ref or f"row-{next(counter)}",
            shipment_info=shipment_info,
            quantity_ordered=quantity_ordered,
            quantity_imported=quantity_imported,
            quantity_shipped=quantity_shipped,
            composition_note=composition_note,
            sheet_tag=sheet_tag,
        )
        session.add(row)
        session.flush()
        return row

    return _make


@pytest.fixture
def make_stock(session):
    def _make(
        barcode: str,
        quantity: int,
        location: str | None = None,
        note: str | None = None,
        tenant_id: str = TENANT,
        item_name: str | None = None,
    ) -> WarehouseStockRecord:
        record = WarehouseStockRecord(
            tenant_id=tenant_id,
            barcode=barcode,
            quantity=quantity,
            location=location,
            note=note,
            item_name=item_name,
        )
        session.add(record)
        session.flush()
        return record

    return _make


@pytest.fixture
def make_reservation(session):
    def _make(
        record: WarehouseStockRecord,
        quantity: int,
        tenant_id: str = TENANT,
    ) -> ShipmentReservation:
        reservation = ShipmentReservation(
            tenant_id=tenant_id,
            source_record_id=record.id,
            barcode=record.barcode,
            quantity=quantity,
            location=record.location,
            note=record.note,
            item_name=record.item_name,
        )
        session.add(reservation)
        session.flush()
        return reservation

    return _make
