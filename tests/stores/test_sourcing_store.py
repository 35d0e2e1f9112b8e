"""Tests for SourcingSheetStore prefix filtering."""

from fulfillment_kernel.stores.sourcing_store import SourcingSheetStore

TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"


def test_only_prefixed_rows_of_tenant(session, make_sourcing_row):
    kept = make_sourcing_row("P-A-1 Ann")
    make_sourcing_row("X-A-1 Ann")
    make_sourcing_row("P-B-2 Bob", tenant_id=OTHER_TENANT)

    rows = SourcingSheetStore(session).page_read(TENANT, "P-", 0, 100)

    assert [r.id for r in rows] == [kept.id]


def test_like_wildcards_in_prefix_are_literal(session, make_sourcing_row):
    make_sourcing_row("PX-A-1 Ann")
    literal = make_sourcing_row("P_-A-1 Ann")

    rows = SourcingSheetStore(session).page_read(TENANT, "P_-", 0, 100)

    assert [r.id for r in rows] == [literal.id]
