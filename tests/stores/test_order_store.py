"""Tests for OrderStore paging and status write-back."""

import pytest

from fulfillment_kernel.exceptions import StoreWriteError
from fulfillment_kernel.models import Order
from fulfillment_kernel.stores.order_store import OrderStore

TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"


class TestPageRead:
    def test_pages_in_id_order_scoped_by_tenant(self, session, make_order):
        a = make_order("A-1", "Ann")
        make_order("Z-9", "Zed", tenant_id=OTHER_TENANT)
        b = make_order("B-2", "Bob")
        c = make_order("C-3", "Cy")
        store = OrderStore(session)

        first = store.page_read(TENANT, 0, 2)
        second = store.page_read(TENANT, 1, 2)

        assert [o.id for o in first] == [a.id, b.id]
        assert [o.id for o in second] == [c.id]

    def test_null_columns_become_empty_strings(self, session):
        session.add(Order(tenant_id=TENANT, order_number=None, recipient_name=None))
        session.flush()

        (row,) = OrderStore(session).page_read(TENANT, 0, 10)

        assert row.order_number == ""
        assert row.recipient_name == ""


class TestWrite:
    def test_updates_purchase_status(self, session, make_order):
        order = make_order("A-1", "Ann")

        OrderStore(session).write(order.id, TENANT, {"purchase_status": "PAID"})
        session.refresh(order)

        assert order.purchase_status == "PAID"

    def test_other_tenant_is_not_found(self, session, make_order):
        order = make_order("A-1", "Ann")

        with pytest.raises(StoreWriteError):
            OrderStore(session).write(order.id, OTHER_TENANT, {"purchase_status": "PAID"})

    def test_only_purchase_status_is_writable(self, session, make_order):
        order = make_order("A-1", "Ann")

        with pytest.raises(StoreWriteError) as exc_info:
            OrderStore(session).write(order.id, TENANT, {"recipient_name": "Eve"})

        assert exc_info.value.code == "STORE_WRITE_FAILED"
