"""
Tests for shipment allocation planning.

Covers:
- set_target transitions: no-op, clear, replace
- Shortfall and unknown-barcode failures raised before any plan exists
- increase against the claim ledger (partly claimed records stay eligible)
- decrease LIFO release with partial shrink
- Property: claims conserve the requested quantity and never over-claim
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fulfillment_engines.allocation import (
    AllocationAction,
    build_lots,
    draw,
    plan_decrease,
    plan_increase,
    plan_set_target,
)
from fulfillment_kernel.domain.dtos import ReservationData, StockRecordData
from fulfillment_kernel.exceptions import (
    DecreaseExceedsReservedError,
    InsufficientStockError,
    InvalidBarcodeError,
    ReservationNotFoundError,
)

BARCODE = "880100"


def _stock(*quantities: int) -> list[StockRecordData]:
    return [
        StockRecordData(id=i, barcode=BARCODE, quantity=q, location=f"A-{i}")
        for i, q in enumerate(quantities, start=1)
    ]


def _reservation(res_id: int, source: int, quantity: int) -> ReservationData:
    return ReservationData(
        id=res_id, source_record_id=source, barcode=BARCODE, quantity=quantity
    )


class TestSetTarget:
    def test_replace_draws_lowest_id_first(self):
        plan = plan_set_target(
            barcode=BARCODE, reservations=[], stock=_stock(3, 4), quantity=5
        )

        assert plan.action is AllocationAction.REPLACE
        assert [(c.source_record_id, c.quantity) for c in plan.claims] == [(1, 3), (2, 2)]
        assert plan.claims[0].location == "A-1"
        assert plan.new_total == 5
        assert plan.discard_existing

    def test_noop_when_target_equals_current(self):
        plan = plan_set_target(
            barcode=BARCODE,
            reservations=[_reservation(1, 1, 3)],
            stock=_stock(3, 4),
            quantity=3,
        )

        assert plan.action is AllocationAction.NOOP
        assert not plan.has_writes

    def test_zero_clears(self):
        plan = plan_set_target(
            barcode=BARCODE,
            reservations=[_reservation(1, 1, 3)],
            stock=_stock(3),
            quantity=0,
        )

        assert plan.action is AllocationAction.CLEAR
        assert plan.discard_existing
        assert plan.claims == ()

    def test_replace_ignores_existing_claims(self):
        """Existing claims are discarded, so the whole stock is drawable again."""
        plan = plan_set_target(
            barcode=BARCODE,
            reservations=[_reservation(1, 1, 3), _reservation(2, 2, 4)],
            stock=_stock(3, 4),
            quantity=6,
        )

        assert plan.discard_existing
        assert plan.previous_total == 7
        assert plan.claimed_quantity == 6

    def test_shortfall_raises(self):
        with pytest.raises(InsufficientStockError) as exc_info:
            plan_set_target(
                barcode=BARCODE, reservations=[], stock=_stock(3, 4), quantity=100
            )

        assert exc_info.value.available == 7
        assert exc_info.value.shortfall == 93

    def test_non_positive_records_never_drawn(self):
        plan = plan_set_target(
            barcode=BARCODE, reservations=[], stock=_stock(0, -2, 5), quantity=4
        )

        assert [(c.source_record_id, c.quantity) for c in plan.claims] == [(3, 4)]

    def test_no_stock_rows_is_invalid_barcode(self):
        with pytest.raises(InvalidBarcodeError):
            plan_set_target(barcode=BARCODE, reservations=[], stock=[], quantity=1)

    def test_clear_without_stock_rows_is_allowed(self):
        plan = plan_set_target(
            barcode=BARCODE, reservations=[_reservation(1, 1, 2)], stock=[], quantity=0
        )

        assert plan.action is AllocationAction.CLEAR


class TestIncrease:
    def test_partly_claimed_record_stays_eligible(self):
        plan = plan_increase(
            barcode=BARCODE,
            reservations=[_reservation(1, 1, 3)],
            stock=_stock(5, 4),
            quantity=4,
        )

        assert [(c.source_record_id, c.quantity) for c in plan.claims] == [(1, 2), (2, 2)]
        assert plan.previous_total == 3
        assert plan.new_total == 7

    def test_counts_only_unclaimed_units(self):
        with pytest.raises(InsufficientStockError) as exc_info:
            plan_increase(
                barcode=BARCODE,
                reservations=[_reservation(1, 1, 5)],
                stock=_stock(5, 4),
                quantity=6,
            )

        assert exc_info.value.available == 4
        assert exc_info.value.shortfall == 2

    def test_no_stock_rows_is_invalid_barcode(self):
        with pytest.raises(InvalidBarcodeError):
            plan_increase(barcode=BARCODE, reservations=[], stock=[], quantity=1)


class TestDecrease:
    def test_lifo_deletes_then_shrinks(self):
        reservations = [
            _reservation(1, 1, 3),
            _reservation(2, 2, 2),
            _reservation(3, 3, 1),
        ]

        plan = plan_decrease(barcode=BARCODE, reservations=reservations, quantity=4)

        assert [(r.reservation_id, r.quantity, r.remaining) for r in plan.releases] == [
            (3, 1, 0),
            (2, 2, 0),
            (1, 1, 2),
        ]
        assert plan.new_total == 2

    def test_exact_total_releases_everything(self):
        plan = plan_decrease(
            barcode=BARCODE,
            reservations=[_reservation(1, 1, 3), _reservation(2, 2, 2)],
            quantity=5,
        )

        assert all(r.deletes_row for r in plan.releases)
        assert plan.new_total == 0

    def test_no_reservations(self):
        with pytest.raises(ReservationNotFoundError):
            plan_decrease(barcode=BARCODE, reservations=[], quantity=1)

    def test_exceeds_reserved(self):
        with pytest.raises(DecreaseExceedsReservedError) as exc_info:
            plan_decrease(
                barcode=BARCODE, reservations=[_reservation(1, 1, 3)], quantity=4
            )

        assert exc_info.value.reserved == 3


class TestLots:
    def test_available_floors_at_zero(self):
        lots = build_lots(_stock(2), [_reservation(1, 1, 5)])

        assert lots[0].available == 0

    def test_draw_reports_partial(self):
        claims, drawn = draw(build_lots(_stock(2, 1)), 10)

        assert drawn == 3
        assert len(claims) == 2


class TestConservationProperty:
    @given(
        quantities=st.lists(st.integers(min_value=-3, max_value=20), min_size=1, max_size=8),
        claimed=st.lists(st.integers(min_value=1, max_value=10), max_size=4),
        target=st.integers(min_value=1, max_value=120),
    )
    @settings(max_examples=200)
    def test_increase_conserves_and_never_over_claims(self, quantities, claimed, target):
        stock = _stock(*quantities)
        drawable = [r for r in stock if r.quantity > 0]
        reservations = []
        # Existing claims are spread over drawable records without over-claiming.
        for i, qty in enumerate(claimed):
            if not drawable:
                break
            record = drawable[i % len(drawable)]
            already = sum(r.quantity for r in reservations if r.source_record_id == record.id)
            take = min(qty, record.quantity - already)
            if take > 0:
                reservations.append(_reservation(100 + i, record.id, take))

        available = sum(lot.available for lot in build_lots(stock, reservations))
        if target > available:
            with pytest.raises(InsufficientStockError) as exc_info:
                plan_increase(
                    barcode=BARCODE, reservations=reservations, stock=stock, quantity=target
                )
            assert exc_info.value.shortfall == target - available
            return

        plan = plan_increase(
            barcode=BARCODE, reservations=reservations, stock=stock, quantity=target
        )

        assert plan.claimed_quantity == target
        for record in stock:
            total = sum(
                r.quantity for r in reservations if r.source_record_id == record.id
            ) + sum(c.quantity for c in plan.claims if c.source_record_id == record.id)
            assert total <= max(record.quantity, 0)
