"""
fulfillment_engines.allocation -- Shipment reservation planning over a claim ledger.

Responsibility:
    Given the current reservations and the warehouse stock of one barcode,
    compute the exact set of store changes needed to reach a target:
    set_target (replace), increase, decrease.  The result is an
    AllocationPlan; applying it is the allocator service's job.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Claim ledger:
    Each reservation is a claim ticket against one stock record
    (source_record_id, quantity).  The quantity still available on a record
    is ``record.quantity - sum(claims against record.id)``, so a record that
    was only partly claimed stays eligible for later draws.

Invariants enforced:
    - Plan before write: sufficiency is verified while planning; an
      infeasible request raises and produces no plan, so nothing is
      deleted ahead of a shortfall.
    - Conservation: the claims of a REPLACE / INCREASE plan sum exactly to
      the requested quantity; the releases of a DECREASE plan sum exactly
      to delta.
    - No over-claim: no plan makes the claims against a record exceed its
      quantity.
    - Draw order: stock records in ascending id order.  Release order:
      reservations in descending id order (LIFO).
    - Records with quantity <= 0 are never drawn from.

Failure modes:
    - InvalidBarcodeError -- no stock records at all for the barcode.
    - InsufficientStockError -- available stock below the request.
    - ReservationNotFoundError -- decrease with no reservations.
    - DecreaseExceedsReservedError -- decrease larger than reserved total.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from fulfillment_engines.tracer import traced_engine
from fulfillment_kernel.domain.dtos import (
    NewReservation,
    ReservationData,
    StockRecordData,
)
from fulfillment_kernel.exceptions import (
    DecreaseExceedsReservedError,
    InsufficientStockError,
    InvalidBarcodeError,
    ReservationNotFoundError,
)


class AllocationAction(str, Enum):
    """What a plan does to the reservation set."""

    NOOP = "noop"
    CLEAR = "clear"
    REPLACE = "replace"
    INCREASE = "increase"
    DECREASE = "decrease"


@dataclass(frozen=True)
class StockLot:
    """A stock record together with the quantity already claimed from it."""

    record: StockRecordData
    claimed: int = 0

    @property
    def available(self) -> int:
        return max(self.record.quantity - self.claimed, 0)


@dataclass(frozen=True)
class Release:
    """Give back ``quantity`` units of one reservation."""

    reservation_id: int
    quantity: int
    remaining: int

    @property
    def deletes_row(self) -> bool:
        return self.remaining == 0


@dataclass(frozen=True)
class AllocationPlan:
    """
    Store changes that take one barcode from previous_total to new_total.

    Apply order: discard existing rows (if discard_existing), then releases,
    then inserts of claims.
    """

    action: AllocationAction
    barcode: str
    previous_total: int
    new_total: int
    discard_existing: bool = False
    claims: tuple[NewReservation, ...] = ()
    releases: tuple[Release, ...] = ()

    @property
    def has_writes(self) -> bool:
        return self.discard_existing or bool(self.claims) or bool(self.releases)

    @property
    def claimed_quantity(self) -> int:
        return sum(claim.quantity for claim in self.claims)

    @property
    def released_quantity(self) -> int:
        return sum(release.quantity for release in self.releases)


def reserved_total(reservations: Iterable[ReservationData]) -> int:
    return sum(r.quantity for r in reservations)


def build_lots(
    stock: Iterable[StockRecordData],
    reservations: Iterable[ReservationData] = (),
) -> list[StockLot]:
    """Pair each drawable stock record with its claimed quantity, ascending id."""
    claimed: dict[int, int] = defaultdict(int)
    for reservation in reservations:
        claimed[reservation.source_record_id] += reservation.quantity
    return [
        StockLot(record=record, claimed=claimed[record.id])
        for record in sorted(stock, key=lambda r: r.id)
        if record.quantity > 0
    ]


def draw(lots: Sequence[StockLot], quantity: int) -> tuple[list[NewReservation], int]:
    """
    Claim up to ``quantity`` units from lots in order.

    Returns:
        (claims, drawn) where drawn <= quantity is the total claimed.
    """
    remaining = quantity
    claims: list[NewReservation] = []
    for lot in lots:
        if remaining <= 0:
            break
        take = min(remaining, lot.available)
        if take <= 0:
            continue
        record = lot.record
        claims.append(
            NewReservation(
                source_record_id=record.id,
                barcode=record.barcode,
                quantity=take,
                location=record.location,
                note=record.note,
                item_name=record.item_name,
            )
        )
        remaining -= take
    return claims, quantity - remaining


@traced_engine("allocation.set_target", "1.0", fingerprint_fields=("barcode", "quantity"))
def plan_set_target(
    *,
    barcode: str,
    reservations: Sequence[ReservationData],
    stock: Sequence[StockRecordData],
    quantity: int,
) -> AllocationPlan:
    """
    Plan a full replace of the barcode's reservations.

    new == current is a no-op and new == 0 clears.  Otherwise every existing
    claim is discarded and the target is re-drawn from the full quantity of
    the stock records, lowest id first.
    """
    current = reserved_total(reservations)

    if quantity == current:
        return AllocationPlan(
            action=AllocationAction.NOOP,
            barcode=barcode,
            previous_total=current,
            new_total=current,
        )

    if quantity == 0:
        return AllocationPlan(
            action=AllocationAction.CLEAR,
            barcode=barcode,
            previous_total=current,
            new_total=0,
            discard_existing=True,
        )

    if not stock:
        raise InvalidBarcodeError(barcode)

    # Existing claims are discarded, so every record is fully available.
    lots = build_lots(stock)
    claims, drawn = draw(lots, quantity)
    if drawn < quantity:
        raise InsufficientStockError(barcode, requested=quantity, available=drawn)

    return AllocationPlan(
        action=AllocationAction.REPLACE,
        barcode=barcode,
        previous_total=current,
        new_total=quantity,
        discard_existing=True,
        claims=tuple(claims),
    )


@traced_engine("allocation.increase", "1.0", fingerprint_fields=("barcode", "quantity"))
def plan_increase(
    *,
    barcode: str,
    reservations: Sequence[ReservationData],
    stock: Sequence[StockRecordData],
    quantity: int,
) -> AllocationPlan:
    """Plan drawing ``quantity`` more units from stock not yet claimed."""
    if not stock:
        raise InvalidBarcodeError(barcode)

    current = reserved_total(reservations)
    lots = build_lots(stock, reservations)
    claims, drawn = draw(lots, quantity)
    if drawn < quantity:
        raise InsufficientStockError(barcode, requested=quantity, available=drawn)

    return AllocationPlan(
        action=AllocationAction.INCREASE,
        barcode=barcode,
        previous_total=current,
        new_total=current + quantity,
        claims=tuple(claims),
    )


@traced_engine("allocation.decrease", "1.0", fingerprint_fields=("barcode", "quantity"))
def plan_decrease(
    *,
    barcode: str,
    reservations: Sequence[ReservationData],
    quantity: int,
) -> AllocationPlan:
    """
    Plan releasing ``quantity`` units, newest reservation first.

    Rows whose quantity fits in what is left to release are deleted; the
    first row that is larger absorbs the remainder and is shrunk.
    """
    if not reservations:
        raise ReservationNotFoundError(barcode)

    current = reserved_total(reservations)
    if quantity > current:
        raise DecreaseExceedsReservedError(barcode, delta=quantity, reserved=current)

    to_release = quantity
    releases: list[Release] = []
    for reservation in sorted(reservations, key=lambda r: r.id, reverse=True):
        if to_release <= 0:
            break
        if reservation.quantity <= to_release:
            releases.append(Release(reservation.id, reservation.quantity, 0))
            to_release -= reservation.quantity
        else:
            releases.append(
                Release(reservation.id, to_release, reservation.quantity - to_release)
            )
            to_release = 0

    return AllocationPlan(
        action=AllocationAction.DECREASE,
        barcode=barcode,
        previous_total=current,
        new_total=current - quantity,
        releases=tuple(releases),
    )
