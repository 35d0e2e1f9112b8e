"""
fulfillment_engines.matching -- Order-to-sourcing-row matching engine.

Responsibility:
    Find the sourcing sheet row that an order belongs to.  Two rules are
    tried in strict order and the first hit wins:

    1. ORDER_NUMBER   -- the order number is a substring of the row's
                         shipment_info.  First row in iteration order wins.
    2. RECIPIENT_NAME -- shipment_info with the leading prefix and the
                         surrounding whitespace removed equals the
                         recipient name exactly.  First row wins.

    Cancelled rows are not filtered here: the caller decides what to do
    with a cancelled match (the matcher service skips the order entirely).

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Determinism: the result depends only on the order, the row sequence
      and the prefix.
    - The recipient-name rule is never evaluated when the order-number rule
      matched.

Usage:
    index = SourcingIndex.build(rows, prefix="P-")
    match = find_match(order, index)
    if match is not None:
        ...
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from fulfillment_engines.tracer import traced_engine
from fulfillment_kernel.domain.dtos import OrderRow, SourcingRowData


class MatchType(str, Enum):
    """Rule that produced a match."""

    ORDER_NUMBER = "order_number"
    RECIPIENT_NAME = "recipient_name"


@dataclass(frozen=True)
class OrderMatch:
    """An order paired with the sourcing row it matched."""

    order: OrderRow
    row: SourcingRowData
    match_type: MatchType


def shipment_name(shipment_info: str, prefix: str = "P-") -> str:
    """Strip the leading prefix and surrounding whitespace from shipment_info."""
    if shipment_info.startswith(prefix):
        shipment_info = shipment_info[len(prefix):]
    return shipment_info.strip()


@dataclass(frozen=True)
class SourcingIndex:
    """
    Sourcing rows of one tenant, prepared for repeated lookups.

    rows keeps store iteration order for the substring scan; by_name maps
    each stripped shipment name to the FIRST row carrying it.
    """

    rows: tuple[SourcingRowData, ...]
    by_name: dict[str, SourcingRowData]
    prefix: str = "P-"

    @classmethod
    def build(cls, rows: Iterable[SourcingRowData], prefix: str = "P-") -> SourcingIndex:
        ordered = tuple(rows)
        by_name: dict[str, SourcingRowData] = {}
        for row in ordered:
            by_name.setdefault(shipment_name(row.shipment_info, prefix), row)
        return cls(rows=ordered, by_name=by_name, prefix=prefix)

    def __len__(self) -> int:
        return len(self.rows)

    def first_containing(self, order_number: str) -> SourcingRowData | None:
        for row in self.rows:
            if order_number in row.shipment_info:
                return row
        return None

    def first_named(self, recipient_name: str) -> SourcingRowData | None:
        return self.by_name.get(recipient_name)


def find_match(order: OrderRow, index: SourcingIndex) -> OrderMatch | None:
    """
    Match one order against the sourcing index.

    Returns:
        OrderMatch, or None when neither rule finds a row.
    """
    if order.order_number:
        row = index.first_containing(order.order_number)
        if row is not None:
            return OrderMatch(order=order, row=row, match_type=MatchType.ORDER_NUMBER)

    if order.recipient_name:
        row = index.first_named(order.recipient_name)
        if row is not None:
            return OrderMatch(order=order, row=row, match_type=MatchType.RECIPIENT_NAME)

    return None


@traced_engine("matching", "1.0")
def match_orders(
    *,
    orders: Sequence[OrderRow],
    index: SourcingIndex,
) -> list[OrderMatch]:
    """Match every order; unmatched orders are left out of the result."""
    matches: list[OrderMatch] = []
    for order in orders:
        match = find_match(order, index)
        if match is not None:
            matches.append(match)
    return matches
