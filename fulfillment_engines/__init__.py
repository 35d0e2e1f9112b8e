"""
Module: fulfillment_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines: order matching, purchase status derivation and
    shipment allocation planning.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import fulfillment_kernel.domain, fulfillment_kernel.exceptions
    and sibling engine modules.  MUST NOT import stores, services or
    fulfillment_services.

Invariants enforced:
    - Determinism: identical inputs always produce identical outputs.
    - Engines never touch a Session; callers pass DTOs in and get DTOs or
      plans back.

Usage:
    from fulfillment_engines import SourcingIndex, match_orders
    from fulfillment_engines import derive_purchase_status, StatusLabels
    from fulfillment_engines import plan_set_target, plan_increase, plan_decrease
"""

from fulfillment_engines.allocation import (
    AllocationAction,
    AllocationPlan,
    Release,
    StockLot,
    build_lots,
    draw,
    plan_decrease,
    plan_increase,
    plan_set_target,
    reserved_total,
)
from fulfillment_engines.matching import (
    MatchType,
    OrderMatch,
    SourcingIndex,
    find_match,
    match_orders,
    shipment_name,
)
from fulfillment_engines.purchase_status import (
    DEFAULT_LABELS,
    DEFAULT_TAG_LABELS,
    StatusLabels,
    derive_purchase_status,
)
from fulfillment_engines.tracer import traced_engine

__all__ = [
    "AllocationAction",
    "AllocationPlan",
    "DEFAULT_LABELS",
    "DEFAULT_TAG_LABELS",
    "MatchType",
    "OrderMatch",
    "Release",
    "SourcingIndex",
    "StatusLabels",
    "StockLot",
    "build_lots",
    "derive_purchase_status",
    "draw",
    "find_match",
    "match_orders",
    "plan_decrease",
    "plan_increase",
    "plan_set_target",
    "reserved_total",
    "shipment_name",
    "traced_engine",
]
