"""
FulfillmentConfig schema.

The typed, frozen form of the YAML configuration document.  The loader
parses YAML into these types; nothing else constructs them from raw dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings passed to init_engine_from_url()."""

    url: str = "sqlite:///fulfillment.db"
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 10


@dataclass(frozen=True)
class MatcherConfig:
    """Order-to-sourcing matcher settings."""

    page_size: int = 1000
    shipment_prefix: str = "P-"
    cancelled_tag: str = "C"
    shipped_label: str = "SHIPPED"
    received_label: str = "RECEIVED"
    tag_labels: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(
            {"N": "NEW", "P": "PAID", "O": "IN_PROGRESS"}
        )
    )


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class FulfillmentConfig:
    """Root of the configuration document."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    source: str = "<defaults>"
