"""
Config-to-engine bridges.

Translate configuration sections into the value objects the engines and
services take, so neither has to know about the config package.
"""

from __future__ import annotations

from fulfillment_config.schema import MatcherConfig
from fulfillment_engines.purchase_status import StatusLabels


def status_labels(matcher: MatcherConfig) -> StatusLabels:
    return StatusLabels(
        shipped=matcher.shipped_label,
        received=matcher.received_label,
        tag_labels=matcher.tag_labels,
    )
