"""
fulfillment_config -- single public entrypoint for runtime configuration.

Responsibility:
    ``get_active_config()`` is the ONLY way to obtain configuration at
    runtime.  No other component reads configuration files or environment
    variables directly.

Architecture position:
    Configuration.  Sits above ``fulfillment_kernel`` and
    ``fulfillment_engines`` and below ``fulfillment_services``.  The kernel
    MUST NEVER import from ``fulfillment_config``.

Environment:
    FULFILLMENT_CONFIG        -- path to a YAML file replacing the packaged
                                 default (``sets/default.yaml``).
    FULFILLMENT_DATABASE_URL  -- overrides ``database.url``.

Failure modes:
    - ``FileNotFoundError`` -- the configured file does not exist.
    - ``ConfigurationError`` -- a value is missing, unknown or invalid.

Audit relevance:
    Every call emits a ``FULFILLMENT_CONFIG_TRACE`` log entry naming the
    source file and the effective matcher settings.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path

from fulfillment_config.loader import load_config, parse_config
from fulfillment_config.schema import (
    DatabaseConfig,
    FulfillmentConfig,
    LoggingConfig,
    MatcherConfig,
)

_logger = logging.getLogger("fulfillment_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

CONFIG_PATH_ENV = "FULFILLMENT_CONFIG"
DATABASE_URL_ENV = "FULFILLMENT_DATABASE_URL"


def get_active_config(config_path: Path | str | None = None) -> FulfillmentConfig:
    """The ONLY public configuration entrypoint.

    Resolution order for the file: explicit ``config_path``, then
    ``$FULFILLMENT_CONFIG``, then the packaged default.  ``database.url`` is
    finally replaced by ``$FULFILLMENT_DATABASE_URL`` when set.
    """
    path = Path(config_path or os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)
    config = load_config(path)

    url_override = os.environ.get(DATABASE_URL_ENV)
    if url_override:
        config = dataclasses.replace(
            config,
            database=dataclasses.replace(config.database, url=url_override),
        )

    _logger.info(
        "FULFILLMENT_CONFIG_TRACE",
        extra={
            "trace_type": "FULFILLMENT_CONFIG_TRACE",
            "config_source": config.source,
            "database_url_overridden": bool(url_override),
            "page_size": config.matcher.page_size,
            "shipment_prefix": config.matcher.shipment_prefix,
        },
    )
    return config


__all__ = [
    "DatabaseConfig",
    "FulfillmentConfig",
    "LoggingConfig",
    "MatcherConfig",
    "get_active_config",
    "parse_config",
]
