"""
Configuration Loader (``fulfillment_config.loader``).

Responsibility
--------------
Loads a YAML configuration document and parses it into the frozen
``fulfillment_config.schema`` dataclasses.  Runtime callers go through
``fulfillment_config.get_active_config()``, not this module.

Invariants enforced
-------------------
* Unknown top-level sections and unknown keys are rejected, so a typo
  never silently falls back to a default.
* Every parse error raises ``ConfigurationError`` naming the dotted key.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML     -> ``yaml.YAMLError`` propagates.
* Bad value / key    -> ``ConfigurationError``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from fulfillment_config.schema import (
    DatabaseConfig,
    FulfillmentConfig,
    LoggingConfig,
    MatcherConfig,
)
from fulfillment_kernel.exceptions import ConfigurationError

_LOG_LEVELS = frozenset(logging.getLevelNamesMapping())


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "document must be a mapping")
    return data


def _section(data: dict[str, Any], name: str, allowed: set[str]) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(name, "must be a mapping")
    unknown = set(section) - allowed
    if unknown:
        raise ConfigurationError(f"{name}.{sorted(unknown)[0]}", "unknown key")
    return section


def _int(section: dict[str, Any], prefix: str, key: str, default: int, minimum: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{prefix}.{key}", "must be an integer")
    if value < minimum:
        raise ConfigurationError(f"{prefix}.{key}", f"must be >= {minimum}")
    return value


def _str(section: dict[str, Any], prefix: str, key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"{prefix}.{key}", "must be a non-empty string")
    return value


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    defaults = DatabaseConfig()
    section = _section(data, "database", {"url", "echo", "pool_size", "max_overflow"})
    echo = section.get("echo", defaults.echo)
    if not isinstance(echo, bool):
        raise ConfigurationError("database.echo", "must be a boolean")
    return DatabaseConfig(
        url=_str(section, "database", "url", defaults.url),
        echo=echo,
        pool_size=_int(section, "database", "pool_size", defaults.pool_size, 1),
        max_overflow=_int(section, "database", "max_overflow", defaults.max_overflow, 0),
    )


def parse_matcher(data: dict[str, Any]) -> MatcherConfig:
    defaults = MatcherConfig()
    section = _section(
        data,
        "matcher",
        {
            "page_size",
            "shipment_prefix",
            "cancelled_tag",
            "shipped_label",
            "received_label",
            "tag_labels",
        },
    )
    tag_labels = section.get("tag_labels", dict(defaults.tag_labels))
    if not isinstance(tag_labels, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in tag_labels.items()
    ):
        raise ConfigurationError("matcher.tag_labels", "must map strings to strings")
    return MatcherConfig(
        page_size=_int(section, "matcher", "page_size", defaults.page_size, 1),
        shipment_prefix=_str(section, "matcher", "shipment_prefix", defaults.shipment_prefix),
        cancelled_tag=_str(section, "matcher", "cancelled_tag", defaults.cancelled_tag),
        shipped_label=_str(section, "matcher", "shipped_label", defaults.shipped_label),
        received_label=_str(section, "matcher", "received_label", defaults.received_label),
        tag_labels=MappingProxyType(dict(tag_labels)),
    )


def parse_logging(data: dict[str, Any]) -> LoggingConfig:
    section = _section(data, "logging", {"level"})
    level = _str(section, "logging", "level", LoggingConfig().level).upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError("logging.level", f"unknown level {level!r}")
    return LoggingConfig(level=level)


def parse_config(data: dict[str, Any], source: str = "<dict>") -> FulfillmentConfig:
    """Parse a whole configuration document."""
    unknown = set(data) - {"database", "matcher", "logging"}
    if unknown:
        raise ConfigurationError(sorted(unknown)[0], "unknown section")
    return FulfillmentConfig(
        database=parse_database(data),
        matcher=parse_matcher(data),
        logging=parse_logging(data),
        source=source,
    )


def load_config(path: Path) -> FulfillmentConfig:
    return parse_config(load_yaml_file(path), source=str(path))
