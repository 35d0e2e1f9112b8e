#!/usr/bin/env python3
"""
Command line front end for the fulfillment kernel.

Every subcommand opens a session from the configured database, calls one
entry point and prints the result as JSON.

Usage:
    python3 scripts/fulfillment_cli.py init-db
    python3 scripts/fulfillment_cli.py reconcile --tenant acme
    python3 scripts/fulfillment_cli.py set-target --tenant acme --barcode 880123 --quantity 5
    python3 scripts/fulfillment_cli.py increase --tenant acme --barcode 880123 --delta 2
    python3 scripts/fulfillment_cli.py decrease --tenant acme --barcode 880123 --delta 1
    python3 scripts/fulfillment_cli.py totals --tenant acme

Options:
    --config PATH   YAML configuration file (default: $FULFILLMENT_CONFIG or
                    the packaged default)
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from fulfillment_config import get_active_config  # noqa: E402
from fulfillment_kernel.db.engine import (  # noqa: E402
    create_tables,
    get_session,
    init_engine_from_url,
)
from fulfillment_kernel.logging_config import configure_logging  # noqa: E402
from fulfillment_kernel.selectors.shipment_selector import ShipmentSelector  # noqa: E402
from fulfillment_services import (  # noqa: E402
    decrease_shipment,
    increase_shipment,
    reconcile_purchase_status,
    set_shipment_target,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fulfillment kernel CLI")
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create all tables")

    reconcile = sub.add_parser("reconcile", help="Reconcile purchase statuses")
    reconcile.add_argument("--tenant", required=True)

    totals = sub.add_parser("totals", help="Reserved quantity per barcode")
    totals.add_argument("--tenant", required=True)

    set_target = sub.add_parser("set-target", help="Set a barcode's shipment quantity")
    set_target.add_argument("--tenant", required=True)
    set_target.add_argument("--barcode", required=True)
    set_target.add_argument("--quantity", type=int, required=True)

    for name, help_text in (
        ("increase", "Reserve more units of a barcode"),
        ("decrease", "Release units of a barcode"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--tenant", required=True)
        p.add_argument("--barcode", required=True)
        p.add_argument("--delta", type=int, required=True)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    config = get_active_config(args.config)
    configure_logging(level=config.logging.level, stream=sys.stderr)
    init_engine_from_url(
        config.database.url,
        echo=config.database.echo,
        pool_size=config.database.pool_size,
        max_overflow=config.database.max_overflow,
    )

    if args.command == "init-db":
        create_tables()
        print(json.dumps({"success": True, "message": "Tables created"}))
        return 0

    session = get_session()
    try:
        if args.command == "reconcile":
            payload = reconcile_purchase_status(session, args.tenant, config).to_dict()
            ok = True
        elif args.command == "totals":
            payload = {
                "tenant_id": args.tenant,
                "totals": ShipmentSelector(session).shipment_totals(args.tenant),
            }
            ok = True
        else:
            if args.command == "set-target":
                result = set_shipment_target(
                    session, args.tenant, args.barcode, args.quantity
                )
            elif args.command == "increase":
                result = increase_shipment(session, args.tenant, args.barcode, args.delta)
            else:
                result = decrease_shipment(session, args.tenant, args.barcode, args.delta)
            payload = result.to_dict()
            ok = result.success
    finally:
        session.close()

    print(json.dumps(payload, indent=2))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
