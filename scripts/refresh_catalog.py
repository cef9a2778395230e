#!/usr/bin/env python3
"""Fetch the Amberflo catalog once and write the translated snapshot as JSON."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from amberflo_catalog.catalog import sync_catalog
from amberflo_catalog.config import CatalogSettings
from amberflo_catalog.errors import CatalogError


def main() -> None:
    parser = argparse.ArgumentParser(description="Refresh the Amberflo catalog snapshot")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the snapshot JSON to this path (prints a summary only when omitted).",
    )
    parser.add_argument("--api-key", default=None, help="Overrides AMBERFLO_KB_APIKEY.")
    parser.add_argument("--url", default=None, help="Overrides AMBERFLO_KB_URL.")
    parser.add_argument(
        "--fail-on-empty",
        action="store_true",
        help="Exit non-zero if the snapshot contains zero plans.",
    )
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides = {"apiKey": args.api_key or "", "url": args.url or ""}
    try:
        payload = sync_catalog(CatalogSettings.from_sources(overrides), output_path=args.output)
    except CatalogError as exc:
        raise SystemExit(f"catalog refresh failed: {exc}") from exc
    if args.fail_on_empty and int(payload["plan_count"]) == 0:
        raise SystemExit("catalog refresh produced zero plans")
    print(
        f"catalog refreshed: {payload['plan_count']} plans, "
        f"{payload['product_count']} products, {payload['unit_count']} units "
        f"(effective {payload['effective_date']})"
    )


if __name__ == "__main__":
    main()
