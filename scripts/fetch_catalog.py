#!/usr/bin/env python3
"""
Fetch a catalog table and print it as JSON:
- products or gallery, through the same table client the site uses
- optional --search (products) or --category (gallery) filtering

Falls back to config/sample_catalog.yml when Sheets credentials are not set.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from visioncare.catalog.store import CatalogStore, GalleryCatalog, ProductCatalog
from visioncare.utils.config_loader import SiteConfig, load_site_config


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def build_store(table: str, cfg: SiteConfig) -> CatalogStore:
    # Imported here so the site module's startup wiring only runs when needed.
    from visioncare.api.main import build_table_client

    client = build_table_client(cfg)
    timeout = cfg.startup.load_timeout_seconds
    if table == "products":
        return ProductCatalog(client, cfg.sheets.tables.products, cfg.columns.products, timeout_seconds=timeout)
    return GalleryCatalog(client, cfg.sheets.tables.gallery, cfg.columns.gallery, timeout_seconds=timeout)


async def run(args: argparse.Namespace) -> int:
    cfg = load_site_config(args.config)
    store = build_store(args.table, cfg)
    await store.load()

    if store.failed:
        print(f"Failed to load {store.table_name}: {store.error}", file=sys.stderr)
        return 1

    if args.search:
        records = store.search(args.search)
    elif args.category and isinstance(store, GalleryCatalog):
        records = store.filter_by_category(args.category)
    else:
        records = store.records

    if args.limit:
        records = records[: args.limit]

    out = [{"row_id": r.row_id, "fields": r.to_dict()} for r in records]
    print(json.dumps(out, indent=2, ensure_ascii=False))
    logging.getLogger(__name__).info("%d of %d %s rows (state=%s)", len(out), len(store.records), args.table, store.state.value)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Print a catalog table as JSON")
    parser.add_argument("--table", choices=["products", "gallery"], default="products")
    parser.add_argument("--search", help="Case-insensitive search over the searchable columns")
    parser.add_argument("--category", help="Gallery category filter (exact, case-insensitive)")
    parser.add_argument("--limit", type=int, default=0, help="Print at most N rows")
    parser.add_argument("--config", help="Path to site_config.yml")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    setup_logging(args.verbose)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
