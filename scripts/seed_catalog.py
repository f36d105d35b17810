#!/usr/bin/env python3
"""Seed sample catalog script.

Generates a deterministic sample catalog (categories, simple and
variable products) and writes it to the configured document store.
Only useful with the SQL backend; the in-memory store does not outlive
the process.

Usage:
    STORAGE_BACKEND=sql python scripts/seed_catalog.py --mode small
    STORAGE_BACKEND=sql python scripts/seed_catalog.py --mode full --no-clear
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefront.application.seed_service import SeedService
from storefront.infrastructure.config import settings
from storefront.infrastructure.document_store import SqlDocumentStore, get_document_store
from storefront.infrastructure.logging_config import configure_logging


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the sample storefront catalog",
    )
    parser.add_argument(
        "--mode",
        choices=["small", "full"],
        default="small",
        help="Catalog size: small (~30 products) or full (~120 products)",
    )
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Don't clear existing catalog documents before seeding",
    )

    args = parser.parse_args()
    configure_logging()

    print("=" * 60)
    print("Storefront Catalog Seeder")
    print("=" * 60)
    print(f"Mode: {args.mode}")
    print(f"Storage: {settings.storage_backend}")
    print(f"Clear existing: {not args.no_clear}")
    print()

    store = get_document_store()
    if isinstance(store, SqlDocumentStore):
        print("Creating database tables...")
        await store.create_schema()
        print("Tables ready.")
        print()

    result = await SeedService(store).seed_catalog(
        mode=args.mode,
        clear_existing=not args.no_clear,
    )

    print(f"  ✓ Deleted: {result['deleted']} existing documents")
    print(f"  ✓ Categories: {result['categories_created']}")
    print(f"  ✓ Products: {result['products_created']}")
    print(f"  ✓ Variants: {result['variants_created']}")
    print(f"  ✓ Brands: {result['brands_used']}")
    print()
    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
