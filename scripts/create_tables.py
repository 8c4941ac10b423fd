"""
Create the Viral Eats MY schema (restaurants, trending_dishes, reviews, cache).

create_all only issues CREATE TABLE for tables that are missing, so running
this twice is harmless. Pass --reset to drop everything first (local dev only),
or --clear-cache to empty the persisted detail cache after a bulk import.

Usage:
    python scripts/create_tables.py
    python scripts/create_tables.py --clear-cache
    python scripts/create_tables.py --reset
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete

from viraleats.config import settings
from viraleats.database import engine
from viraleats.models import Base, CacheEntry


async def main(reset: bool = False, clear_cache: bool = False) -> None:
    async with engine.begin() as conn:
        if reset:
            if settings.app_env == "production":
                raise SystemExit("Refusing to drop tables with APP_ENV=production")
            print("Dropping all tables...")
            await conn.run_sync(Base.metadata.drop_all)

        await conn.run_sync(Base.metadata.create_all)
        print(f"Schema ready ({len(Base.metadata.sorted_tables)} tables):")
        for table in Base.metadata.sorted_tables:
            print(f"  ✓ {table.name}")

        if clear_cache and not reset:
            result = await conn.execute(delete(CacheEntry))
            print(f"Cleared {result.rowcount} persisted cache entries")

    await engine.dispose()
    print("\nNext: python scripts/import_restaurants.py --file data/restaurants.csv")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create Viral Eats MY tables")
    parser.add_argument("--reset", action="store_true", help="Drop all tables first")
    parser.add_argument("--clear-cache", action="store_true", help="Empty the cache table")
    args = parser.parse_args()
    asyncio.run(main(reset=args.reset, clear_cache=args.clear_cache))
