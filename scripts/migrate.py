#!/usr/bin/env python
"""Create the PayForeman tables.

Usage:
    python scripts/migrate.py
    python scripts/migrate.py --database-url postgresql+asyncpg://...
    python scripts/migrate.py --dry-run
"""

import argparse
import asyncio
import sys

from payforeman.config import get_settings
from payforeman.database import Database
from payforeman.models import Base


async def create_tables(database_url: str) -> None:
    database = Database.from_url(database_url)
    try:
        async with database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await database.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create PayForeman tables")
    parser.add_argument(
        "--database-url",
        default=get_settings().database_url,
        help="Database URL",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the tables without creating them",
    )

    args = parser.parse_args()

    print("PayForeman Migration Runner")
    print("=" * 50)
    print(f"Database: {args.database_url.split('@')[-1] if '@' in args.database_url else args.database_url}")
    print()

    tables = sorted(Base.metadata.tables)
    print(f"Tables: {', '.join(tables)}")

    if args.dry_run:
        print("[DRY RUN] Nothing created")
        return 0

    asyncio.run(create_tables(args.database_url))
    print("OK")
    return 0


if __name__ == "__main__":
    sys.exit(main())
