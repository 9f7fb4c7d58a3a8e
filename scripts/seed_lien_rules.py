"""Seed script for the Colorado lien rules.

Run with:
    python scripts/seed_lien_rules.py

Safe to re-run; rules already present are left untouched.
"""

from __future__ import annotations

import asyncio

from payforeman.config import get_settings
from payforeman.database import Database
from payforeman.services.lien_rule_seeder import seed_lien_rules


async def main():
    """Run seed script."""
    print("Seeding lien rules...")

    database = Database.from_url(get_settings().database_url)
    try:
        async with database.session() as session:
            added = await seed_lien_rules(session)
    finally:
        await database.dispose()

    print(f"\nDone! {added} lien rule(s) added.")


if __name__ == "__main__":
    asyncio.run(main())
