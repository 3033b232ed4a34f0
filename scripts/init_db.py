#!/usr/bin/env python3
"""
Database Initialization — Create tables, the admin account and seed content.

Usage:
    # Local (reads DATABASE_URL / config/settings.yaml):
    python scripts/init_db.py

    # Explicit URL:
    python scripts/init_db.py --url sqlite:///./portfolio.db

    # Check status only (no changes):
    python scripts/init_db.py --check
"""
import asyncio
import os
import sys
import argparse

# Ensure app root is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


async def check_status(initializer) -> int:
    from sqlalchemy import func, inspect, select
    from database.models import Base

    database = initializer.database
    print(f"Database: {database.dialect}")
    print(f"Tables defined: {', '.join(Base.metadata.tables.keys())}")

    async with database.engine.connect() as conn:
        existing = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        print(f"Tables existing: {', '.join(existing) or '(none)'}")

        missing = set(Base.metadata.tables.keys()) - set(existing)
        if missing:
            print(f"Tables MISSING: {', '.join(sorted(missing))}")
            print("Run without --check to create them.")
            return 1

        for name, table in Base.metadata.tables.items():
            count = await conn.scalar(select(func.count()).select_from(table))
            print(f"  {name}: {count} rows")
    print("All tables exist. ✓")
    return 0


async def run_init(url: str = None, check_only: bool = False) -> int:
    from config.settings import load_settings
    settings = load_settings()
    if url:
        settings.database.url = url

    from database.errors import InitializationError
    from database.initializer import DatabaseInitializer

    if not settings.database.url:
        print("DATABASE_URL is not set; nothing to initialize.")
        return 1

    initializer = DatabaseInitializer(settings)
    try:
        if not await initializer.test_connection(settings.database.url):
            print("Database connection failed. ✗")
            return 1
        if check_only:
            return await check_status(initializer)

        print("Initializing database...")
        try:
            await initializer.initialize_database()
        except InitializationError as e:
            print(f"Initialization failed: {e} ✗")
            return 1
        print("Initialization complete. ✓")
        return 0
    finally:
        await initializer.close()


def main():
    parser = argparse.ArgumentParser(description="Database initialization")
    parser.add_argument("--check", action="store_true", help="Check status only")
    parser.add_argument("--url", default=None, help="Database URL (overrides DATABASE_URL)")
    args = parser.parse_args()

    sys.exit(asyncio.run(run_init(url=args.url, check_only=args.check)))


if __name__ == "__main__":
    main()
