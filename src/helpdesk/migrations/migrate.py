"""
Database Migration Runner

Applies the bundled SQL migrations in file-name order.
"""
import asyncio
import sys

import asyncpg

from ..config import Config


async def run_migrations():
    """Run all SQL migrations in order"""
    dsn = Config.get_postgres_dsn()

    print("Connecting to database...")
    try:
        conn = await asyncpg.connect(dsn)
    except (OSError, asyncpg.PostgresError) as e:
        print(f"Connection failed: {e}")
        sys.exit(1)

    print("Connected successfully!")
    failed = 0
    try:
        for sql_file in sorted(Config.MIGRATIONS_DIR.glob("*.sql")):
            print(f"\nRunning migration: {sql_file.name}")
            sql = sql_file.read_text(encoding="utf-8")

            try:
                async with conn.transaction():
                    await conn.execute(sql)
                print(f"  ok {sql_file.name}")
            except asyncpg.PostgresError as e:
                failed += 1
                print(f"  failed {sql_file.name}: {e}")
    finally:
        await conn.close()

    if failed:
        print(f"\n{failed} migration(s) failed")
        sys.exit(1)
    print("\nMigrations complete!")


def main():
    asyncio.run(run_migrations())


if __name__ == "__main__":
    main()
