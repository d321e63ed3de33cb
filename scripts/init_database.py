"""Initialize database tables and indexes.

Creates the sessions and events tables, including the unique keys the
idempotent create/append operations rely on. Use alembic for managed
deployments; this is for local development.

Usage:
    python scripts/init_database.py

Environment Variables:
    DATABASE_URL: Database connection string
"""

import asyncio
import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import text

from core.database import close_db, get_engine, init_db


async def main():
    """Initialize database."""
    engine = get_engine()
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    print(f"✓ Connected to {engine.url.render_as_string(hide_password=True)}")

    print("\nCreating database tables...")
    await init_db()
    print("✓ sessions and events tables created")

    await close_db()
    print("\nDatabase initialization complete!")


if __name__ == "__main__":
    asyncio.run(main())
