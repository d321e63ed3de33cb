#!/usr/bin/env python3
"""Reset database schema by dropping and recreating all tables"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.database import close_db, reset_db


async def reset_database() -> None:
    """Drop and recreate all database tables"""
    await reset_db()
    await close_db()
    print("Database reset complete")


if __name__ == "__main__":
    asyncio.run(reset_database())
