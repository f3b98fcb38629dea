"""
create_tables.py — idempotent table creation script.
Run this before starting LabelScan for the first time, or after schema changes.
Safe to run multiple times (create_all skips existing tables).

Usage:
    python scripts/create_tables.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Ensure the project root is on the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from labelscan.config import settings
from labelscan.database import check_db_connectivity, create_all, engine
from labelscan.models import Base


async def main() -> None:
    """Create the scan-history and dietary-profile tables."""
    print(f"Database: {settings.database_url}")
    if not await check_db_connectivity():
        print("  ✗ Database unreachable")
        await engine.dispose()
        sys.exit(1)

    print("Creating tables...")
    await create_all()
    for table in Base.metadata.sorted_tables:
        print(f"  ✓ {table.name}")

    print("\nDone. Start the API with `uvicorn labelscan.main:app`.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
