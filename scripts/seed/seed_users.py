"""
Bootstrap accounts seed (async, idempotent)
Run:  python scripts/seed/seed_users.py
"""

import os, sys
import asyncio
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from hrms.core.database import engine
from hrms.core.logging_config import setup_logging
from hrms.db.init_db import init_db

async def main():
    setup_logging()
    try:
        await init_db(seed=True)
    finally:
        await engine.dispose()

if __name__ == "__main__":
    asyncio.run(main())
