"""Initialize the conversation ledger database"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from mindbridge.core.config import settings
from mindbridge.storage.sqlite_store import SQLiteLedgerStore


async def init_database() -> None:
    """Create the data directory and the conversation_turns schema"""
    store = SQLiteLedgerStore(settings.DB_PATH)
    await store.connect()
    await store.close()

    logger.info(f"Database ready at: {settings.DB_PATH}")


if __name__ == "__main__":
    asyncio.run(init_database())
