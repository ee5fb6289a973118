"""Ledger storage backends"""

from mindbridge.storage.ledger_store import LedgerStore, InMemoryLedgerStore
from mindbridge.storage.sqlite_store import SQLiteLedgerStore

__all__ = ["LedgerStore", "InMemoryLedgerStore", "SQLiteLedgerStore"]
