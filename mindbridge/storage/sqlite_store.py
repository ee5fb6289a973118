"""SQLite-backed ledger store with JSON turn payloads"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

import aiosqlite
from loguru import logger

from mindbridge.core.models import ConversationTurn, PreferenceFeedback
from mindbridge.storage.ledger_store import LedgerStore


class SQLiteLedgerStore(LedgerStore):
    """
    Durable ledger on SQLite.

    Features:
    - One row per turn, full turn serialized as JSON
    - UNIQUE(user_id, sequence) keeps each ledger append-only and gap-free
    - Each append is a single INSERT committed (or rolled back) as a unit
    """

    def __init__(self, db_path: Union[Path, str]) -> None:
        self.db_path = Path(db_path)
        self._conn: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Establish database connection"""
        if str(self.db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = await aiosqlite.connect(str(self.db_path))
        self._conn.row_factory = aiosqlite.Row

        await self._setup_schema()
        logger.info(f"Connected to database: {self.db_path}")

    async def close(self) -> None:
        """Close database connection"""
        if self._conn:
            await self._conn.close()
            self._conn = None
            logger.info("Database connection closed")

    def _require_conn(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Database not connected")
        return self._conn

    async def _setup_schema(self) -> None:
        conn = self._require_conn()

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS conversation_turns (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                sequence INTEGER NOT NULL,
                timestamp REAL NOT NULL,

                -- Full turn, including derived fields
                payload TEXT NOT NULL,

                UNIQUE(user_id, sequence)
            )
        """)

        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_turns_user_sequence
            ON conversation_turns(user_id, sequence)
        """)

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS preference_feedback (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                timestamp REAL NOT NULL,
                feedback TEXT NOT NULL
            )
        """)

        await conn.commit()
        logger.debug("Database schema initialized")

    async def append(self, turn: ConversationTurn) -> None:
        conn = self._require_conn()
        try:
            await conn.execute(
                """
                INSERT INTO conversation_turns (id, user_id, sequence, timestamp, payload)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    str(turn.id),
                    turn.user_id,
                    turn.sequence,
                    turn.timestamp.timestamp(),
                    turn.model_dump_json(),
                ),
            )
            await conn.commit()
        except Exception:
            await conn.rollback()
            raise

        logger.debug(f"Persisted turn {turn.sequence} for {turn.user_id}")

    async def get_turns(self, user_id: str) -> List[ConversationTurn]:
        conn = self._require_conn()
        cursor = await conn.execute(
            "SELECT payload FROM conversation_turns WHERE user_id = ? ORDER BY sequence",
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [ConversationTurn.model_validate_json(row["payload"]) for row in rows]

    async def append_feedback(self, feedback: PreferenceFeedback) -> None:
        conn = self._require_conn()
        await conn.execute(
            "INSERT INTO preference_feedback (user_id, timestamp, feedback) VALUES (?, ?, ?)",
            (feedback.user_id, feedback.timestamp.timestamp(), feedback.feedback),
        )
        await conn.commit()

    async def get_feedback(self, user_id: str) -> List[PreferenceFeedback]:
        conn = self._require_conn()
        cursor = await conn.execute(
            "SELECT timestamp, feedback FROM preference_feedback WHERE user_id = ? ORDER BY id",
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [
            PreferenceFeedback(
                user_id=user_id,
                feedback=row["feedback"],
                timestamp=datetime.fromtimestamp(row["timestamp"]),
            )
            for row in rows
        ]

    async def clear(self, user_id: str) -> None:
        conn = self._require_conn()
        try:
            await conn.execute("DELETE FROM conversation_turns WHERE user_id = ?", (user_id,))
            await conn.execute("DELETE FROM preference_feedback WHERE user_id = ?", (user_id,))
            await conn.commit()
        except Exception:
            await conn.rollback()
            raise
