"""Per-user append-only ledgers of conversation turns"""

from abc import ABC, abstractmethod
from typing import Dict, List

from loguru import logger

from mindbridge.core.models import ConversationTurn, PreferenceFeedback


class LedgerStore(ABC):
    """
    Storage contract for user ledgers.

    Turns are appended in recording order and never edited. Each append is
    atomic: readers see the whole turn or nothing. Preference feedback is
    kept alongside the turns and cleared with them.
    """

    @abstractmethod
    async def append(self, turn: ConversationTurn) -> None:
        """Append a turn to the end of its user's ledger"""

    @abstractmethod
    async def get_turns(self, user_id: str) -> List[ConversationTurn]:
        """All turns for a user, oldest first (empty if none)"""

    @abstractmethod
    async def append_feedback(self, feedback: PreferenceFeedback) -> None:
        """Record preference feedback for its user"""

    @abstractmethod
    async def get_feedback(self, user_id: str) -> List[PreferenceFeedback]:
        """All feedback for a user, oldest first (empty if none)"""

    @abstractmethod
    async def clear(self, user_id: str) -> None:
        """Discard a user's ledger and feedback; no-op if neither exists"""

    async def close(self) -> None:
        """Release backend resources"""


class InMemoryLedgerStore(LedgerStore):
    """Dict-of-lists ledger; ledgers are created lazily on first append."""

    def __init__(self) -> None:
        self._ledgers: Dict[str, List[ConversationTurn]] = {}
        self._feedback: Dict[str, List[PreferenceFeedback]] = {}

    async def append(self, turn: ConversationTurn) -> None:
        self._ledgers.setdefault(turn.user_id, []).append(turn)

    async def get_turns(self, user_id: str) -> List[ConversationTurn]:
        return list(self._ledgers.get(user_id, []))

    async def append_feedback(self, feedback: PreferenceFeedback) -> None:
        self._feedback.setdefault(feedback.user_id, []).append(feedback)

    async def get_feedback(self, user_id: str) -> List[PreferenceFeedback]:
        return list(self._feedback.get(user_id, []))

    async def clear(self, user_id: str) -> None:
        self._feedback.pop(user_id, None)
        if self._ledgers.pop(user_id, None) is not None:
            logger.debug(f"Dropped in-memory ledger for {user_id}")
