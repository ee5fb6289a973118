"""
Conversation memory manager.

Owns the per-user ledgers (through a LedgerStore) and exposes the public
operations: recording turns, and the read-views computed on demand from a
ledger snapshot (continuity bridge, progress acknowledgment, starters,
context, statistics, preferences).
"""

import asyncio
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from loguru import logger
from pydantic import ValidationError

from mindbridge.conversation import signals
from mindbridge.conversation.continuity_bridge import ContinuityBridgeGenerator
from mindbridge.conversation.emotional_arc import EmotionalArcAnalyzer
from mindbridge.conversation.engagement import EngagementEstimator
from mindbridge.conversation.insights import ConversationInsights
from mindbridge.conversation.phase import PhaseClassifier
from mindbridge.conversation.preferences import PreferenceAnalyzer, preference_instructions
from mindbridge.core.config import Settings, settings as default_settings
from mindbridge.core.models import (
    ContinuityBridge,
    ConversationContext,
    ConversationStats,
    ConversationTurn,
    EmotionalContext,
    EmotionalShift,
    PreferenceFeedback,
    TherapeuticElement,
    UserPreferences,
)
from mindbridge.storage.ledger_store import InMemoryLedgerStore, LedgerStore


EmotionalAnalysis = Union[EmotionalContext, Mapping[str, Any]]
ElementInput = Union[TherapeuticElement, Mapping[str, Any]]


class ConversationMemoryManager:
    """
    Cross-session conversation memory for many users.

    Each user's ledger is independent. Writes for one user are serialized
    by a per-user lock so the phase of a new turn is always classified
    against the ledger exactly as it stood before that turn.
    """

    def __init__(
        self,
        store: Optional[LedgerStore] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.store = store or InMemoryLedgerStore()

        arc_analyzer = EmotionalArcAnalyzer(self.config)
        self.engagement = EngagementEstimator(self.config)
        self.phase_classifier = PhaseClassifier(self.config)
        self.bridge_generator = ContinuityBridgeGenerator(arc_analyzer, self.config)
        self.preferences = PreferenceAnalyzer()
        self.insights = ConversationInsights(arc_analyzer, self.preferences, self.config)

        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        logger.info("ConversationMemoryManager initialized")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def record_conversation_turn(
        self,
        user_id: str,
        user_message: str,
        ai_response: str,
        emotional_analysis: EmotionalAnalysis,
        topics: Optional[Iterable[str]] = None,
        therapeutic_elements: Optional[Sequence[ElementInput]] = None,
    ) -> ConversationTurn:
        """
        Record one exchange and return the enriched, immutable turn.

        Args:
            user_id: User identifier (required)
            user_message: What the user said
            ai_response: What the assistant replied
            emotional_analysis: Upstream analysis with primary_emotion,
                intensity in [0, 1] and valence in [-1, 1]
            topics: Topic tags detected upstream
            therapeutic_elements: Therapeutic moves in the response;
                malformed entries are skipped

        Raises:
            ValueError: user_id is missing
            pydantic.ValidationError: intensity or valence outside
                their ranges
        """
        if not user_id or not str(user_id).strip():
            logger.warning("Rejected turn without user_id")
            raise ValueError("user_id is required")

        try:
            emotional_context = (
                emotional_analysis
                if isinstance(emotional_analysis, EmotionalContext)
                else EmotionalContext.model_validate(emotional_analysis or {})
            )
        except ValidationError as e:
            logger.warning(f"Rejected turn for {user_id}: {e.error_count()} invalid field(s)")
            raise

        elements = self._valid_elements(user_id, therapeutic_elements)
        user_message = user_message or ""
        ai_response = ai_response or ""

        async with self._locks[user_id]:
            history = await self.store.get_turns(user_id)

            turn = ConversationTurn(
                user_id=user_id,
                sequence=len(history),
                timestamp=self._next_timestamp(history),
                user_message=user_message,
                ai_response=ai_response,
                emotional_context=emotional_context,
                topics=self._normalize_topics(topics),
                therapeutic_elements=elements,
                user_engagement=self.engagement.estimate(user_message, emotional_context),
                conversation_phase=self.phase_classifier.classify(
                    history, user_message, emotional_context
                ),
                emotional_shift=self._detect_shift(history, emotional_context),
                triggers=tuple(signals.extract_triggers(user_message)),
                coping_strategies=tuple(
                    signals.extract_coping_strategies(user_message, ai_response)
                ),
            )
            await self.store.append(turn)

        logger.debug(
            f"Recorded turn {turn.sequence} for {user_id}: "
            f"phase={turn.conversation_phase.current.value}, "
            f"engagement={turn.user_engagement:.2f}"
        )
        return turn

    async def update_preferences_from_feedback(self, user_id: str, feedback: str) -> None:
        """
        Record feedback about the companion's replies.

        "too long" / "too much" ask for shorter replies, "too short" /
        "more detail" for longer ones, "too complex" / "confusing" for
        simpler language. Feedback applies after every earlier turn.
        """
        if not user_id or not str(user_id).strip():
            logger.warning("Rejected feedback without user_id")
            raise ValueError("user_id is required")

        async with self._locks[user_id]:
            history = await self.store.get_turns(user_id)
            await self.store.append_feedback(
                PreferenceFeedback(
                    user_id=user_id,
                    feedback=feedback or "",
                    timestamp=self._next_timestamp(history),
                )
            )
        logger.debug(f"Recorded preference feedback for {user_id}")

    async def clear_user_data(self, user_id: str) -> None:
        """Discard a user's entire ledger. Safe to call when none exists."""
        # The lock outlives the data: writers may already be queued on it
        async with self._locks[user_id]:
            await self.store.clear(user_id)
        logger.info(f"Cleared conversation data for user {user_id}")

    # ------------------------------------------------------------------
    # Read-views
    # ------------------------------------------------------------------

    async def get_turns(self, user_id: str) -> List[ConversationTurn]:
        return await self.store.get_turns(user_id)

    async def generate_continuity_bridge(
        self,
        user_id: str,
        current_message: str = "",
    ) -> ContinuityBridge:
        turns = await self.store.get_turns(user_id)
        return self.bridge_generator.generate(turns, current_message or "")

    async def generate_progress_acknowledgment(self, user_id: str) -> str:
        turns = await self.store.get_turns(user_id)
        return self.insights.progress_acknowledgment(turns)

    async def generate_conversation_starters(self, user_id: str) -> List[str]:
        turns = await self.store.get_turns(user_id)
        return self.insights.conversation_starters(turns)

    async def get_conversation_context(
        self,
        user_id: str,
        limit: Optional[int] = None,
    ) -> ConversationContext:
        turns = await self.store.get_turns(user_id)
        feedback = await self.store.get_feedback(user_id)
        return self.insights.conversation_context(turns, limit, feedback)

    async def get_user_conversation_stats(self, user_id: str) -> ConversationStats:
        turns = await self.store.get_turns(user_id)
        return self.insights.conversation_stats(turns)

    async def get_user_preferences(self, user_id: str) -> UserPreferences:
        turns = await self.store.get_turns(user_id)
        feedback = await self.store.get_feedback(user_id)
        return self.preferences.derive(turns, feedback)

    async def generate_preference_instructions(self, user_id: str) -> str:
        return preference_instructions(await self.get_user_preferences(user_id))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _next_timestamp(history: Sequence[ConversationTurn]) -> datetime:
        """Now, nudged forward if needed so timestamps strictly increase."""
        now = datetime.now()
        if history and now <= history[-1].timestamp:
            return history[-1].timestamp + timedelta(microseconds=1)
        return now

    @staticmethod
    def _valid_elements(
        user_id: str,
        therapeutic_elements: Optional[Sequence[ElementInput]],
    ) -> tuple:
        elements = []
        for raw in therapeutic_elements or []:
            if isinstance(raw, TherapeuticElement):
                elements.append(raw)
                continue
            try:
                elements.append(TherapeuticElement.model_validate(raw))
            except ValidationError:
                logger.warning(f"Skipping malformed therapeutic element for {user_id}: {raw!r}")
        return tuple(elements)

    @staticmethod
    def _normalize_topics(topics: Optional[Iterable[str]]) -> tuple:
        seen: List[str] = []
        for topic in topics or []:
            tag = str(topic).strip()
            if tag and tag not in seen:
                seen.append(tag)
        return tuple(seen)

    @staticmethod
    def _detect_shift(
        history: Sequence[ConversationTurn],
        emotional_context: EmotionalContext,
    ) -> Optional[EmotionalShift]:
        if not history:
            return None
        last = history[-1].emotional_context
        if last.primary_emotion == emotional_context.primary_emotion:
            return None
        return EmotionalShift(
            from_emotion=last.primary_emotion,
            to_emotion=emotional_context.primary_emotion,
            intensity_change=abs(emotional_context.intensity - last.intensity),
        )
