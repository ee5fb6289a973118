"""Shared fixtures"""

from datetime import datetime, timedelta
from typing import Callable

import pytest

from mindbridge.core.models import (
    ConversationTurn,
    EmotionalContext,
    Phase,
    PhaseState,
    TherapeuticElement,
)

BASE_TIME = datetime(2026, 1, 5, 9, 0, 0)


@pytest.fixture
def make_turn() -> Callable[..., ConversationTurn]:
    """Build a turn directly, bypassing the manager's derivations"""

    def _make(
        sequence: int = 0,
        message: str = "I've been thinking about things",
        emotion: str = "neutral",
        intensity: float = 0.5,
        valence: float = 0.0,
        topics=(),
        elements=(),
        phase: Phase = Phase.EXPLORATION,
        engagement: float = 0.5,
        coping=(),
        user_id: str = "user_001",
    ) -> ConversationTurn:
        return ConversationTurn(
            user_id=user_id,
            sequence=sequence,
            timestamp=BASE_TIME + timedelta(minutes=sequence),
            user_message=message,
            ai_response="I'm here with you.",
            emotional_context=EmotionalContext(
                primary_emotion=emotion, intensity=intensity, valence=valence
            ),
            topics=tuple(topics),
            therapeutic_elements=tuple(
                e if isinstance(e, TherapeuticElement) else TherapeuticElement(**e)
                for e in elements
            ),
            user_engagement=engagement,
            conversation_phase=PhaseState(current=phase),
            coping_strategies=tuple(coping),
        )

    return _make
