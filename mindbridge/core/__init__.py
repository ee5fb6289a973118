"""Core data models and configuration"""

from mindbridge.core.models import (
    Phase,
    TherapeuticElementType,
    EmotionalContext,
    TherapeuticElement,
    PhaseState,
    EmotionalShift,
    ConversationTurn,
    EmotionalArc,
    ContinuityBridge,
    UserPreferences,
    ConversationContext,
    EmotionalProgress,
    ConversationStats,
    PreferenceFeedback,
)
from mindbridge.core.config import settings

__all__ = [
    "Phase",
    "TherapeuticElementType",
    "EmotionalContext",
    "TherapeuticElement",
    "PhaseState",
    "EmotionalShift",
    "ConversationTurn",
    "EmotionalArc",
    "ContinuityBridge",
    "UserPreferences",
    "ConversationContext",
    "EmotionalProgress",
    "ConversationStats",
    "PreferenceFeedback",
    "settings",
]
