"""Conversation memory: recording turns and the read-views over them"""

from mindbridge.conversation.continuity_bridge import ContinuityBridgeGenerator
from mindbridge.conversation.emotional_arc import EmotionalArcAnalyzer
from mindbridge.conversation.engagement import EngagementEstimator
from mindbridge.conversation.insights import ConversationInsights
from mindbridge.conversation.memory_manager import ConversationMemoryManager
from mindbridge.conversation.phase import PhaseClassifier
from mindbridge.conversation.preferences import PreferenceAnalyzer, preference_instructions

__all__ = [
    "ContinuityBridgeGenerator",
    "ConversationInsights",
    "ConversationMemoryManager",
    "EmotionalArcAnalyzer",
    "EngagementEstimator",
    "PhaseClassifier",
    "PreferenceAnalyzer",
    "preference_instructions",
]
