"""
Statistics, progress acknowledgment and conversation starters.

All outputs are read-views over a user's ledger. Text is drawn from small
fixed template sets so that acknowledgments always speak about feelings
and first-session starters always cover heart and mind check-ins.
"""

from typing import List, Optional, Sequence

import numpy as np
from loguru import logger

from mindbridge.conversation import signals
from mindbridge.conversation.continuity_bridge import display_topic, rank_topics
from mindbridge.conversation.emotional_arc import EmotionalArcAnalyzer
from mindbridge.conversation.preferences import PreferenceAnalyzer, dominant_communication_style
from mindbridge.core.config import Settings, settings as default_settings
from mindbridge.core.models import (
    ConversationContext,
    ConversationStats,
    ConversationTurn,
    EmotionalProgress,
    Phase,
    PreferenceFeedback,
)


GENERIC_STARTERS = [
    "How has your heart been feeling today?",
    "What's been on your mind lately?",
    "I'm here to listen - what would you like to talk about?",
]

LOW_MOOD_EMOTIONS = {"sad", "sadness", "depressed", "down", "lonely", "grief", "hopeless"}
ANXIOUS_EMOTIONS = {"anxious", "anxiety", "worried", "nervous", "panic", "fear", "scared"}
STRESSED_EMOTIONS = {"stress", "stressed", "overwhelmed", "frustrated", "frustration"}
UPLIFTED_EMOTIONS = {"hopeful", "hope", "better", "happy", "calm", "relieved", "grateful"}

TOPIC_STARTERS = {
    "family": "How have things been with your family?",
    "work": "How has work been treating you?",
    "career": "How has work been treating you?",
    "relationships": "How are your relationships feeling lately?",
    "anxiety": "Is the anxiety you mentioned still weighing on you?",
    "stress": "How have you been managing the stress you mentioned?",
}

STYLE_STARTERS = {
    "direct": "What's the main thing on your mind today?",
    "emotional": "How is your heart today?",
}

ACKNOWLEDGMENT_TEMPLATES = [
    "I want to acknowledge that {and_joined}.",
    "I've been noticing that {comma_joined}.",
    "It seems like {and_joined}.",
]


def _mean(values: Sequence[float]) -> float:
    return float(np.mean(values)) if len(values) else 0.0


def _halves(turns: Sequence[ConversationTurn]):
    split = len(turns) // 2
    return turns[:split], turns[split:]


class ConversationInsights:
    """Stats & starters service over a user's ledger."""

    def __init__(
        self,
        arc_analyzer: Optional[EmotionalArcAnalyzer] = None,
        preference_analyzer: Optional[PreferenceAnalyzer] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.arc_analyzer = arc_analyzer or EmotionalArcAnalyzer(self.config)
        self.preference_analyzer = preference_analyzer or PreferenceAnalyzer()

    # ------------------------------------------------------------------
    # Progress acknowledgment
    # ------------------------------------------------------------------

    def progress_acknowledgment(self, turns: Sequence[ConversationTurn]) -> str:
        """
        Acknowledge the user's progress, or '' when there is too little
        history or nothing worth acknowledging.
        """
        cfg = self.config
        window = list(turns[-cfg.PROGRESS_WINDOW:])
        if len(window) < cfg.PROGRESS_MIN_TURNS:
            return ""

        early, late = _halves(window)
        elements = []

        valence_gain = (
            _mean([t.emotional_context.valence for t in late])
            - _mean([t.emotional_context.valence for t in early])
        )
        if valence_gain > cfg.PROGRESS_IMPROVEMENT_THRESHOLD:
            elements.append(
                "you seem to be feeling a bit more settled than when we first started talking"
            )
        elif len(window) >= 3 and self._consistency(window) > 0.7:
            elements.append("you've been working through some consistent feelings")

        coping_gain = (
            sum(len(t.coping_strategies) for t in late)
            - sum(len(t.coping_strategies) for t in early)
        ) / len(window)
        if coping_gain > 0.3:
            elements.append(
                "you've been trying some of the strategies we've discussed for those feelings"
            )

        engagement_gain = (
            _mean([t.user_engagement for t in late]) - _mean([t.user_engagement for t in early])
        )
        if engagement_gain > cfg.ENGAGEMENT_TREND_THRESHOLD:
            elements.append("you've been sharing your feelings more openly with me")

        awareness = sum(signals.count_self_awareness(t.user_message) for t in window) / len(window)
        if min(1.0, awareness) > cfg.SELF_AWARENESS_THRESHOLD:
            elements.append("you're becoming more aware of your patterns and feelings")

        if not elements:
            return ""

        template = ACKNOWLEDGMENT_TEMPLATES[len(turns) % len(ACKNOWLEDGMENT_TEMPLATES)]
        acknowledgment = template.format(
            and_joined=" and ".join(elements),
            comma_joined=", and ".join(elements),
        )
        logger.debug(f"Progress acknowledgment built from {len(elements)} signals")
        return acknowledgment

    # ------------------------------------------------------------------
    # Conversation starters
    # ------------------------------------------------------------------

    def conversation_starters(self, turns: Sequence[ConversationTurn]) -> List[str]:
        """Exactly STARTER_COUNT opening prompts, contextual ones first."""
        count = self.config.STARTER_COUNT
        if not turns:
            return GENERIC_STARTERS[:count]

        recent = list(turns[-self.config.STARTER_HISTORY_WINDOW:])
        starters: List[str] = []

        ranked = rank_topics(recent)
        if ranked:
            topic = ranked[0].topic
            starters.append(
                TOPIC_STARTERS.get(
                    topic,
                    f"Last time {display_topic(topic)} came up - how are things with that now?",
                )
            )

        starters.extend(self._emotion_starters(recent[-1].emotional_context.primary_emotion))

        style_starter = STYLE_STARTERS.get(dominant_communication_style(turns))
        if style_starter:
            starters.append(style_starter)

        unique: List[str] = []
        for starter in starters + GENERIC_STARTERS:
            if starter not in unique:
                unique.append(starter)
        return unique[:count]

    @staticmethod
    def _emotion_starters(emotion: str) -> List[str]:
        emotion = emotion.lower()
        if emotion in LOW_MOOD_EMOTIONS:
            return [
                "How have you been feeling since we last talked?",
                "I've been thinking about what you shared - how are things today?",
            ]
        if emotion in ANXIOUS_EMOTIONS or emotion in STRESSED_EMOTIONS:
            noun = "anxiety" if emotion in ANXIOUS_EMOTIONS else "stress"
            return [
                f"How has your {noun} been since our last conversation?",
                "Have you been able to try any of those calming techniques?",
            ]
        if emotion in UPLIFTED_EMOTIONS:
            return [
                "You seemed to be feeling a bit better last time - how are you today?",
                "I'm curious how things have been going for you.",
            ]
        return []

    # ------------------------------------------------------------------
    # Context and statistics
    # ------------------------------------------------------------------

    def conversation_context(
        self,
        turns: Sequence[ConversationTurn],
        limit: Optional[int] = None,
        feedback: Sequence[PreferenceFeedback] = (),
    ) -> ConversationContext:
        limit = self.config.DEFAULT_CONTEXT_LENGTH if limit is None else limit
        recent = list(turns[-limit:]) if limit > 0 else []
        arc = self.arc_analyzer.analyze(recent, window_size=len(recent))

        return ConversationContext(
            recent_turns=recent,
            emotional_arc=arc.trend,
            arc_description=arc.description,
            conversation_flow=self.conversation_flow(recent),
            user_preferences=self.preference_analyzer.derive(turns, feedback),
        )

    @staticmethod
    def conversation_flow(turns: Sequence[ConversationTurn]) -> str:
        if len(turns) < 2:
            return "beginning_conversation"

        phases = [t.conversation_phase.current for t in turns]
        changes = sum(1 for prev, cur in zip(phases, phases[1:]) if prev != cur)

        if changes > 2:
            return "dynamic_exploration"
        if phases[-1] == Phase.WORKING:
            return "deep_therapeutic_work"
        if phases[-1] == Phase.INTEGRATION:
            return "consolidating_insights"
        return "steady_exploration"

    def conversation_stats(self, turns: Sequence[ConversationTurn]) -> ConversationStats:
        if not turns:
            return ConversationStats()

        stats = ConversationStats(
            total_conversations=len(turns),
            average_engagement=_mean([t.user_engagement for t in turns]),
            communication_style=dominant_communication_style(turns),
            last_conversation=turns[-1].timestamp,
            emotional_progress=self.emotional_progress(turns),
            preferred_topics=[s.topic for s in rank_topics(turns)],
        )
        logger.debug(
            f"Stats: {stats.total_conversations} turns, "
            f"engagement={stats.average_engagement:.2f}, "
            f"improvement={stats.emotional_progress.improvement:+.2f}"
        )
        return stats

    def emotional_progress(self, turns: Sequence[ConversationTurn]) -> EmotionalProgress:
        """Latest minus earliest valence, with 1 - variance as consistency."""
        if len(turns) < 2:
            return EmotionalProgress()

        improvement = turns[-1].emotional_context.valence - turns[0].emotional_context.valence
        return EmotionalProgress(
            improvement=improvement,
            consistency=self._consistency(turns),
        )

    @staticmethod
    def _consistency(turns: Sequence[ConversationTurn]) -> float:
        valences = np.array([t.emotional_context.valence for t in turns], dtype=float)
        return max(0.0, 1.0 - float(valences.var()))
