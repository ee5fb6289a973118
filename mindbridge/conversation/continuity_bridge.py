"""
Continuity bridge generation.

Connects what a user talked about in earlier sessions with the message
they are sending now: a recap of the most salient topics, the emotional
journey, therapeutic progress, concerns that keep coming back, and
transition phrases for concerns the new message picks up again.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from loguru import logger

from mindbridge.conversation import signals
from mindbridge.conversation.emotional_arc import EmotionalArcAnalyzer, join_naturally
from mindbridge.core.config import Settings, settings as default_settings
from mindbridge.core.models import (
    ContinuityBridge,
    ConversationTurn,
    Phase,
    TherapeuticElementType,
)


TRANSITION_TEMPLATES = [
    "I see {topic} is still on your mind.",
    "Last time we talked about {topic} too - how has that been since?",
    "It sounds like {topic} is still weighing on you.",
]

INSIGHT_TYPES = (TherapeuticElementType.INSIGHT, TherapeuticElementType.PROGRESS_ACKNOWLEDGMENT)


@dataclass
class TopicSalience:
    topic: str
    count: int
    first_index: int
    last_index: int
    max_intensity: float


def display_topic(topic: str) -> str:
    return topic.replace("_", " ")


def rank_topics(turns: Sequence[ConversationTurn]) -> List[TopicSalience]:
    """
    Rank topics by salience.

    Order: most mentions, then most recent mention, then the highest
    emotional intensity seen alongside the topic, then first appearance.
    """
    stats: Dict[str, TopicSalience] = {}
    for index, turn in enumerate(turns):
        intensity = turn.emotional_context.intensity
        for topic in turn.topics:
            entry = stats.get(topic)
            if entry is None:
                stats[topic] = TopicSalience(topic, 1, index, index, intensity)
                continue
            entry.count += 1
            entry.last_index = index
            entry.max_intensity = max(entry.max_intensity, intensity)

    return sorted(
        stats.values(),
        key=lambda s: (-s.count, -s.last_index, -s.max_intensity, s.first_index),
    )


class ContinuityBridgeGenerator:
    """Build a ContinuityBridge from a user's ledger and current message."""

    def __init__(
        self,
        arc_analyzer: Optional[EmotionalArcAnalyzer] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.arc_analyzer = arc_analyzer or EmotionalArcAnalyzer(self.config)

    def generate(
        self,
        turns: Sequence[ConversationTurn],
        current_message: str,
    ) -> ContinuityBridge:
        if not turns:
            return ContinuityBridge()

        window = list(turns[-self.config.BRIDGE_HISTORY_WINDOW:])
        ranked = rank_topics(window)
        concerns = self._ongoing_concerns(window, ranked, current_message)

        bridge = ContinuityBridge(
            previous_session_summary=self._session_summary(window, ranked),
            emotional_journey=self.arc_analyzer.analyze(turns).description,
            progress_made=self._progress_made(window),
            ongoing_concerns=concerns,
            natural_transitions=self._natural_transitions(concerns, current_message),
        )

        logger.debug(
            f"Continuity bridge: {len(bridge.ongoing_concerns)} concerns, "
            f"{len(bridge.progress_made)} progress items, "
            f"{len(bridge.natural_transitions)} transitions"
        )
        return bridge

    def _session_summary(
        self,
        window: List[ConversationTurn],
        ranked: List[TopicSalience],
    ) -> str:
        main_topics = [
            display_topic(s.topic) for s in ranked[: self.config.BRIDGE_MAX_SUMMARY_TOPICS]
        ]
        if main_topics:
            summary = f"Last time we talked about {join_naturally(main_topics)}."
        else:
            emotion = window[-1].emotional_context.primary_emotion
            summary = f"Last time you shared that you were feeling {emotion}."

        insight = self._latest_insight(window)
        if insight:
            summary = f"{summary} We explored {insight}."
        return summary

    @staticmethod
    def _latest_insight(window: List[ConversationTurn]) -> str:
        for turn in reversed(window):
            for element in reversed(turn.therapeutic_elements):
                if element.type in INSIGHT_TYPES:
                    content = element.content.strip()
                    return content if len(content) <= 50 else f"{content[:50]}..."
        return ""

    def _progress_made(self, window: List[ConversationTurn]) -> List[str]:
        threshold = self.config.PROGRESS_EFFECTIVENESS_THRESHOLD
        progress: List[str] = []
        for turn in window:
            for element in turn.therapeutic_elements:
                if element.effectiveness > threshold and element.content not in progress:
                    progress.append(element.content)
        return progress

    def _ongoing_concerns(
        self,
        window: List[ConversationTurn],
        ranked: List[TopicSalience],
        current_message: str,
    ) -> List[str]:
        concerns = []
        for salience in ranked:
            mentions = salience.count
            if signals.mentions_topic(current_message, salience.topic):
                mentions += 1
            if mentions < self.config.CONCERN_MIN_MENTIONS:
                continue
            if self._is_resolved(window[salience.last_index]):
                continue
            concerns.append(salience.topic)
        return concerns

    @staticmethod
    def _is_resolved(last_mention: ConversationTurn) -> bool:
        """A topic is resolved when its latest mention closed on a positive note."""
        return (
            last_mention.conversation_phase.current == Phase.CLOSING
            and last_mention.emotional_context.valence > 0
        )

    @staticmethod
    def _natural_transitions(concerns: List[str], current_message: str) -> List[str]:
        transitions = []
        for topic in concerns:
            if not signals.mentions_topic(current_message, topic):
                continue
            template = TRANSITION_TEMPLATES[len(transitions) % len(TRANSITION_TEMPLATES)]
            transitions.append(template.format(topic=display_topic(topic)))
        return transitions
