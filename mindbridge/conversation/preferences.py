"""
Derive how a user prefers to be spoken to.

Preferences are replayed from the ledger on every read: explicit requests
found in user messages ("shorter please", "use bullet points") apply in
ledger order, so a later request overrides an earlier one. Learned
signals (communication style, topics, responsiveness to each kind of
therapeutic element) come from the same turns. Feedback about replies
("too long", "confusing") is replayed together with the turns, in time
order.
"""

from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from mindbridge.core.models import (
    ConversationTurn,
    PreferenceFeedback,
    TherapeuticElementType,
    UserPreferences,
)


# (phrases, preference field, value, request label)
PREFERENCE_RULES: List[Tuple[List[str], str, object, str]] = [
    (["shorter", "brief", "concise"], "response_length", "short", "shorter responses"),
    (["longer answer", "longer response", "more detail", "elaborate"], "response_length", "long", "longer responses"),
    (["simpler", "simple words", "simple language", "easy to understand"], "response_complexity", "simple", "simpler language"),
    (["more complex", "detailed explanation"], "response_complexity", "complex", "more complex explanations"),
    (["bullet points", "list format"], "preferred_format", "bullet_points", "bullet point format"),
    (["conversational", "talk normally"], "preferred_format", "conversational", "conversational format"),
    (["be formal", "more formal", "formal language", "professional tone"], "language_style", "formal", "formal language"),
    (["casual", "informal", "be friendly"], "language_style", "casual", "casual language"),
    (["no examples", "without examples"], "include_examples", False, "no examples"),
    (["with examples", "give examples"], "include_examples", True, "include examples"),
    (["no questions", "don't ask questions"], "include_questions", False, "no follow-up questions"),
]

# (phrases, preference field, value); feedback adjusts settings silently
FEEDBACK_RULES: List[Tuple[List[str], str, object]] = [
    (["too long", "too much"], "response_length", "short"),
    (["too short", "more detail"], "response_length", "long"),
    (["too complex", "confusing"], "response_complexity", "simple"),
]

RESPONSIVENESS_FIELDS: Dict[TherapeuticElementType, str] = {
    TherapeuticElementType.VALIDATION: "response_to_validation",
    TherapeuticElementType.INSIGHT: "response_to_insights",
    TherapeuticElementType.COPING_STRATEGY: "response_to_strategies",
}

EFFECTIVE_ELEMENT_THRESHOLD = 0.7
HIGH_ENGAGEMENT_THRESHOLD = 0.7


def infer_communication_style(turn: ConversationTurn) -> str:
    """Communication style shown by a single turn."""
    message = turn.user_message.lower()
    if turn.emotional_context.intensity > 0.7 and turn.user_engagement > 0.6:
        return "emotional"
    if "what should i" in message or "how do i" in message or "how can i" in message:
        return "direct"
    if "i think" in message or "analysis" in message or "because" in message:
        return "analytical"
    return "indirect"


def dominant_communication_style(turns: Sequence[ConversationTurn]) -> str:
    """Most frequent style across turns; ties go to the most recent style."""
    if not turns:
        return "unknown"

    styles = [infer_communication_style(t) for t in turns]
    counts = Counter(styles)
    best = max(counts.values())
    for style in reversed(styles):
        if counts[style] == best:
            return style
    return "unknown"


class PreferenceAnalyzer:
    """Replay a ledger into a UserPreferences snapshot."""

    def derive(
        self,
        turns: Sequence[ConversationTurn],
        feedback: Sequence[PreferenceFeedback] = (),
    ) -> UserPreferences:
        updates: Dict[str, object] = {}
        requests: List[str] = []

        # Requests in messages and feedback on replies, oldest first
        events = sorted(
            [(t.timestamp, t.user_message, False) for t in turns]
            + [(f.timestamp, f.feedback, True) for f in feedback],
            key=lambda event: event[0],
        )
        for _, text, is_feedback in events:
            lower = text.lower()
            if is_feedback:
                for phrases, field, value in FEEDBACK_RULES:
                    if any(phrase in lower for phrase in phrases):
                        updates[field] = value
                continue
            for phrases, field, value, label in PREFERENCE_RULES:
                if any(phrase in lower for phrase in phrases):
                    updates[field] = value
                    if label not in requests:
                        requests.append(label)

        responsiveness = {name: 0.5 for name in RESPONSIVENESS_FIELDS.values()}
        openness = 0.5
        topics: List[str] = []
        for turn in turns:
            for element in turn.therapeutic_elements:
                name = RESPONSIVENESS_FIELDS.get(element.type)
                if name and element.effectiveness > EFFECTIVE_ELEMENT_THRESHOLD:
                    responsiveness[name] = min(1.0, responsiveness[name] + 0.1)
            if turn.user_engagement > HIGH_ENGAGEMENT_THRESHOLD:
                openness = min(1.0, openness + 0.05)
            for topic in turn.topics:
                if topic not in topics:
                    topics.append(topic)

        if requests:
            logger.debug(f"Explicit preference requests: {', '.join(requests)}")

        return UserPreferences(
            **updates,
            explicit_requests=requests,
            communication_style=dominant_communication_style(turns),
            preferred_topics=topics,
            emotional_openness=openness,
            **responsiveness,
        )


def preference_instructions(preferences: Optional[UserPreferences]) -> str:
    """Render preferences as prompt instructions, one '- ' line each."""
    if preferences is None:
        return ""

    lines = []
    if preferences.response_length == "short":
        lines.append("Keep responses SHORT and CONCISE (2-3 sentences max)")
    elif preferences.response_length == "long":
        lines.append("Provide DETAILED and COMPREHENSIVE responses with thorough explanations")

    if preferences.response_complexity == "simple":
        lines.append("Use SIMPLE, EASY-TO-UNDERSTAND language")
        lines.append("Avoid complex terminology or concepts")
    elif preferences.response_complexity == "complex":
        lines.append("Provide DETAILED explanations with nuanced insights")

    if preferences.preferred_format == "bullet_points":
        lines.append("Format responses using BULLET POINTS or numbered lists")
    elif preferences.preferred_format == "structured":
        lines.append("Use STRUCTURED format with clear sections")

    if preferences.language_style == "formal":
        lines.append("Use FORMAL, PROFESSIONAL language")
    elif preferences.language_style == "casual":
        lines.append("Use CASUAL, FRIENDLY language")

    if not preferences.include_examples:
        lines.append("DO NOT include examples in your response")
    if not preferences.include_questions:
        lines.append("DO NOT ask follow-up questions")

    if preferences.explicit_requests:
        lines.append(
            f"REMEMBER: User has specifically requested: {', '.join(preferences.explicit_requests)}"
        )

    return "".join(f"- {line}\n" for line in lines)
