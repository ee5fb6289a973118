"""
Classify the conversational phase of a turn.

The phase is a pure function of the ledger as it stood before the turn
(its length and the previous turn's phase), the message, and the emotional
context. It is evaluated once at record time.
"""

from typing import Optional, Sequence

from loguru import logger

from mindbridge.conversation import signals
from mindbridge.core.config import Settings, settings as default_settings
from mindbridge.core.models import ConversationTurn, EmotionalContext, Phase, PhaseState


TRANSITION_REASONS = {
    (Phase.OPENING, Phase.EXPLORATION): "user_opened_up",
    (Phase.OPENING, Phase.WORKING): "deeper_emotional_content",
    (Phase.EXPLORATION, Phase.WORKING): "deeper_emotional_content",
    (Phase.WORKING, Phase.INTEGRATION): "insights_emerging",
    (Phase.INTEGRATION, Phase.CLOSING): "resolution_reached",
    (Phase.WORKING, Phase.CLOSING): "resolution_reached",
    (Phase.EXPLORATION, Phase.CLOSING): "resolution_reached",
    (Phase.WORKING, Phase.EXPLORATION): "new_topic_introduced",
    (Phase.INTEGRATION, Phase.WORKING): "deeper_processing_needed",
    (Phase.CLOSING, Phase.EXPLORATION): "conversation_resumed",
}


class PhaseClassifier:
    """
    Finite-state phase classifier.

    Rules, first match wins:
    1. opening      - fewer than PHASE_OPENING_TURNS prior turns
    2. working      - long (> PHASE_WORKING_MIN_LENGTH) and intense
                      (> PHASE_WORKING_MIN_INTENSITY) disclosure
    3. closing      - resolution or wrap-up phrasing
    4. integration  - short, low-intensity follow-up
    5. exploration  - everything else
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def classify(
        self,
        prior_turns: Sequence[ConversationTurn],
        message: str,
        emotional_context: EmotionalContext,
    ) -> PhaseState:
        current = self._select_phase(len(prior_turns), message, emotional_context)

        previous = prior_turns[-1].conversation_phase if prior_turns else None
        if previous is None:
            return PhaseState(current=current)

        if previous.current == current:
            return PhaseState(
                current=current,
                duration=previous.duration + 1,
                previous=previous.current,
            )

        reason = TRANSITION_REASONS.get((previous.current, current), "natural_flow")
        logger.debug(f"Phase transition {previous.current.value} -> {current.value} ({reason})")
        return PhaseState(
            current=current,
            duration=1,
            previous=previous.current,
            transition_reason=reason,
        )

    def _select_phase(
        self,
        turn_index: int,
        message: str,
        emotional_context: EmotionalContext,
    ) -> Phase:
        cfg = self.config
        length = len(message.strip())
        intensity = emotional_context.intensity

        if turn_index < cfg.PHASE_OPENING_TURNS:
            return Phase.OPENING
        if length > cfg.PHASE_WORKING_MIN_LENGTH and intensity > cfg.PHASE_WORKING_MIN_INTENSITY:
            return Phase.WORKING
        if signals.has_closing_signal(message):
            return Phase.CLOSING
        if length < cfg.PHASE_INTEGRATION_MAX_LENGTH and intensity < cfg.PHASE_INTEGRATION_MAX_INTENSITY:
            return Phase.INTEGRATION
        return Phase.EXPLORATION
