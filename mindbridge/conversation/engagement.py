"""
Estimate how substantively a user engaged in a single turn.

Longer, more personal messages carrying stronger emotion score higher
than short acknowledgments. Each factor saturates so one signal cannot
dominate the score.
"""

from typing import Optional

from loguru import logger

from mindbridge.conversation import signals
from mindbridge.core.config import Settings, settings as default_settings
from mindbridge.core.models import EmotionalContext


def _saturate(value: float, ceiling: float) -> float:
    if ceiling <= 0:
        return 0.0
    return min(1.0, value / ceiling)


class EngagementEstimator:
    """
    Score a user message in [0, 1].

    Factors (weights from settings):
    - length: chars / ENGAGEMENT_LENGTH_SATURATION
    - questions: '?' count / ENGAGEMENT_QUESTION_SATURATION
    - emotional vocabulary: distinct feeling words / saturation
    - personal pronouns: I / me / my / myself count / saturation
    - intensity: the caller's emotional intensity, taken as-is
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def estimate(
        self,
        message: str,
        emotional_context: Optional[EmotionalContext] = None,
    ) -> float:
        cfg = self.config
        intensity = emotional_context.intensity if emotional_context else 0.0

        length_score = _saturate(len(message.strip()), cfg.ENGAGEMENT_LENGTH_SATURATION)
        question_score = _saturate(message.count("?"), cfg.ENGAGEMENT_QUESTION_SATURATION)
        emotion_score = _saturate(
            signals.count_emotional_words(message), cfg.ENGAGEMENT_EMOTION_WORD_SATURATION
        )
        pronoun_score = _saturate(
            signals.count_personal_pronouns(message), cfg.ENGAGEMENT_PRONOUN_SATURATION
        )

        score = (
            length_score * cfg.ENGAGEMENT_LENGTH_WEIGHT
            + question_score * cfg.ENGAGEMENT_QUESTION_WEIGHT
            + emotion_score * cfg.ENGAGEMENT_EMOTION_WORD_WEIGHT
            + pronoun_score * cfg.ENGAGEMENT_PRONOUN_WEIGHT
            + intensity * cfg.ENGAGEMENT_INTENSITY_WEIGHT
        )
        score = max(0.0, min(1.0, score))

        logger.debug(
            f"Engagement {score:.2f} (length={length_score:.2f}, "
            f"questions={question_score:.2f}, emotion={emotion_score:.2f}, "
            f"pronouns={pronoun_score:.2f}, intensity={intensity:.2f})"
        )
        return score
