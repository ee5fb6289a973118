"""Unit tests for the engagement estimator"""

import pytest

from mindbridge.conversation.engagement import EngagementEstimator
from mindbridge.core.config import Settings
from mindbridge.core.models import EmotionalContext


LONG_MESSAGE = (
    "I'm really struggling with my family situation. My parents don't understand me "
    "and I feel like I'm constantly disappointing them. How can I deal with this?"
)


@pytest.fixture
def estimator() -> EngagementEstimator:
    return EngagementEstimator()


def test_short_message_scores_below_long_message(estimator):
    context = EmotionalContext(primary_emotion="sadness", intensity=0.7, valence=-0.5)

    short = estimator.estimate("ok", context)
    detailed = estimator.estimate(LONG_MESSAGE, context)

    assert short < detailed


def test_detailed_disclosure_is_highly_engaged(estimator):
    context = EmotionalContext(primary_emotion="sadness", intensity=0.7, valence=-0.5)
    assert estimator.estimate(LONG_MESSAGE, context) > 0.5


def test_acknowledgment_is_low(estimator):
    context = EmotionalContext(primary_emotion="neutral", intensity=0.2, valence=0.0)
    assert estimator.estimate("ok", context) < 0.1


def test_score_stays_in_unit_range(estimator):
    context = EmotionalContext(primary_emotion="overwhelmed", intensity=1.0, valence=-1.0)
    flooded = ("I feel sad, anxious, worried, hurt and lonely. Why me? Why my life? " * 10)

    score = estimator.estimate(flooded, context)

    assert 0.0 <= score <= 1.0
    assert score == pytest.approx(1.0)


def test_empty_message_scores_only_intensity(estimator):
    context = EmotionalContext(intensity=0.5)
    assert estimator.estimate("", context) == pytest.approx(0.5 * 0.20)


def test_intensity_raises_score(estimator):
    calm = estimator.estimate("I had a long day", EmotionalContext(intensity=0.1))
    intense = estimator.estimate("I had a long day", EmotionalContext(intensity=0.9))
    assert intense > calm


def test_weights_are_configurable():
    config = Settings(
        ENGAGEMENT_LENGTH_WEIGHT=1.0,
        ENGAGEMENT_QUESTION_WEIGHT=0.0,
        ENGAGEMENT_EMOTION_WORD_WEIGHT=0.0,
        ENGAGEMENT_PRONOUN_WEIGHT=0.0,
        ENGAGEMENT_INTENSITY_WEIGHT=0.0,
    )
    estimator = EngagementEstimator(config)

    assert estimator.estimate("x" * 100, EmotionalContext(intensity=1.0)) == pytest.approx(0.5)
