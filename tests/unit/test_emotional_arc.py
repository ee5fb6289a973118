"""Unit tests for emotional arc analysis"""

import pytest

from mindbridge.conversation.emotional_arc import EmotionalArcAnalyzer, join_naturally


@pytest.fixture
def analyzer() -> EmotionalArcAnalyzer:
    return EmotionalArcAnalyzer()


def _turns(make_turn, *points):
    return [
        make_turn(i, emotion=emotion, valence=valence)
        for i, (emotion, valence) in enumerate(points)
    ]


class TestTrend:

    def test_too_little_history_is_stable(self, analyzer, make_turn):
        assert analyzer.analyze([]).trend == "stable"

        arc = analyzer.analyze(_turns(make_turn, ("sad", -0.9)))
        assert arc.trend == "stable"
        assert arc.description == ""

    def test_sad_to_hopeful_is_improving(self, analyzer, make_turn):
        turns = _turns(make_turn, ("sadness", -0.7), ("anxiety", -0.5), ("hope", 0.6))

        arc = analyzer.analyze(turns)

        assert arc.trend == "improving"
        assert arc.emotions == ["sadness", "anxiety", "hope"]

    def test_falling_valence_is_declining(self, analyzer, make_turn):
        turns = _turns(make_turn, ("calm", 0.5), ("calm", 0.4), ("worried", -0.3), ("sad", -0.6))
        assert analyzer.analyze(turns).trend == "declining"

    def test_small_changes_are_stable(self, analyzer, make_turn):
        turns = _turns(make_turn, ("neutral", 0.0), ("neutral", 0.1), ("neutral", 0.05))
        assert analyzer.analyze(turns).trend == "stable"

    def test_only_trailing_window_counts(self, analyzer, make_turn):
        """Old history outside the window does not move the trend"""
        old = [("sad", -1.0)] * 5
        recent = [("calm", 0.3)] * 5
        turns = _turns(make_turn, *(old + recent))

        assert analyzer.analyze(turns).trend == "stable"
        assert analyzer.analyze(turns, window_size=10).trend == "improving"


class TestDescription:

    def test_single_emotion(self, analyzer, make_turn):
        turns = _turns(make_turn, ("stress", -0.4), ("stress", -0.4))

        arc = analyzer.analyze(turns)

        assert arc.description == (
            "You've been consistently feeling stress in our recent conversations, "
            "and your emotional state has remained fairly consistent."
        )

    def test_emotions_listed_in_first_seen_order(self, analyzer, make_turn):
        turns = _turns(make_turn, ("sad", -0.8), ("anxious", -0.6), ("sad", -0.2), ("hopeful", 0.5))

        arc = analyzer.analyze(turns)

        assert arc.description.startswith("You've moved through feeling sad, anxious and hopeful")
        assert arc.description.endswith("your emotional state has been improving.")


def test_join_naturally():
    assert join_naturally([]) == ""
    assert join_naturally(["work"]) == "work"
    assert join_naturally(["work", "family"]) == "work and family"
    assert join_naturally(["a", "b", "c"]) == "a, b and c"
