"""Unit tests for continuity bridge generation"""

import pytest

from mindbridge.conversation.continuity_bridge import (
    ContinuityBridgeGenerator,
    display_topic,
    rank_topics,
)
from mindbridge.core.models import ContinuityBridge, Phase


@pytest.fixture
def generator() -> ContinuityBridgeGenerator:
    return ContinuityBridgeGenerator()


class TestRankTopics:

    def test_frequency_first(self, make_turn):
        turns = [
            make_turn(0, topics=["family"]),
            make_turn(1, topics=["work"]),
            make_turn(2, topics=["work", "health"]),
        ]
        assert [s.topic for s in rank_topics(turns)][0] == "work"

    def test_recency_breaks_frequency_ties(self, make_turn):
        turns = [make_turn(0, topics=["family"]), make_turn(1, topics=["money"])]
        assert [s.topic for s in rank_topics(turns)] == ["money", "family"]

    def test_intensity_breaks_recency_ties(self, make_turn):
        turns = [
            make_turn(0, topics=["work"], intensity=0.2),
            make_turn(1, topics=["family"], intensity=0.9),
            make_turn(2, topics=["work", "family"], intensity=0.2),
        ]
        ranked = rank_topics(turns)

        assert [s.topic for s in ranked] == ["family", "work"]
        assert ranked[0].max_intensity == 0.9

    def test_display_topic(self):
        assert display_topic("coping_strategies") == "coping strategies"


class TestGenerate:

    def test_empty_ledger(self, generator):
        assert generator.generate([], "Hello") == ContinuityBridge()

    def test_recurring_work_stress(self, generator, make_turn):
        turns = [
            make_turn(
                0, "I'm stressed about work", emotion="stress", intensity=0.7, valence=-0.4,
                topics=["work", "stress"], phase=Phase.OPENING,
                elements=[{"type": "validation", "content": "acknowledging stress", "effectiveness": 0.8}],
            ),
            make_turn(
                1, "I tried the breathing exercises you suggested", emotion="hopeful",
                valence=0.3, topics=["coping_strategies"],
                elements=[{"type": "coping_strategy", "content": "breathing exercises", "effectiveness": 0.7}],
            ),
        ]

        bridge = generator.generate(turns, "Work is still stressing me out")

        assert "work" in bridge.previous_session_summary
        assert "coping strategies" in bridge.previous_session_summary
        assert "work" in bridge.ongoing_concerns
        assert "stress" in bridge.ongoing_concerns
        assert "coping_strategies" not in bridge.ongoing_concerns
        assert bridge.progress_made == ["acknowledging stress", "breathing exercises"]
        assert len(bridge.natural_transitions) == 2
        assert "work" in bridge.natural_transitions[0]
        assert bridge.emotional_journey.startswith("You've moved through feeling stress and hopeful")

    def test_repeated_topic_is_concern_without_re_mention(self, generator, make_turn):
        turns = [make_turn(0, topics=["family"]), make_turn(1, topics=["family"])]

        bridge = generator.generate(turns, "Hi again")

        assert bridge.ongoing_concerns == ["family"]
        assert bridge.natural_transitions == []

    def test_single_mention_is_not_a_concern(self, generator, make_turn):
        turns = [make_turn(0, topics=["health"])]
        assert generator.generate(turns, "Hi").ongoing_concerns == []

    def test_resolved_topic_drops_out(self, generator, make_turn):
        turns = [
            make_turn(0, topics=["exams"], valence=-0.6),
            make_turn(1, "Thanks, the exams went fine", topics=["exams"],
                      valence=0.6, phase=Phase.CLOSING),
        ]

        bridge = generator.generate(turns, "hello")

        assert bridge.ongoing_concerns == []

    def test_summary_falls_back_to_emotion(self, generator, make_turn):
        turns = [make_turn(0, emotion="lonely", valence=-0.5)]

        bridge = generator.generate(turns, "hey")

        assert bridge.previous_session_summary == "Last time you shared that you were feeling lonely."

    def test_summary_mentions_latest_insight_truncated(self, generator, make_turn):
        insight = "your worry spikes on Sunday evenings before the work week begins again"
        turns = [
            make_turn(0, topics=["work"],
                      elements=[{"type": "insight", "content": insight, "effectiveness": 0.5}]),
        ]

        summary = generator.generate(turns, "").previous_session_summary

        assert summary == f"Last time we talked about work. We explored {insight[:50]}...."

    def test_low_effectiveness_is_not_progress(self, generator, make_turn):
        turns = [
            make_turn(0, elements=[{"type": "reframe", "content": "reframing", "effectiveness": 0.6}]),
        ]
        assert generator.generate(turns, "").progress_made == []

    def test_only_recent_window_is_summarized(self, generator, make_turn):
        turns = [make_turn(0, topics=["money"])] + [
            make_turn(i, topics=["family"]) for i in range(1, 6)
        ]

        bridge = generator.generate(turns, "")

        assert "money" not in bridge.previous_session_summary
        assert "family" in bridge.previous_session_summary
