"""Unit tests for keyword signals"""

import pytest

from mindbridge.conversation import signals


class TestTopics:

    def test_extract_topics(self):
        message = "My boss keeps piling on work and my parents don't get it"
        assert signals.extract_topics(message) == ["family", "work"]

    def test_no_topics(self):
        assert signals.extract_topics("the weather is nice") == []

    @pytest.mark.parametrize(
        "message, topic",
        [
            ("Work was fine today", "work"),
            ("My boss yelled at me again", "work"),
            ("Mom called this morning", "family"),
            ("Got my exam results back", "education"),
            ("still having sleep problems", "sleep_problems"),
        ],
    )
    def test_mentions_topic(self, message, topic):
        assert signals.mentions_topic(message, topic)

    def test_keyword_of_another_topic_does_not_match(self):
        assert not signals.mentions_topic("my boss was rude", "family")

    def test_unknown_tag_without_mention(self):
        assert not signals.mentions_topic("nothing much happened", "sleep_problems")


class TestMessageSignals:

    def test_triggers_and_coping(self):
        assert signals.extract_triggers("There's a deadline tomorrow") == ["work_stress"]
        assert signals.extract_coping_strategies(
            "I went for a walk", "Try a deep breath too"
        ) == ["breathing", "exercise"]

    def test_closing_and_self_awareness(self):
        assert signals.has_closing_signal("Thanks, that helped")
        assert not signals.has_closing_signal("I'm still upset")
        assert signals.count_self_awareness("I realize it and I notice it more") == 2
