"""Unit tests for core data models"""

import pytest
from pydantic import ValidationError

from mindbridge.core.models import (
    ContinuityBridge,
    ConversationStats,
    EmotionalContext,
    Phase,
    PhaseState,
    TherapeuticElement,
    TherapeuticElementType,
    UserPreferences,
)


class TestEmotionalContext:
    """Test emotional analysis validation"""

    def test_accepts_camel_case_emotion(self) -> None:
        """Upstream analyzers may send primaryEmotion"""
        context = EmotionalContext.model_validate(
            {"primaryEmotion": "anxiety", "intensity": 0.8, "valence": -0.6}
        )

        assert context.primary_emotion == "anxiety"
        assert context.intensity == 0.8
        assert context.valence == -0.6

    def test_defaults(self) -> None:
        context = EmotionalContext()

        assert context.primary_emotion == "neutral"
        assert context.intensity == 0.5
        assert context.valence == 0.0

    @pytest.mark.parametrize("valence", [-1.5, 1.01])
    def test_rejects_out_of_range_valence(self, valence: float) -> None:
        with pytest.raises(ValidationError):
            EmotionalContext(primary_emotion="sad", intensity=0.5, valence=valence)

    @pytest.mark.parametrize("intensity", [-0.1, 2.0])
    def test_rejects_out_of_range_intensity(self, intensity: float) -> None:
        with pytest.raises(ValidationError):
            EmotionalContext(primary_emotion="sad", intensity=intensity, valence=0.0)


class TestTherapeuticElement:

    def test_effectiveness_bounds(self) -> None:
        with pytest.raises(ValidationError):
            TherapeuticElement(type="validation", content="acknowledging", effectiveness=1.2)

    def test_type_from_string(self) -> None:
        element = TherapeuticElement(type="coping_strategy", content="breathing", effectiveness=0.7)
        assert element.type == TherapeuticElementType.COPING_STRATEGY

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TherapeuticElement(type="lecture", content="...", effectiveness=0.5)


class TestConversationTurn:
    """Turns are immutable once built"""

    def test_turn_is_frozen(self, make_turn) -> None:
        turn = make_turn(message="hello")

        with pytest.raises(ValidationError):
            turn.user_message = "edited"

    def test_derived_phase_is_kept(self, make_turn) -> None:
        turn = make_turn(phase=Phase.WORKING)
        assert turn.conversation_phase == PhaseState(current=Phase.WORKING)

    def test_negative_sequence_rejected(self, make_turn) -> None:
        with pytest.raises(ValidationError):
            make_turn(sequence=-1)

    def test_json_round_trip_preserves_derived_fields(self, make_turn) -> None:
        turn = make_turn(
            topics=["work"],
            elements=[{"type": "insight", "content": "naming the pattern", "effectiveness": 0.9}],
            coping=["breathing"],
        )

        restored = type(turn).model_validate_json(turn.model_dump_json())

        assert restored == turn
        assert restored.topics == ("work",)
        assert restored.therapeutic_elements[0].type == TherapeuticElementType.INSIGHT


class TestDefaults:
    """Read-views default to empty values, never errors"""

    def test_empty_bridge(self) -> None:
        bridge = ContinuityBridge()

        assert bridge.previous_session_summary == ""
        assert bridge.emotional_journey == ""
        assert bridge.progress_made == []
        assert bridge.ongoing_concerns == []
        assert bridge.natural_transitions == []

    def test_empty_stats(self) -> None:
        stats = ConversationStats()

        assert stats.total_conversations == 0
        assert stats.last_conversation is None
        assert stats.emotional_progress.improvement == 0.0

    def test_adaptive_preferences(self) -> None:
        preferences = UserPreferences()

        assert preferences.response_length == "adaptive"
        assert preferences.include_examples is True
        assert preferences.communication_style == "unknown"
