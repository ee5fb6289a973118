"""Core data models for the conversation memory engine"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional
from uuid import UUID, uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Phase(str, Enum):
    """Conversational phase of a single turn"""

    OPENING = "opening"
    EXPLORATION = "exploration"
    WORKING = "working"
    INTEGRATION = "integration"
    CLOSING = "closing"


class TherapeuticElementType(str, Enum):
    """Kinds of therapeutic moves an AI response can carry"""

    VALIDATION = "validation"
    INSIGHT = "insight"
    COPING_STRATEGY = "coping_strategy"
    REFRAME = "reframe"
    ENCOURAGEMENT = "encouragement"
    PROGRESS_ACKNOWLEDGMENT = "progress_acknowledgment"


class EmotionalContext(BaseModel):
    """Pre-computed emotional analysis of one user message"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    primary_emotion: str = Field(
        default="neutral",
        validation_alias=AliasChoices("primary_emotion", "primaryEmotion"),
    )
    intensity: float = Field(default=0.5, ge=0.0, le=1.0)
    valence: float = Field(default=0.0, ge=-1.0, le=1.0)


class TherapeuticElement(BaseModel):
    """A therapeutic move and how well it landed"""

    model_config = ConfigDict(frozen=True)

    type: TherapeuticElementType
    content: str
    effectiveness: float = Field(default=0.0, ge=0.0, le=1.0)


class PhaseState(BaseModel):
    """Phase assigned to a turn at record time"""

    model_config = ConfigDict(frozen=True)

    current: Phase
    duration: int = 1  # consecutive turns in this phase, this one included
    previous: Optional[Phase] = None
    transition_reason: Optional[str] = None


class EmotionalShift(BaseModel):
    """Change of primary emotion between consecutive turns"""

    model_config = ConfigDict(frozen=True)

    from_emotion: str
    to_emotion: str
    intensity_change: float


class ConversationTurn(BaseModel):
    """
    One user message / AI response exchange.

    Every derived field (engagement, phase, shift, triggers, coping
    strategies) is computed once when the turn is recorded and never
    recomputed, so a turn describes the conversation as it was then.
    """

    model_config = ConfigDict(frozen=True)

    # ========== IDENTITY ==========
    id: UUID = Field(default_factory=uuid4)
    user_id: str
    sequence: int = Field(ge=0)  # 0-based position in the user's ledger
    timestamp: datetime = Field(default_factory=datetime.now)

    # ========== RAW EXCHANGE ==========
    user_message: str
    ai_response: str

    # ========== CALLER-SUPPLIED ANALYSIS ==========
    emotional_context: EmotionalContext
    topics: tuple[str, ...] = ()
    therapeutic_elements: tuple[TherapeuticElement, ...] = ()

    # ========== DERIVED AT RECORD TIME ==========
    user_engagement: float = Field(ge=0.0, le=1.0)
    conversation_phase: PhaseState
    emotional_shift: Optional[EmotionalShift] = None
    triggers: tuple[str, ...] = ()
    coping_strategies: tuple[str, ...] = ()


class EmotionalArc(BaseModel):
    """Coarse emotional trend over a window of turns"""

    trend: Literal["improving", "declining", "stable"] = "stable"
    description: str = ""
    emotions: list[str] = Field(default_factory=list)


class ContinuityBridge(BaseModel):
    """Summary connecting a user's past sessions to the current message"""

    previous_session_summary: str = ""
    emotional_journey: str = ""
    progress_made: list[str] = Field(default_factory=list)
    ongoing_concerns: list[str] = Field(default_factory=list)
    natural_transitions: list[str] = Field(default_factory=list)


class UserPreferences(BaseModel):
    """How a user prefers to be spoken to, derived from their ledger"""

    response_length: Literal["short", "medium", "long", "adaptive"] = "adaptive"
    response_complexity: Literal["simple", "moderate", "complex", "adaptive"] = "adaptive"
    language_style: Literal["casual", "formal", "mixed", "adaptive"] = "adaptive"
    preferred_format: Literal["conversational", "structured", "bullet_points", "adaptive"] = "adaptive"
    include_examples: bool = True
    include_questions: bool = True
    explicit_requests: list[str] = Field(default_factory=list)

    # Learned from behaviour rather than stated
    communication_style: str = "unknown"
    preferred_topics: list[str] = Field(default_factory=list)
    emotional_openness: float = 0.5
    response_to_validation: float = 0.5
    response_to_insights: float = 0.5
    response_to_strategies: float = 0.5


class ConversationContext(BaseModel):
    """Recent history plus derived views, for prompt building"""

    recent_turns: list[ConversationTurn] = Field(default_factory=list)
    emotional_arc: str = "stable"
    arc_description: str = ""
    conversation_flow: str = "beginning_conversation"
    user_preferences: UserPreferences = Field(default_factory=UserPreferences)


class EmotionalProgress(BaseModel):
    """Signed valence change across the ledger and how steady it was"""

    improvement: float = 0.0
    consistency: float = 0.0


class ConversationStats(BaseModel):
    """Aggregate statistics over a user's whole ledger"""

    total_conversations: int = 0
    average_engagement: float = 0.0
    communication_style: str = "unknown"
    last_conversation: Optional[datetime] = None
    emotional_progress: EmotionalProgress = Field(default_factory=EmotionalProgress)
    preferred_topics: list[str] = Field(default_factory=list)


class PreferenceFeedback(BaseModel):
    """Out-of-band feedback about the companion's replies ("too long", "confusing")"""

    model_config = ConfigDict(frozen=True)

    user_id: str
    feedback: str
    timestamp: datetime = Field(default_factory=datetime.now)
