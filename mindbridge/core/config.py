"""Configuration management using Pydantic Settings"""

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent
    DB_PATH: Path = PROJECT_ROOT / "data" / "conversations.db"

    # Engagement estimation
    ENGAGEMENT_LENGTH_SATURATION: int = 200   # chars
    ENGAGEMENT_QUESTION_SATURATION: int = 3
    ENGAGEMENT_EMOTION_WORD_SATURATION: int = 5
    ENGAGEMENT_PRONOUN_SATURATION: int = 5
    ENGAGEMENT_LENGTH_WEIGHT: float = 0.30
    ENGAGEMENT_QUESTION_WEIGHT: float = 0.15
    ENGAGEMENT_EMOTION_WORD_WEIGHT: float = 0.20
    ENGAGEMENT_PRONOUN_WEIGHT: float = 0.15
    ENGAGEMENT_INTENSITY_WEIGHT: float = 0.20

    # Phase classification
    PHASE_OPENING_TURNS: int = 1
    PHASE_WORKING_MIN_LENGTH: int = 200
    PHASE_WORKING_MIN_INTENSITY: float = 0.6
    PHASE_INTEGRATION_MAX_LENGTH: int = 100
    PHASE_INTEGRATION_MAX_INTENSITY: float = 0.3

    # Emotional arc
    ARC_WINDOW_SIZE: int = 5
    ARC_TREND_THRESHOLD: float = 0.2

    # Continuity bridge
    BRIDGE_HISTORY_WINDOW: int = 5
    BRIDGE_MAX_SUMMARY_TOPICS: int = 3
    CONCERN_MIN_MENTIONS: int = 2
    PROGRESS_EFFECTIVENESS_THRESHOLD: float = 0.6

    # Progress acknowledgment
    PROGRESS_MIN_TURNS: int = 2
    PROGRESS_WINDOW: int = 10
    PROGRESS_IMPROVEMENT_THRESHOLD: float = 0.2
    ENGAGEMENT_TREND_THRESHOLD: float = 0.2
    SELF_AWARENESS_THRESHOLD: float = 0.3

    # Starters / context
    STARTER_COUNT: int = 3
    STARTER_HISTORY_WINDOW: int = 3
    DEFAULT_CONTEXT_LENGTH: int = 3

    # Logging
    LOG_LEVEL: str = "INFO"


settings = Settings()
