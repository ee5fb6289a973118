"""
Aggregate a window of turns into an emotional trend.

The trend compares mean valence of the earlier half of the window with the
later half. The description walks through the primary emotions in the
order they first appeared.
"""

from typing import List, Optional, Sequence

import numpy as np
from loguru import logger

from mindbridge.core.config import Settings, settings as default_settings
from mindbridge.core.models import ConversationTurn, EmotionalArc


TREND_PHRASES = {
    "improving": "your emotional state has been improving",
    "declining": "things have felt more challenging lately",
    "stable": "your emotional state has remained fairly consistent",
}


def join_naturally(items: List[str]) -> str:
    if len(items) <= 1:
        return "".join(items)
    return f"{', '.join(items[:-1])} and {items[-1]}"


class EmotionalArcAnalyzer:
    """Trend label plus a short journey description for a turn window."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def analyze(
        self,
        turns: Sequence[ConversationTurn],
        window_size: Optional[int] = None,
    ) -> EmotionalArc:
        """
        Analyze the most recent `window_size` turns.

        Args:
            turns: Ledger turns, oldest first
            window_size: Number of trailing turns to consider
                (defaults to ARC_WINDOW_SIZE)

        Returns:
            EmotionalArc; windows of 0 or 1 turns give a neutral
            "stable" arc with an empty description
        """
        size = self.config.ARC_WINDOW_SIZE if window_size is None else window_size
        window = list(turns[-size:]) if size > 0 else []

        if len(window) < 2:
            return EmotionalArc()

        valences = np.array([t.emotional_context.valence for t in window], dtype=float)
        split = len(valences) // 2
        delta = float(valences[split:].mean() - valences[:split].mean())

        threshold = self.config.ARC_TREND_THRESHOLD
        if delta > threshold:
            trend = "improving"
        elif delta < -threshold:
            trend = "declining"
        else:
            trend = "stable"

        emotions = self.emotions_in_order(window)
        description = self._describe(emotions, trend)

        logger.debug(f"Emotional arc over {len(window)} turns: {trend} (delta={delta:+.2f})")
        return EmotionalArc(trend=trend, description=description, emotions=emotions)

    @staticmethod
    def emotions_in_order(turns: Sequence[ConversationTurn]) -> List[str]:
        """Distinct primary emotions by first occurrence."""
        seen: List[str] = []
        for turn in turns:
            emotion = turn.emotional_context.primary_emotion
            if emotion not in seen:
                seen.append(emotion)
        return seen

    def _describe(self, emotions: List[str], trend: str) -> str:
        if len(emotions) == 1:
            journey = f"You've been consistently feeling {emotions[0]} in our recent conversations"
        else:
            journey = f"You've moved through feeling {join_naturally(emotions)}"
        return f"{journey}, and {TREND_PHRASES[trend]}."
