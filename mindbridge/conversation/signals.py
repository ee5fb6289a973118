"""
Keyword vocabularies for lightweight message signals.

The engine never classifies sentiment itself; these lists only pick up
surface signals (topics re-mentioned, coping strategies named, wrap-up
phrases) that the upstream analysis does not provide.
"""

import re
from typing import Dict, Iterable, List

EMOTIONAL_WORDS = [
    "feel", "feeling", "felt", "emotion", "sad", "happy", "angry", "worried",
    "anxious", "excited", "frustrated", "overwhelmed", "stressed", "calm",
    "peaceful", "upset", "hurt", "lonely", "scared", "afraid", "struggling",
    "hopeless", "disappoint",
    "महसूस", "लगता", "खुश", "उदास", "चिंता", "गुस्सा", "परेशान",
]

TOPIC_KEYWORDS: Dict[str, List[str]] = {
    "family": ["family", "parents", "mom", "dad", "परिवार", "माता-पिता"],
    "work": ["work", "job", "career", "office", "boss", "काम", "नौकरी"],
    "relationships": ["friend", "relationship", "partner", "love", "दोस्त", "रिश्ता"],
    "health": ["health", "sick", "tired", "स्वास्थ्य", "बीमार"],
    "education": ["study", "exam", "school", "college", "पढ़ाई", "परीक्षा"],
    "money": ["money", "financial", "expensive", "पैसा", "आर्थिक"],
    "anxiety": ["anxiety", "anxious", "panic", "nervous"],
    "stress": ["stress", "stressed", "stressing", "pressure"],
}

TRIGGER_PATTERNS: Dict[str, List[str]] = {
    "family_conflict": ["family fight", "parents angry", "parents are constantly fighting",
                        "family problem", "परिवार में झगड़ा"],
    "work_stress": ["work pressure", "boss angry", "deadline", "काम का तनाव"],
    "academic_pressure": ["exam stress", "grades", "study pressure", "परीक्षा का डर"],
    "relationship_issues": ["breakup", "fight with friend", "relationship problem", "रिश्ते की समस्या"],
    "financial_worry": ["money problem", "financial stress", "पैसे की चिंता"],
    "health_concern": ["health issue", "sick", "medical problem", "स्वास्थ्य की समस्या"],
}

COPING_PATTERNS: Dict[str, List[str]] = {
    "breathing": ["deep breath", "breathing", "सांस लेना"],
    "mindfulness": ["mindful", "present moment", "meditat", "ध्यान"],
    "exercise": ["walk", "exercise", "physical activity", "व्यायाम"],
    "social_support": ["talk to friend", "family support", "reach out", "सहारा लेना"],
    "journaling": ["journal", "write down", "express feelings", "लिखना"],
    "grounding": ["grounding", "5-4-3-2-1", "notice surroundings"],
}

# Resolution / wrap-up phrasing that marks a closing turn
CLOSING_SIGNALS = [
    "thank", "better now", "feel better", "feeling better", "a bit better",
    "that helps", "that helped", "goodbye", "bye", "talk later", "resolved",
    "sorted it out", "worked it out",
]

SELF_AWARENESS_INDICATORS = [
    "i realize", "i understand", "i notice", "i see that", "i think",
    "मुझे लगता है", "मैं समझता हूं", "मुझे एहसास है",
]

_PRONOUN_RE = re.compile(r"\b(i|me|my|myself)\b", re.IGNORECASE)


def _contains_any(text: str, phrases: Iterable[str]) -> bool:
    return any(phrase in text for phrase in phrases)


def count_emotional_words(message: str) -> int:
    """Number of distinct emotional vocabulary entries present."""
    lower = message.lower()
    return sum(1 for word in EMOTIONAL_WORDS if word in lower)


def count_personal_pronouns(message: str) -> int:
    return len(_PRONOUN_RE.findall(message))


def extract_topics(message: str) -> List[str]:
    """Topic tags whose keywords appear in a free-text message."""
    lower = message.lower()
    return [topic for topic, keywords in TOPIC_KEYWORDS.items() if _contains_any(lower, keywords)]


def mentions_topic(message: str, topic: str) -> bool:
    """
    True if a message re-mentions a topic tag.

    Matches the tag itself (underscores read as spaces) or any keyword
    registered for that tag.
    """
    lower = message.lower()
    tag = topic.lower()
    if tag in lower or tag.replace("_", " ") in lower:
        return True
    return tag in extract_topics(message)


def extract_triggers(message: str) -> List[str]:
    lower = message.lower()
    return [name for name, patterns in TRIGGER_PATTERNS.items() if _contains_any(lower, patterns)]


def extract_coping_strategies(user_message: str, ai_response: str) -> List[str]:
    combined = f"{user_message} {ai_response}".lower()
    return [name for name, patterns in COPING_PATTERNS.items() if _contains_any(combined, patterns)]


def has_closing_signal(message: str) -> bool:
    return _contains_any(message.lower(), CLOSING_SIGNALS)


def count_self_awareness(message: str) -> int:
    lower = message.lower()
    return sum(1 for indicator in SELF_AWARENESS_INDICATORS if indicator in lower)
