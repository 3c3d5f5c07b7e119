from __future__ import annotations

import re

from jarvis.intelligence.models import ReplyCategory

_GREETING_PATTERN = re.compile(
    r"\b(hi|hello|hey|greetings|good morning|good afternoon|good evening)\b"
)
_TIME_PATTERN = re.compile(r"\b(time|clock)\b")
_DATE_PATTERN = re.compile(r"\bdate\b|\bwhat day\b")
_BRAND_TOKENS = (
    "jarvis",
    "iron man",
    "ironman",
    "tony stark",
    "who are you",
    "your name",
)

# Checked top to bottom; each keyword owns exactly one canned reply.
MEDICAL_TOPIC_KEYWORDS = (
    "diabetes",
    "headache",
    "fever",
    "cough",
    "cold",
    "flu",
    "blood pressure",
    "hypertension",
    "asthma",
    "allergy",
)

_EMOTIONAL_TOKENS = (
    "sad",
    "depressed",
    "lonely",
    "anxious",
    "anxiety",
    "stressed",
    "upset",
    "worried",
    "scared",
    "afraid",
    "feel down",
)
_GRATITUDE_TOKENS = ("thank", "appreciate")


def classify_category(text: str) -> tuple[ReplyCategory, str | None]:
    normalized = text.strip().lower()
    if not normalized:
        return ReplyCategory.FALLBACK, None

    if _GREETING_PATTERN.search(normalized):
        return ReplyCategory.GREETING, None
    if _TIME_PATTERN.search(normalized):
        return ReplyCategory.TIME, None
    if _DATE_PATTERN.search(normalized):
        return ReplyCategory.DATE, None
    if any(token in normalized for token in _BRAND_TOKENS):
        return ReplyCategory.BRAND_REFERENCE, None
    topic = extract_medical_topic(normalized)
    if topic is not None:
        return ReplyCategory.MEDICAL_TOPIC, topic
    if any(token in normalized for token in _EMOTIONAL_TOKENS):
        return ReplyCategory.EMOTIONAL_SUPPORT, None
    if any(token in normalized for token in _GRATITUDE_TOKENS):
        return ReplyCategory.GRATITUDE, None
    return ReplyCategory.FALLBACK, None


def extract_medical_topic(text: str) -> str | None:
    normalized = text.strip().lower()
    for keyword in MEDICAL_TOPIC_KEYWORDS:
        if keyword in normalized:
            return keyword
    return None
