from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ReplyCategory(StrEnum):
    GREETING = "greeting"
    TIME = "time"
    DATE = "date"
    BRAND_REFERENCE = "brand_reference"
    MEDICAL_TOPIC = "medical_topic"
    EMOTIONAL_SUPPORT = "emotional_support"
    GRATITUDE = "gratitude"
    FALLBACK = "fallback"


class ReplySource(StrEnum):
    EMERGENCY = "emergency-detection"
    CONVERSATIONAL = "conversational"
    HEALTH_EDUCATION = "health-education"
    MODEL = "model"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Reply:
    category: ReplyCategory
    text: str
    topic: str | None = None


@dataclass(frozen=True)
class ChatHistoryItem:
    role: str
    content: str


@dataclass
class DoctorReply:
    reply: str
    source: ReplySource
    error: str | None = None
