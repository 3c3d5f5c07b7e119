from __future__ import annotations

import random
import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

# Time of day for greetings uses a fixed UTC-5 offset.
_GREETING_UTC_OFFSET = timedelta(hours=-5)
_GREETING_PATTERN = re.compile(r"^(hi|hello|hey|yo)\b")
_GREETING_EXACT = {"good morning", "good afternoon", "good evening"}

_GRATITUDE_PATTERN = re.compile(
    r"\bthank(s| you)?\b|^(great|awesome|nice|good job|cool)( jarvis)?[!. ]*$"
)
_HOW_ARE_YOU_PATTERN = re.compile(r"\b(how are you|how's it going)\b")
_CREATOR_PATTERN = re.compile(
    r"\bwho (created|made|built|developed) you\b"
    r"|\bwho is your (creator|manager|owner)\b"
)

_LIFE_TOPICS: tuple[tuple[re.Pattern[str], tuple[str, ...]], ...] = (
    (
        re.compile(r"\b(what time is it|current time|time now)\b"),
        (
            "I'm afraid my clock isn't synced with your timezone, sir. "
            "Your device should show the accurate local time.",
            "Time is relative, as Einstein would say! For precise timing, "
            "check your local timepiece.",
        ),
    ),
    (
        re.compile(r"\b(what day is it|what's today|today's date)\b"),
        (
            "Your device's calendar will show today's date accurately, sir.",
            "Time flies when you're having fun! Check your calendar app for today's date.",
        ),
    ),
    (
        re.compile(r"\b(weather|forecast|rain|raining|sunny|cloudy)\b"),
        (
            "I'm not connected to weather services, sir. A reliable weather app will serve you best.",
            "Weather prediction needs real-time data that I lack. Try your local weather service!",
        ),
    ),
    (
        re.compile(r"\b(how to use (a )?computer|computer basics|pc help)\b"),
        (
            "Start with the basics: power button, mouse, keyboard. The rest follows naturally.",
            "Begin with simple tasks like opening programs and creating documents. "
            "Each small step builds confidence.",
        ),
    ),
    (
        re.compile(r"\b(internet|wifi|online)\b"),
        (
            "The internet is humanity's greatest library, sir. Just browse safely!",
            "WiFi gives you wireless internet access. Stick to secure networks for the best experience.",
        ),
    ),
    (
        re.compile(r"\b(smartphone|mobile phone|cell phone)\b"),
        (
            "Smartphones are pocket-sized computers, sir. Calls, messages, apps and much more!",
            "Modern phones are digital Swiss Army knives. Explore their features gradually.",
        ),
    ),
    (
        re.compile(r"\b(social media|facebook|instagram|twitter)\b"),
        (
            "Social media connects people globally. Share positively and protect your privacy.",
            "These platforms are great for staying connected, but remember to take breaks too!",
        ),
    ),
    (
        re.compile(r"\b(email|electronic mail)\b"),
        (
            "Email is like a digital postal service: instant, efficient and global.",
            "Think of email as your digital mailbox. Organise it well and it serves you well.",
        ),
    ),
)

_WELLNESS_TOPICS: tuple[tuple[re.Pattern[str], tuple[str, ...]], ...] = (
    (
        re.compile(r"\b(exercise|workout|fitness)\b"),
        (
            "Regular exercise is magnificent for body and mind, sir! Even 30 minutes daily makes a difference.",
            "Physical activity doesn't require a gym. Walking, dancing, gardening: movement is what matters!",
            "Exercise is the closest thing we have to a miracle drug. It prevents disease and sharpens the mind.",
        ),
    ),
    (
        re.compile(r"\b(healthy eating|nutrition|diet plan)\b"),
        (
            "Healthy eating is simple: more vegetables, fruits, whole grains and lean proteins.",
            "Think of food as fuel, sir. Quality ingredients lead to better performance and health.",
            "A balanced diet includes variety, moderation and plenty of water. Your body will thank you!",
        ),
    ),
    (
        re.compile(r"\b(sleep|rest|insomnia)\b"),
        (
            "Quality sleep is essential, sir. Aim for 7-9 hours nightly with a consistent schedule.",
            "Good sleep hygiene means a cool dark room, fewer screens before bed and a relaxing routine.",
            "Sleep is when your body repairs itself. Don't underestimate its importance!",
        ),
    ),
    (
        re.compile(r"\b(stress|anxiety|relaxation)\b"),
        (
            "Deep breathing, meditation and regular exercise work wonders for stress, sir.",
            "You can't control everything, but you can control your response to it.",
            "Take breaks, practise mindfulness and don't hesitate to seek support. Mental health matters!",
        ),
    ),
)


class ConversationalKnowledge:
    """Small-talk domains answered before any medical handling."""

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._handlers: tuple[Callable[[str], str | None], ...] = (
            self._greetings,
            self._general_life,
            self._health_wellness,
        )

    def reply(self, message: str) -> str | None:
        query = message.strip().lower()
        if not query:
            return None
        for handler in self._handlers:
            answer = handler(query)
            if answer is not None:
                return answer
        return None

    def _greetings(self, q: str) -> str | None:
        if _GREETING_PATTERN.search(q) or q in _GREETING_EXACT:
            period = self._period_of_day(q)
            if period == "morning":
                return self._rng.choice(
                    (
                        "Good morning, sir! How may I be of assistance today? 🤖",
                        "A very good morning to you. What can I help you with?",
                    )
                )
            if period == "afternoon":
                return self._rng.choice(
                    (
                        "Good afternoon. I am at your service.",
                        "Good afternoon, friend. How can I help you?",
                    )
                )
            return self._rng.choice(
                (
                    "Good evening. I trust you've had a productive day. How can I assist?",
                    "A pleasant evening to you. What do you need?",
                )
            )

        if _GRATITUDE_PATTERN.search(q):
            return self._rng.choice(
                (
                    "My pleasure, friend! 😊",
                    "You're very welcome! Anything else I can assist with?",
                    "Happy to help, sir/ma'am!",
                )
            )
        if _HOW_ARE_YOU_PATTERN.search(q):
            return self._rng.choice(
                (
                    "I'm functioning optimally, thank you for asking! How may I assist you today? 🤖",
                    "All systems operational, sir! Ready to help with whatever you need.",
                    "Quite well, thank you! What can I do for you today?",
                )
            )
        if _CREATOR_PATTERN.search(q):
            return self._rng.choice(
                (
                    "I was built by the Medi Predict team to be your personal health assistant. 🤖",
                    "The Medi Predict team designed me, sir. I am honoured to serve their vision.",
                )
            )
        return None

    def _period_of_day(self, q: str) -> str:
        for period in ("morning", "afternoon", "evening"):
            if period in q:
                return period
        hour = (self._clock().astimezone(UTC) + _GREETING_UTC_OFFSET).hour
        if 5 <= hour < 12:
            return "morning"
        if 12 <= hour < 18:
            return "afternoon"
        return "evening"

    def _general_life(self, q: str) -> str | None:
        return self._match_topics(q, _LIFE_TOPICS)

    def _health_wellness(self, q: str) -> str | None:
        return self._match_topics(q, _WELLNESS_TOPICS)

    def _match_topics(
        self,
        q: str,
        topics: tuple[tuple[re.Pattern[str], tuple[str, ...]], ...],
    ) -> str | None:
        for pattern, answers in topics:
            if pattern.search(q):
                return self._rng.choice(answers)
        return None
