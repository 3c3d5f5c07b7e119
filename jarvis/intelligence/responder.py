from __future__ import annotations

import random
from datetime import UTC, datetime
from email.utils import format_datetime

from jarvis.intelligence.intent import classify_category
from jarvis.intelligence.models import Reply, ReplyCategory

GREETING_REPLIES = (
    "Hello! Jarvis at your service. How can I assist you today, friend? 😊",
    "Greetings, sir/ma'am! Ready when you are. What can I do for you? 👋",
    "Hi there! Always a pleasure. What would you like to know today? 🤖",
)

# {timestamp} is the RFC 1123 form of the current UTC time.
TIME_REPLIES = (
    "It's currently {clock} UTC ({timestamp}). Is there anything else I can help you with?",
    "My chronometer reads {timestamp}, friend. Anything else I can do for you?",
    "Right now it is {timestamp}. Shall I help you with something else?",
)

DATE_REPLIES = (
    "Today is {date} (UTC). Is there anything you'd like to plan for today?",
    "According to my calendar, it's {date} (UTC). What else can I do for you?",
)

BRAND_REPLIES = (
    "As an AI inspired by JARVIS, I must say Tony Stark's tech is impressive! 😄",
    "I'm Jarvis, your personal assistant for Medi Predict. No Iron Man suit included, sadly. 🤖",
    "Jarvis, at your service. Mr. Stark set a high bar, but I do my best, sir/ma'am!",
)

MEDICAL_TOPIC_REPLIES: dict[str, str] = {
    "diabetes": (
        "Diabetes is a chronic condition that affects how your body turns food into energy. "
        "Keeping blood sugar in range usually involves a balanced diet, regular activity, "
        "and the medication your doctor prescribes. Please check in with your healthcare "
        "provider for a personalised plan."
    ),
    "headache": (
        "Headaches are often linked to stress, dehydration, poor sleep or eye strain. "
        "Rest, water and a quiet dark room can help. If a headache is sudden, severe or "
        "unusual for you, please seek medical attention."
    ),
    "fever": (
        "A fever is usually your body fighting an infection. Rest and fluids help; "
        "see a doctor if it goes above 39°C (103°F), lasts more than three days, "
        "or comes with a stiff neck or confusion."
    ),
    "cough": (
        "Most coughs clear up on their own within a few weeks. Warm fluids and honey can "
        "soothe the throat. A cough with blood, shortness of breath or lasting longer than "
        "three weeks deserves a doctor's visit."
    ),
    "cold": (
        "The common cold is a viral infection that usually passes in 7 to 10 days. "
        "Rest, fluids and saline rinses help with the symptoms while it runs its course."
    ),
    "flu": (
        "Influenza tends to hit harder than a cold, with fever, aches and fatigue. "
        "Rest and fluids are key, and an annual flu vaccine is the best prevention. "
        "Contact a doctor early if you are in a high-risk group."
    ),
    "blood pressure": (
        "Healthy blood pressure is generally below 120/80 mmHg. Less salt, regular exercise, "
        "limited alcohol and stress management all help. Regular checks with your doctor "
        "are the best way to keep track."
    ),
    "hypertension": (
        "Hypertension often has no symptoms, which is why regular monitoring matters. "
        "Lifestyle changes and, when needed, prescribed medication keep it under control. "
        "Please follow up with your healthcare provider."
    ),
    "asthma": (
        "Asthma narrows the airways and can cause wheezing and breathlessness. Knowing your "
        "triggers and keeping your reliever inhaler close helps. If your inhaler isn't "
        "helping during an attack, call emergency services."
    ),
    "allergy": (
        "Allergies happen when the immune system overreacts to something harmless, like "
        "pollen or dust. Avoiding triggers and antihistamines can help. Swelling of the lips "
        "or throat is an emergency."
    ),
}

EMOTIONAL_SUPPORT_REPLIES = (
    "I'm sorry you're feeling this way, friend. You're not alone, and it's okay to reach out "
    "to someone you trust. Would you like a few calming tips? 💙",
    "That sounds tough, sir/ma'am. Take a slow, deep breath with me. Talking to a professional "
    "can really help too. I'm here if you want to chat. 🤗",
    "Your feelings matter. A short walk, some water and a bit of rest can make a difference. "
    "If it keeps weighing on you, please speak with a counsellor. 💪",
)

GRATITUDE_REPLIES = (
    "My pleasure, friend! 😊",
    "You're very welcome! Anything else I can assist with?",
    "Happy to help, sir/ma'am!",
)

FALLBACK_REPLIES = (
    "I'm not quite sure I followed that. Could you rephrase it for me? 🤔",
    "Hmm, my circuits didn't catch that one. Could you ask it another way?",
    "I didn't quite get that, friend. Try asking about your health, the time or the date!",
    "That one's beyond my databases for now. Could you put it differently?",
)

_CATEGORY_REPLIES: dict[ReplyCategory, tuple[str, ...]] = {
    ReplyCategory.GREETING: GREETING_REPLIES,
    ReplyCategory.TIME: TIME_REPLIES,
    ReplyCategory.DATE: DATE_REPLIES,
    ReplyCategory.BRAND_REFERENCE: BRAND_REPLIES,
    ReplyCategory.EMOTIONAL_SUPPORT: EMOTIONAL_SUPPORT_REPLIES,
    ReplyCategory.GRATITUDE: GRATITUDE_REPLIES,
    ReplyCategory.FALLBACK: FALLBACK_REPLIES,
}


def format_utc_timestamp(now: datetime) -> str:
    """RFC 1123 form in GMT, e.g. ``Mon, 19 Oct 2026 15:35:00 GMT``."""
    return format_datetime(now.astimezone(UTC).replace(microsecond=0), usegmt=True)


def candidate_replies(category: ReplyCategory, topic: str | None = None) -> tuple[str, ...]:
    if category == ReplyCategory.MEDICAL_TOPIC:
        if topic is None or topic not in MEDICAL_TOPIC_REPLIES:
            raise ValueError(f"unknown medical topic: {topic!r}")
        return (MEDICAL_TOPIC_REPLIES[topic],)
    return _CATEGORY_REPLIES[category]


def respond(
    utterance: str,
    *,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> Reply:
    """Map one utterance to a canned reply.

    The category is chosen deterministically by keyword priority; the reply text
    is drawn uniformly from that category's candidates, so repeated input may
    produce different text.
    """
    category, topic = classify_category(utterance)
    chooser = rng or random
    template = chooser.choice(candidate_replies(category, topic))

    if category in {ReplyCategory.TIME, ReplyCategory.DATE}:
        moment = (now or datetime.now(UTC)).astimezone(UTC)
        template = template.format(
            timestamp=format_utc_timestamp(moment),
            clock=moment.strftime("%H:%M"),
            date=f"{moment:%A}, {moment:%B} {moment.day}, {moment.year}",
        )
    return Reply(category=category, text=template, topic=topic)
