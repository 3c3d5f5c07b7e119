import random
from datetime import UTC, datetime, timedelta, timezone

import pytest

from jarvis.intelligence.intent import MEDICAL_TOPIC_KEYWORDS
from jarvis.intelligence.models import ReplyCategory
from jarvis.intelligence.responder import (
    EMOTIONAL_SUPPORT_REPLIES,
    FALLBACK_REPLIES,
    GRATITUDE_REPLIES,
    GREETING_REPLIES,
    MEDICAL_TOPIC_REPLIES,
    candidate_replies,
    format_utc_timestamp,
    respond,
)

_NOW = datetime(2026, 10, 19, 15, 35, 0, tzinfo=UTC)


def test_greeting_reply_from_greeting_set() -> None:
    for text in ("Hello", "  hello ", "HELLO"):
        reply = respond(text)

        assert reply.category == ReplyCategory.GREETING
        assert reply.text in GREETING_REPLIES


def test_medical_topic_reply_is_deterministic() -> None:
    replies = {respond("Can you tell me about diabetes?").text for _ in range(20)}

    assert replies == {MEDICAL_TOPIC_REPLIES["diabetes"]}
    assert respond("prediabetes worries me").text == MEDICAL_TOPIC_REPLIES["diabetes"]


def test_medical_topic_outranks_emotional_support() -> None:
    reply = respond("I have a headache and feel sad")

    assert reply.category == ReplyCategory.MEDICAL_TOPIC
    assert reply.topic == "headache"
    assert reply.text.startswith("Headaches are often linked to")
    assert reply.text not in EMOTIONAL_SUPPORT_REPLIES


def test_time_reply_embeds_current_utc_timestamp() -> None:
    reply = respond("What time is it?", now=_NOW, rng=random.Random(3))

    assert reply.category == ReplyCategory.TIME
    assert "Mon, 19 Oct 2026 15:35:00 GMT" in reply.text
    assert reply.text.endswith("?")


def test_date_reply_uses_utc_calendar_day() -> None:
    late_evening = datetime(2026, 10, 19, 22, 0, tzinfo=timezone(timedelta(hours=-5)))

    reply = respond("What's the date?", now=late_evening)

    assert reply.category == ReplyCategory.DATE
    assert "Tuesday, October 20, 2026" in reply.text


def test_format_utc_timestamp() -> None:
    assert format_utc_timestamp(_NOW) == "Mon, 19 Oct 2026 15:35:00 GMT"
    assert format_utc_timestamp(datetime(2026, 1, 4, 3, 7, 9, tzinfo=UTC)) == (
        "Sun, 04 Jan 2026 03:07:09 GMT"
    )
    offset = datetime(2026, 10, 19, 22, 0, 0, 500, tzinfo=timezone(timedelta(hours=-5)))
    assert format_utc_timestamp(offset) == "Tue, 20 Oct 2026 03:00:00 GMT"


def test_fallback_reply_varies_across_calls() -> None:
    rng = random.Random(7)

    seen = {respond("Tell me a riddle", rng=rng).text for _ in range(200)}

    assert seen <= set(FALLBACK_REPLIES)
    assert len(seen) > 1


def test_gratitude_reply() -> None:
    reply = respond("Thank you!")

    assert reply.category == ReplyCategory.GRATITUDE
    assert reply.text in GRATITUDE_REPLIES


def test_every_medical_keyword_has_one_reply() -> None:
    assert set(MEDICAL_TOPIC_REPLIES) == set(MEDICAL_TOPIC_KEYWORDS)
    for keyword in MEDICAL_TOPIC_KEYWORDS:
        assert candidate_replies(ReplyCategory.MEDICAL_TOPIC, keyword) == (
            MEDICAL_TOPIC_REPLIES[keyword],
        )


def test_candidate_replies_rejects_unknown_medical_topic() -> None:
    with pytest.raises(ValueError):
        candidate_replies(ReplyCategory.MEDICAL_TOPIC, "gout")


def test_every_category_has_candidates() -> None:
    for category in ReplyCategory:
        if category == ReplyCategory.MEDICAL_TOPIC:
            continue
        assert len(candidate_replies(category)) >= 1
