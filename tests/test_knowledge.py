import random
from datetime import UTC, datetime

from jarvis.intelligence.knowledge import ConversationalKnowledge


def _knowledge(hour_utc: int) -> ConversationalKnowledge:
    return ConversationalKnowledge(
        rng=random.Random(0),
        clock=lambda: datetime(2026, 10, 19, hour_utc, 0, tzinfo=UTC),
    )


def test_greeting_follows_clock_period() -> None:
    # 14:00 UTC is 09:00 at UTC-5.
    morning = _knowledge(14).reply("hello")
    # 20:00 UTC is 15:00 at UTC-5.
    afternoon = _knowledge(20).reply("hi there")
    # 03:00 UTC is 22:00 at UTC-5.
    evening = _knowledge(3).reply("hey")

    assert morning is not None and "morning" in morning.lower()
    assert afternoon is not None and "afternoon" in afternoon.lower()
    assert evening is not None and "evening" in evening.lower()


def test_explicit_greeting_period_wins_over_clock() -> None:
    reply = _knowledge(14).reply("Good evening")

    assert reply is not None
    assert "evening" in reply.lower()


def test_creator_and_how_are_you() -> None:
    knowledge = _knowledge(14)

    creator = knowledge.reply("Who made you?")
    status = knowledge.reply("how are you today")

    assert creator is not None and "Medi Predict" in creator
    assert status is not None


def test_general_life_and_wellness_topics() -> None:
    knowledge = _knowledge(14)

    weather = knowledge.reply("Will it be sunny tomorrow?")
    sleep = knowledge.reply("tips for insomnia")

    assert weather is not None and "weather" in weather.lower()
    assert sleep is not None and "sleep" in sleep.lower()


def test_unmatched_message_returns_none() -> None:
    knowledge = _knowledge(14)

    assert knowledge.reply("What foods are good for my heart?") is None
    assert knowledge.reply("   ") is None


def test_gratitude_only_for_thanks_or_short_praise() -> None:
    knowledge = _knowledge(14)

    assert knowledge.reply("Thank you so much") is not None
    assert knowledge.reply("great!") is not None
    assert knowledge.reply("I'm in great pain in my knee") is None


def test_small_talk_needs_whole_words() -> None:
    knowledge = _knowledge(14)

    assert knowledge.reply("I have brain fog after my meds") is None
    assert knowledge.reply("I feel restless and my interest is gone") is None
    assert knowledge.reply("I have a high temperature since yesterday") is None
