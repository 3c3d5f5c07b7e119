import random

from jarvis.intelligence.education import (
    EDUCATION_NOTE,
    health_education_message,
    medical_fallback_reply,
    select_education_topic,
)


def test_select_education_topic() -> None:
    assert select_education_topic("What food keeps me healthy?") == "nutrition"
    assert select_education_topic("best workout for beginners") == "exercise"
    assert select_education_topic("I can't handle the stress") == "stress"
    assert select_education_topic("trouble with insomnia") == "sleep"
    assert select_education_topic("my mood is low") == "mental"
    assert select_education_topic("tell me something") == "general"


def test_health_education_message_appends_note() -> None:
    message = health_education_message("diet advice", rng=random.Random(1))

    assert message.endswith(EDUCATION_NOTE)
    assert "Nutrition" in message or "Balanced Diet" in message


def test_medical_fallback_reply_is_stable_for_same_message() -> None:
    message = "What medication helps with this?"

    first = medical_fallback_reply(message)

    assert first == medical_fallback_reply(message)
    assert "pharmacist" in first


def test_medical_fallback_reply_uses_message_length_for_variant() -> None:
    short = medical_fallback_reply("sore")
    longer = medical_fallback_reply("sore!")

    assert short.startswith("I understand you're experiencing some symptoms")
    assert longer.startswith("Symptoms can have many different causes")


def test_medical_fallback_reply_general_when_no_keywords() -> None:
    reply = medical_fallback_reply("abc")

    assert "healthcare" in reply


def test_medical_fallback_reply_matches_short_keywords() -> None:
    reply = medical_fallback_reply("Is fat bad?")

    assert "balanced diet" in reply.lower() or "healthy eating" in reply.lower()
