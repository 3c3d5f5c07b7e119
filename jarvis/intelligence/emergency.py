from __future__ import annotations

_EMERGENCY_KEYWORDS = (
    # cardiac
    "heart attack",
    "chest pain",
    "crushing chest",
    "cardiac arrest",
    # neurological
    "stroke",
    "seizure",
    "unconscious",
    "fainted",
    "sudden numbness",
    "face drooping",
    "slurred speech",
    "confusion",
    "can't speak",
    "sudden severe headache",
    # respiratory
    "can't breathe",
    "breathing difficulty",
    "severe shortness of breath",
    "choking",
    # trauma
    "severe bleeding",
    "won't stop bleeding",
    "gunshot",
    "stab",
    # other acute
    "suicide",
    "overdose",
    "poisoning",
    "severe pain",
    "anaphylaxis",
    "allergic reaction",
    "swollen throat",
    "swollen tongue",
    "emergency",
    "dying",
    "extremely dizzy",
    "blacking out",
)

EMERGENCY_WARNING = (
    "⚠️ **MEDICAL EMERGENCY WARNING**: It sounds like you may be describing a medical "
    "emergency. If you or someone else is experiencing a medical emergency, please call "
    "emergency services (like 911) immediately or go to the nearest emergency room. "
    "Do not wait for an AI response in emergency situations.\n\n"
    "Emergency signs may include:\n"
    "- Chest pain or pressure\n"
    "- Difficulty breathing\n"
    "- Severe bleeding\n"
    "- Sudden numbness or weakness\n"
    "- Sudden confusion or trouble speaking\n"
    "- Severe pain\n"
    "- Loss of consciousness"
)


class EmergencyGuard:
    """Flags messages that read like an acute medical emergency."""

    def __init__(self, keywords: tuple[str, ...] | None = None) -> None:
        self._keywords = tuple(k.lower() for k in (keywords or _EMERGENCY_KEYWORDS))

    def matched_keyword(self, text: str) -> str | None:
        normalized = text.strip().lower()
        for keyword in self._keywords:
            if keyword in normalized:
                return keyword
        return None

    def is_emergency(self, text: str) -> bool:
        return self.matched_keyword(text) is not None
