from __future__ import annotations

from dataclasses import dataclass


class EmptyUtteranceError(ValueError):
    """Raised when an inbound message has no usable text."""


@dataclass(frozen=True)
class IngressEnvelope:
    function: str
    trace_id: str
    text: str


class DeterministicIngressService:
    """Single normalization point for all inbound messages before the responders."""

    max_length = 4000

    def normalize_text(self, text: str) -> str:
        return " ".join(text.split()).strip()

    def build_envelope(self, *, function: str, trace_id: str, message: object) -> IngressEnvelope:
        if not isinstance(message, str):
            raise EmptyUtteranceError("No message provided")
        text = self.normalize_text(message)
        if not text:
            raise EmptyUtteranceError("No message provided")
        return IngressEnvelope(function=function, trace_id=trace_id, text=text[: self.max_length])
