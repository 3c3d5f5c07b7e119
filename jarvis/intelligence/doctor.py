from __future__ import annotations

import logging
import random

from jarvis.intelligence.education import health_education_message, medical_fallback_reply
from jarvis.intelligence.emergency import EMERGENCY_WARNING, EmergencyGuard
from jarvis.intelligence.knowledge import ConversationalKnowledge
from jarvis.intelligence.models import ChatHistoryItem, DoctorReply, ReplySource
from jarvis.services.completion_client import ChatCompletionClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are Jarvis, a highly advanced AI assistant inspired by the one from Iron Man, "
    "serving the Medi Predict patient portal. Be helpful, witty and polite, addressing the "
    "user as \"sir\" or \"ma'am\" occasionally.\n\n"
    "When asked about health, give clear, evidence-based information and always remind the "
    "user that you are an AI, not a human doctor, and that your advice is not a substitute "
    "for professional medical consultation. Never give a definitive diagnosis. When asked "
    "about medications, discuss purpose and common side effects, but leave dosages and "
    "prescriptions to a qualified doctor.\n\n"
    "If a message suggests a potential medical emergency, immediately and clearly instruct "
    "the user to contact emergency services."
)
_HISTORY_ROLES = {"user", "assistant"}
_HISTORY_LIMIT = 20


class DoctorAssistant:
    """Health assistant: safety first, then small talk, then model or canned guidance."""

    def __init__(
        self,
        *,
        completion_client: ChatCompletionClient,
        emergency_guard: EmergencyGuard | None = None,
        knowledge: ConversationalKnowledge | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._completion_client = completion_client
        self._emergency_guard = emergency_guard or EmergencyGuard()
        self._knowledge = knowledge or ConversationalKnowledge(rng=rng)
        self._rng = rng or random.Random()

    def handle(
        self,
        *,
        message: str,
        chat_history: list[ChatHistoryItem] | None = None,
        trace_id: str = "",
    ) -> DoctorReply:
        text = " ".join(message.split()).strip()

        keyword = self._emergency_guard.matched_keyword(text)
        if keyword is not None:
            logger.warning("doctor_emergency_detected trace_id=%s keyword=%s", trace_id, keyword)
            return DoctorReply(reply=EMERGENCY_WARNING, source=ReplySource.EMERGENCY)

        small_talk = self._knowledge.reply(text)
        if small_talk is not None:
            return DoctorReply(reply=small_talk, source=ReplySource.CONVERSATIONAL)

        if not self._completion_client.enabled:
            logger.info("doctor_reply trace_id=%s source=health-education", trace_id)
            return DoctorReply(
                reply=health_education_message(text, rng=self._rng),
                source=ReplySource.HEALTH_EDUCATION,
            )

        result = self._completion_client.complete(
            messages=self._build_messages(text=text, chat_history=chat_history or []),
        )
        if result.ok and result.reply:
            logger.info(
                "doctor_reply trace_id=%s source=model model=%s",
                trace_id,
                self._completion_client.model,
            )
            return DoctorReply(reply=result.reply, source=ReplySource.MODEL)

        logger.warning(
            "doctor_model_fallback trace_id=%s rate_limited=%s error=%s",
            trace_id,
            result.rate_limited,
            (result.error or "")[:220],
        )
        return DoctorReply(
            reply=medical_fallback_reply(text),
            source=ReplySource.FALLBACK,
            error=result.error,
        )

    def _build_messages(
        self,
        *,
        text: str,
        chat_history: list[ChatHistoryItem],
    ) -> list[dict[str, str]]:
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        for item in chat_history[-_HISTORY_LIMIT:]:
            if item.role not in _HISTORY_ROLES or not item.content.strip():
                continue
            messages.append({"role": item.role, "content": item.content})
        messages.append({"role": "user", "content": text})
        return messages
