from __future__ import annotations

import logging
from dataclasses import dataclass

from jarvis.container import ServiceContainer
from jarvis.intelligence.intent import classify_category
from jarvis.intelligence.models import ReplyCategory
from jarvis.voice.engines import build_capture, build_playback

_PROBE_UTTERANCE = "Hello Jarvis"


@dataclass(frozen=True)
class StartupSelfCheckResult:
    responder_ok: bool
    issues: list[str]
    completion_enabled: bool = False
    completion_base_url_valid: bool = True
    speech_capture_available: bool = False
    speech_playback_available: bool = False


def run_startup_self_check(
    logger: logging.Logger,
    *,
    container: ServiceContainer,
) -> StartupSelfCheckResult:
    category, _topic = classify_category(_PROBE_UTTERANCE)
    completion_client = container.completion_client
    settings = container.voice_settings
    capture = build_capture(settings.capture_backend)
    playback = build_playback(settings.playback_backend)
    result = analyze_startup_snapshot(
        probe_category=category,
        completion_enabled=completion_client.enabled,
        completion_base_url_valid=completion_client.has_valid_base_url(),
        speech_capture_available=capture is not None,
        speech_playback_available=playback is not None,
    )
    for engine in (capture, playback):
        if engine is not None:
            engine.close()

    if not result.responder_ok:
        logger.warning(
            "startup_self_check anomaly=responder_probe_failed category=%s",
            category,
        )
    if result.completion_enabled and not result.completion_base_url_valid:
        logger.warning(
            "startup_self_check anomaly=completion_base_url_invalid base_url=%s",
            completion_client.base_url,
        )
    if not result.speech_capture_available:
        logger.info("startup_self_check speech_capture=unavailable")
    if not result.issues:
        logger.info(
            "startup_self_check ok completion_enabled=%s",
            result.completion_enabled,
        )
    return result


def analyze_startup_snapshot(
    *,
    probe_category: ReplyCategory,
    completion_enabled: bool = False,
    completion_base_url_valid: bool = True,
    speech_capture_available: bool = True,
    speech_playback_available: bool = True,
) -> StartupSelfCheckResult:
    issues: list[str] = []
    responder_ok = probe_category == ReplyCategory.GREETING
    if not responder_ok:
        issues.append("responder_probe_failed")
    if completion_enabled and not completion_base_url_valid:
        issues.append("completion_base_url_invalid")

    return StartupSelfCheckResult(
        responder_ok=responder_ok,
        issues=issues,
        completion_enabled=completion_enabled,
        completion_base_url_valid=completion_base_url_valid,
        speech_capture_available=speech_capture_available,
        speech_playback_available=speech_playback_available,
    )
