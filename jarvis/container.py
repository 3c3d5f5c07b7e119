from __future__ import annotations

from dataclasses import dataclass
from os import getenv

from jarvis.intelligence.doctor import DoctorAssistant
from jarvis.intelligence.emergency import EmergencyGuard
from jarvis.services.assistant_client import AssistantClient, Dispatcher, LocalDispatcher
from jarvis.services.completion_client import ChatCompletionClient
from jarvis.services.ingress_service import DeterministicIngressService
from jarvis.voice.engines import build_capture, build_playback
from jarvis.voice.session import VoiceSession

DEFAULT_DISPATCH_URL = "http://127.0.0.1:8000/functions/v1/jarvis-ai"


@dataclass
class VoiceSettings:
    dispatch_url: str
    dispatch_token: str | None
    dispatch_timeout_sec: float
    capture_backend: str
    playback_backend: str
    local_dispatch: bool = False


@dataclass
class ServiceContainer:
    ingress_service: DeterministicIngressService
    completion_client: ChatCompletionClient
    doctor_assistant: DoctorAssistant
    voice_settings: VoiceSettings
    cors_allow_origins: list[str]

    def build_dispatcher(self, *, local: bool | None = None) -> Dispatcher:
        if local is None:
            local = self.voice_settings.local_dispatch
        if local:
            return LocalDispatcher(ingress_service=self.ingress_service)
        return AssistantClient(
            url=self.voice_settings.dispatch_url,
            token=self.voice_settings.dispatch_token,
            timeout_sec=self.voice_settings.dispatch_timeout_sec,
        )

    def build_voice_session(self, *, local: bool | None = None) -> VoiceSession:
        return VoiceSession(
            dispatcher=self.build_dispatcher(local=local),
            capture=build_capture(self.voice_settings.capture_backend),
            playback=build_playback(self.voice_settings.playback_backend),
            dispatch_timeout_sec=self.voice_settings.dispatch_timeout_sec,
        )


def build_container() -> ServiceContainer:
    completion_client = ChatCompletionClient(
        api_key=getenv("JARVIS_COMPLETION_API_KEY"),
        base_url=getenv("JARVIS_COMPLETION_BASE_URL", "https://api.openai.com/v1"),
        model=getenv("JARVIS_COMPLETION_MODEL", "gpt-4o-mini"),
        timeout_sec=_parse_float(getenv("JARVIS_COMPLETION_TIMEOUT_SEC"), default=20.0),
    )
    voice_settings = VoiceSettings(
        dispatch_url=getenv("JARVIS_DISPATCH_URL", DEFAULT_DISPATCH_URL),
        dispatch_token=getenv("JARVIS_DISPATCH_TOKEN"),
        dispatch_timeout_sec=_parse_float(getenv("JARVIS_DISPATCH_TIMEOUT_SEC"), default=15.0),
        capture_backend=getenv("JARVIS_SPEECH_CAPTURE", "console"),
        playback_backend=getenv("JARVIS_SPEECH_PLAYBACK", "console"),
        local_dispatch=_parse_bool(getenv("JARVIS_LOCAL_DISPATCH"), default=False),
    )
    cors_allow_origins = [
        origin.strip()
        for origin in getenv("JARVIS_CORS_ALLOW_ORIGINS", "*").split(",")
        if origin.strip()
    ] or ["*"]

    return ServiceContainer(
        ingress_service=DeterministicIngressService(),
        completion_client=completion_client,
        doctor_assistant=DoctorAssistant(
            completion_client=completion_client,
            emergency_guard=EmergencyGuard(),
        ),
        voice_settings=voice_settings,
        cors_allow_origins=cors_allow_origins,
    )


def _parse_float(value: str | None, *, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _parse_bool(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default
