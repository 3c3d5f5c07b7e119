import pytest

from jarvis.container import DEFAULT_DISPATCH_URL, build_container
from jarvis.services.assistant_client import AssistantClient, LocalDispatcher


def test_build_container_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "JARVIS_DISPATCH_URL",
        "JARVIS_DISPATCH_TIMEOUT_SEC",
        "JARVIS_LOCAL_DISPATCH",
        "JARVIS_COMPLETION_API_KEY",
        "JARVIS_CORS_ALLOW_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)

    container = build_container()

    assert container.voice_settings.dispatch_url == DEFAULT_DISPATCH_URL
    assert container.voice_settings.dispatch_timeout_sec == 15.0
    assert container.voice_settings.local_dispatch is False
    assert container.completion_client.enabled is False
    assert container.cors_allow_origins == ["*"]
    assert isinstance(container.build_dispatcher(), AssistantClient)


def test_build_container_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JARVIS_DISPATCH_URL", "http://jarvis.local/fn")
    monkeypatch.setenv("JARVIS_DISPATCH_TIMEOUT_SEC", "4.5")
    monkeypatch.setenv("JARVIS_LOCAL_DISPATCH", "yes")
    monkeypatch.setenv("JARVIS_CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")

    container = build_container()

    assert container.voice_settings.dispatch_url == "http://jarvis.local/fn"
    assert container.voice_settings.dispatch_timeout_sec == 4.5
    assert container.cors_allow_origins == ["https://a.example", "https://b.example"]
    assert isinstance(container.build_dispatcher(), LocalDispatcher)
    assert isinstance(container.build_dispatcher(local=False), AssistantClient)


def test_build_container_ignores_bad_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JARVIS_DISPATCH_TIMEOUT_SEC", "soon")
    monkeypatch.setenv("JARVIS_LOCAL_DISPATCH", "maybe")

    container = build_container()

    assert container.voice_settings.dispatch_timeout_sec == 15.0
    assert container.voice_settings.local_dispatch is False


def test_build_voice_session_without_speech_engines(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JARVIS_SPEECH_CAPTURE", "none")
    monkeypatch.setenv("JARVIS_SPEECH_PLAYBACK", "holo-speaker")

    session = build_container().build_voice_session(local=True)

    assert session.orchestrator.capture_available is False
    assert session.orchestrator.playback_available is False
