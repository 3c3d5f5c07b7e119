from __future__ import annotations

import io
import json
from urllib.error import HTTPError, URLError

from jarvis.services.completion_client import ChatCompletionClient


class _FakeHTTPResponse:
    def __init__(self, payload: object) -> None:
        self._payload = payload

    def read(self) -> bytes:
        return json.dumps(self._payload, ensure_ascii=False).encode("utf-8")

    def __enter__(self) -> _FakeHTTPResponse:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        _ = (exc_type, exc, tb)
        return False


def _client() -> ChatCompletionClient:
    return ChatCompletionClient(
        api_key="sk-test",
        base_url="https://llm.example.com/v1/",
        model="gpt-4o-mini",
        timeout_sec=1.0,
    )


def test_completion_client_disabled_without_key() -> None:
    client = ChatCompletionClient(api_key="  ")

    result = client.complete(messages=[{"role": "user", "content": "hi"}])

    assert client.enabled is False
    assert result.ok is False
    assert result.error == "completion_not_configured"


def test_completion_client_parses_reply(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    captured: dict[str, object] = {}

    def _fake_urlopen(request, timeout: float):  # type: ignore[no-untyped-def]
        captured["url"] = request.full_url
        captured["auth"] = request.get_header("Authorization")
        captured["body"] = json.loads(request.data.decode("utf-8"))
        captured["timeout"] = timeout
        return _FakeHTTPResponse({"choices": [{"message": {"content": "  Drink water.  "}}]})

    monkeypatch.setattr("jarvis.services.completion_client.urlopen", _fake_urlopen)

    result = _client().complete(messages=[{"role": "user", "content": "hi"}])

    assert result.ok is True
    assert result.reply == "Drink water."
    assert captured["url"] == "https://llm.example.com/v1/chat/completions"
    assert captured["auth"] == "Bearer sk-test"
    assert captured["timeout"] == 1.0
    body = captured["body"]
    assert isinstance(body, dict)
    assert body["model"] == "gpt-4o-mini"
    assert body["max_tokens"] == 800


def test_completion_client_flags_rate_limit(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    def _fake_urlopen(request, timeout: float):  # type: ignore[no-untyped-def]
        _ = timeout
        raise HTTPError(
            request.full_url,
            429,
            "Too Many Requests",
            {},  # type: ignore[arg-type]
            io.BytesIO(json.dumps({"error": {"message": "You exceeded your current quota"}}).encode()),
        )

    monkeypatch.setattr("jarvis.services.completion_client.urlopen", _fake_urlopen)

    result = _client().complete(messages=[{"role": "user", "content": "hi"}])

    assert result.ok is False
    assert result.status_code == 429
    assert result.rate_limited is True
    assert result.error == "You exceeded your current quota"


def test_completion_client_handles_network_error(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    def _fake_urlopen(request, timeout: float):  # type: ignore[no-untyped-def]
        _ = (request, timeout)
        raise URLError("llm unavailable")

    monkeypatch.setattr("jarvis.services.completion_client.urlopen", _fake_urlopen)

    result = _client().complete(messages=[{"role": "user", "content": "hi"}])

    assert result.ok is False
    assert result.error is not None
    assert result.error.startswith("completion_error:")


def test_completion_client_rejects_malformed_payload(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    def _fake_urlopen(request, timeout: float):  # type: ignore[no-untyped-def]
        _ = (request, timeout)
        return _FakeHTTPResponse({"choices": []})

    monkeypatch.setattr("jarvis.services.completion_client.urlopen", _fake_urlopen)

    result = _client().complete(messages=[{"role": "user", "content": "hi"}])

    assert result.ok is False
    assert result.error == "completion_invalid_response"


def test_has_valid_base_url() -> None:
    assert _client().has_valid_base_url() is True
    assert ChatCompletionClient(api_key="k", base_url="not a url").has_valid_base_url() is False
