from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

logger = logging.getLogger(__name__)

_RATE_LIMIT_TOKENS = ("quota", "rate limit")


@dataclass(frozen=True)
class CompletionResult:
    ok: bool
    reply: str | None = None
    error: str | None = None
    status_code: int | None = None
    rate_limited: bool = False


class ChatCompletionClient:
    """
    Optional client for an OpenAI-compatible ``/chat/completions`` endpoint.
    Disabled unless an API key is configured.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        timeout_sec: float = 20.0,
        temperature: float = 0.7,
        max_tokens: int = 800,
    ) -> None:
        self._api_key = (api_key or "").strip() or None
        self._base_url = (base_url or "").strip().rstrip("/")
        self._model = (model or "").strip() or "gpt-4o-mini"
        self._timeout_sec = max(float(timeout_sec), 0.5)
        self._temperature = temperature
        self._max_tokens = max(int(max_tokens), 1)

    @property
    def enabled(self) -> bool:
        return bool(self._api_key and self._base_url)

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_url(self) -> str:
        return self._base_url

    def has_valid_base_url(self) -> bool:
        parsed = urlparse(self._base_url)
        return parsed.scheme in {"http", "https"} and bool(parsed.netloc)

    def complete(self, *, messages: list[dict[str, str]]) -> CompletionResult:
        if not self.enabled:
            return CompletionResult(ok=False, error="completion_not_configured")

        payload = {
            "model": self._model,
            "messages": messages,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }
        request = Request(
            f"{self._base_url}/chat/completions",
            data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            method="POST",
        )
        try:
            with urlopen(request, timeout=self._timeout_sec) as response:
                data: Any = json.loads(response.read().decode("utf-8"))
        except HTTPError as exc:
            message = self._read_error_message(exc)
            rate_limited = exc.code == 429 or any(
                token in message.lower() for token in _RATE_LIMIT_TOKENS
            )
            logger.warning(
                "completion_http_error status=%s rate_limited=%s error=%s",
                exc.code,
                rate_limited,
                message[:220],
            )
            return CompletionResult(
                ok=False,
                error=message,
                status_code=exc.code,
                rate_limited=rate_limited,
            )
        except (URLError, TimeoutError, json.JSONDecodeError) as exc:
            logger.warning("completion_transport_error error=%s", str(exc)[:220])
            return CompletionResult(ok=False, error=f"completion_error:{exc}")

        reply = self._extract_reply(data)
        if reply is None:
            return CompletionResult(ok=False, error="completion_invalid_response")
        return CompletionResult(ok=True, reply=reply)

    def _extract_reply(self, data: Any) -> str | None:
        if not isinstance(data, dict):
            return None
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0]
        if not isinstance(first, dict):
            return None
        message = first.get("message")
        if not isinstance(message, dict):
            return None
        content = message.get("content")
        if not isinstance(content, str) or not content.strip():
            return None
        return content.strip()

    def _read_error_message(self, exc: HTTPError) -> str:
        try:
            body = exc.read().decode("utf-8")
            data = json.loads(body)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            return exc.reason if isinstance(exc.reason, str) else f"http_{exc.code}"
        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        return f"http_{exc.code}"
