from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from jarvis.intelligence.responder import respond
from jarvis.services.ingress_service import DeterministicIngressService, EmptyUtteranceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    ok: bool
    reply: str | None = None
    error: str | None = None
    status_code: int | None = None


class Dispatcher(Protocol):
    def dispatch(self, message: str) -> DispatchResult: ...


class AssistantClient:
    """HTTP client for the remote responder function: ``{message}`` in, ``{reply}`` out."""

    def __init__(
        self,
        *,
        url: str,
        token: str | None = None,
        timeout_sec: float = 15.0,
    ) -> None:
        self._url = (url or "").strip()
        self._token = (token or "").strip() or None
        self._timeout_sec = max(float(timeout_sec), 0.5)

    @property
    def url(self) -> str:
        return self._url

    @property
    def timeout_sec(self) -> float:
        return self._timeout_sec

    def dispatch(self, message: str) -> DispatchResult:
        if not self._url:
            return DispatchResult(ok=False, error="dispatch_not_configured")

        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
            headers["apikey"] = self._token

        request = Request(
            self._url,
            data=json.dumps({"message": message}, ensure_ascii=False).encode("utf-8"),
            headers=headers,
            method="POST",
        )
        try:
            with urlopen(request, timeout=self._timeout_sec) as response:
                status_code = getattr(response, "status", 200)
                data: Any = json.loads(response.read().decode("utf-8"))
        except HTTPError as exc:
            # The function still answers with {"reply": apology} on 500.
            apology = self._read_reply(exc)
            logger.warning("assistant_dispatch_http_error status=%s", exc.code)
            return DispatchResult(
                ok=False,
                reply=apology,
                error=f"http_{exc.code}",
                status_code=exc.code,
            )
        except (URLError, TimeoutError, json.JSONDecodeError) as exc:
            logger.warning("assistant_dispatch_error error=%s", str(exc)[:220])
            return DispatchResult(ok=False, error=f"dispatch_error:{exc}")

        reply = data.get("reply") if isinstance(data, dict) else None
        if not isinstance(reply, str) or not reply.strip():
            return DispatchResult(ok=False, error="dispatch_empty_reply", status_code=status_code)
        return DispatchResult(ok=True, reply=reply.strip(), status_code=status_code)

    def _read_reply(self, exc: HTTPError) -> str | None:
        try:
            data = json.loads(exc.read().decode("utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            return None
        reply = data.get("reply") if isinstance(data, dict) else None
        return reply if isinstance(reply, str) and reply.strip() else None


class LocalDispatcher:
    """In-process dispatcher that answers with the rule-based responder."""

    def __init__(
        self,
        *,
        ingress_service: DeterministicIngressService | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._ingress_service = ingress_service or DeterministicIngressService()
        self._rng = rng

    def dispatch(self, message: str) -> DispatchResult:
        try:
            envelope = self._ingress_service.build_envelope(
                function="jarvis-ai",
                trace_id="local",
                message=message,
            )
        except EmptyUtteranceError as exc:
            return DispatchResult(ok=False, error=str(exc), status_code=422)
        reply = respond(envelope.text, rng=self._rng)
        return DispatchResult(ok=True, reply=reply.text, status_code=200)
