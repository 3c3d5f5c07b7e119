from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Protocol

logger = logging.getLogger(__name__)


class CaptureErrorCode(StrEnum):
    NO_SPEECH = "no-speech"
    NOT_ALLOWED = "not-allowed"
    AUDIO_CAPTURE = "audio-capture"
    NETWORK = "network"
    ABORTED = "aborted"


class CaptureError(Exception):
    def __init__(self, code: CaptureErrorCode | str, detail: str | None = None) -> None:
        try:
            self.code = CaptureErrorCode(code)
        except ValueError:
            self.code = CaptureErrorCode.AUDIO_CAPTURE
        self.detail = detail
        super().__init__(detail or str(self.code))


class PlaybackError(Exception):
    pass


class MediaAccessError(Exception):
    """Camera/microphone could not be opened (denied or absent)."""


class SpeechCapture(Protocol):
    async def listen(self) -> str: ...

    def stop(self) -> None: ...

    def close(self) -> None: ...


class SpeechPlayback(Protocol):
    async def speak(self, text: str) -> None: ...

    def close(self) -> None: ...


class MediaDevice(Protocol):
    def open(self) -> None: ...

    def close(self) -> None: ...


class ConsoleCapture:
    """Reads the "transcript" from a terminal line; stands in for a speech engine."""

    def __init__(
        self,
        *,
        prompt: str = "You: ",
        reader: Callable[[str], str] = input,
    ) -> None:
        self._prompt = prompt
        self._reader = reader
        self._closed = False

    async def listen(self) -> str:
        if self._closed:
            raise CaptureError(CaptureErrorCode.AUDIO_CAPTURE, "capture engine closed")
        try:
            return await asyncio.to_thread(self._reader, self._prompt)
        except EOFError as exc:
            raise CaptureError(CaptureErrorCode.ABORTED, "input stream closed") from exc

    def stop(self) -> None:
        # A blocking terminal read cannot be interrupted; the owner cancels the awaiting task.
        logger.debug("console_capture_stop")

    def close(self) -> None:
        self._closed = True


class ConsolePlayback:
    def __init__(
        self,
        *,
        speaker: str = "Jarvis",
        writer: Callable[[str], None] = print,
    ) -> None:
        self._speaker = speaker
        self._writer = writer
        self._closed = False

    async def speak(self, text: str) -> None:
        if self._closed:
            raise PlaybackError("playback engine closed")
        self._writer(f"{self._speaker}: {text}")

    def close(self) -> None:
        self._closed = True


def build_capture(backend: str | None) -> SpeechCapture | None:
    selected = (backend or "").strip().lower()
    if selected == "console":
        logger.info("Selected speech capture backend=%s", selected)
        return ConsoleCapture()
    if selected not in {"", "none"}:
        logger.warning("speech_capture_backend_unsupported backend=%s", selected)
    return None


def build_playback(backend: str | None) -> SpeechPlayback | None:
    selected = (backend or "").strip().lower()
    if selected == "console":
        logger.info("Selected speech playback backend=%s", selected)
        return ConsolePlayback()
    if selected not in {"", "none"}:
        logger.warning("speech_playback_backend_unsupported backend=%s", selected)
    return None
