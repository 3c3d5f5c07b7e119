from __future__ import annotations

import logging
from types import TracebackType

from jarvis.services.assistant_client import Dispatcher
from jarvis.voice.engines import MediaAccessError, MediaDevice, SpeechCapture, SpeechPlayback
from jarvis.voice.orchestrator import ConversationOrchestrator, StateListener

logger = logging.getLogger(__name__)

MEDIA_AVAILABLE_LABEL = "Camera on"
MEDIA_UNAVAILABLE_LABEL = "Camera unavailable"


class VoiceSession:
    """
    Owns the hardware handles of one conversation view.

    The media device is requested once on enter; denial only marks it
    unavailable. On exit any in-flight turn is cancelled and every handle
    is released.
    """

    def __init__(
        self,
        *,
        dispatcher: Dispatcher,
        capture: SpeechCapture | None = None,
        playback: SpeechPlayback | None = None,
        media_device: MediaDevice | None = None,
        dispatch_timeout_sec: float = 15.0,
        on_state_change: StateListener | None = None,
    ) -> None:
        self._capture = capture
        self._playback = playback
        self._media_device = media_device
        self._media_open = False
        self._media_requested = False
        self.orchestrator = ConversationOrchestrator(
            dispatcher=dispatcher,
            capture=capture,
            playback=playback,
            dispatch_timeout_sec=dispatch_timeout_sec,
            on_state_change=on_state_change,
        )

    @property
    def media_available(self) -> bool:
        return self._media_open

    @property
    def media_label(self) -> str:
        return MEDIA_AVAILABLE_LABEL if self._media_open else MEDIA_UNAVAILABLE_LABEL

    async def __aenter__(self) -> VoiceSession:
        self._request_media()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self.orchestrator.shutdown()
        if self._media_device is not None and self._media_open:
            self._media_device.close()
            self._media_open = False
        for engine in (self._capture, self._playback):
            if engine is not None:
                engine.close()
        logger.info("voice_session_closed")

    def _request_media(self) -> None:
        if self._media_requested:
            return
        self._media_requested = True
        if self._media_device is None:
            logger.info("voice_session_media unavailable reason=no_device")
            return
        try:
            self._media_device.open()
        except (MediaAccessError, PermissionError) as exc:
            logger.warning("voice_session_media unavailable reason=%s", exc)
            return
        self._media_open = True
        logger.info("voice_session_media available")
