from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

from jarvis.services.assistant_client import Dispatcher, DispatchResult
from jarvis.voice.engines import (
    CaptureError,
    CaptureErrorCode,
    PlaybackError,
    SpeechCapture,
    SpeechPlayback,
)

logger = logging.getLogger(__name__)


class TurnState(StrEnum):
    IDLE = "idle"
    LISTENING = "listening"
    DISPATCHING = "dispatching"
    SPEAKING = "speaking"


class TurnErrorKind(StrEnum):
    CAPABILITY_MISSING = "capability_missing"
    PERMISSION_DENIED = "permission_denied"
    NO_INPUT = "no_input"
    CAPTURE_FAILED = "capture_failed"
    TRANSPORT_FAILED = "transport_failed"
    CANCELLED = "cancelled"


CAPABILITY_MISSING_MESSAGE = (
    "Speech recognition isn't available here. You can type your question instead."
)
NO_INPUT_MESSAGE = "I didn't hear anything clearly. Could you please speak again?"
TRANSPORT_FAILED_MESSAGE = "Sorry, I couldn't get a reply. Please try again."
CANCELLED_MESSAGE = "Listening stopped."
PLAYBACK_MISSING_NOTICE = (
    "Voice playback isn't available here, so replies will be shown as text only."
)

_CAPTURE_ERRORS: dict[CaptureErrorCode, tuple[TurnErrorKind, str]] = {
    CaptureErrorCode.NO_SPEECH: (TurnErrorKind.NO_INPUT, NO_INPUT_MESSAGE),
    CaptureErrorCode.NOT_ALLOWED: (
        TurnErrorKind.PERMISSION_DENIED,
        "Microphone access was denied. Please allow microphone permission and try again.",
    ),
    CaptureErrorCode.AUDIO_CAPTURE: (
        TurnErrorKind.CAPTURE_FAILED,
        "No microphone was found. Please check your audio input device.",
    ),
    CaptureErrorCode.NETWORK: (
        TurnErrorKind.CAPTURE_FAILED,
        "Speech recognition needs a network connection. Please check it and try again.",
    ),
    CaptureErrorCode.ABORTED: (
        TurnErrorKind.CAPTURE_FAILED,
        "Listening was interrupted. Please try again.",
    ),
}


@dataclass(frozen=True)
class TurnError:
    kind: TurnErrorKind
    message: str
    detail: str | None = None


@dataclass(frozen=True)
class ConversationTurn:
    utterance: str
    reply: str
    timestamp: datetime


@dataclass(frozen=True)
class TurnOutcome:
    accepted: bool
    turn: ConversationTurn | None = None
    error: TurnError | None = None
    spoken: bool = False
    notice: str | None = None


StateListener = Callable[[TurnState, TurnState], None]


class ConversationOrchestrator:
    """
    Sequences one voice turn at a time: capture, dispatch, speak.
    Any trigger outside Idle is rejected; every path ends back in Idle.
    """

    def __init__(
        self,
        *,
        dispatcher: Dispatcher,
        capture: SpeechCapture | None = None,
        playback: SpeechPlayback | None = None,
        dispatch_timeout_sec: float = 15.0,
        on_state_change: StateListener | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._capture = capture
        self._playback = playback
        self._dispatch_timeout_sec = max(float(dispatch_timeout_sec), 0.1)
        self._on_state_change = on_state_change
        self._clock = clock or (lambda: datetime.now(UTC))
        self._state = TurnState.IDLE
        self._last_turn: ConversationTurn | None = None
        self._last_error: TurnError | None = None
        self._playback_notice_shown = False
        self._capture_task: asyncio.Future[str] | None = None
        self._stop_requested = False
        self._active_task: asyncio.Task[object] | None = None

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def can_start(self) -> bool:
        return self._state == TurnState.IDLE

    @property
    def avatar_active(self) -> bool:
        return self._state in {TurnState.DISPATCHING, TurnState.SPEAKING}

    @property
    def capture_available(self) -> bool:
        return self._capture is not None

    @property
    def playback_available(self) -> bool:
        return self._playback is not None

    @property
    def last_turn(self) -> ConversationTurn | None:
        return self._last_turn

    @property
    def last_error(self) -> TurnError | None:
        return self._last_error

    async def run_turn(self) -> TurnOutcome:
        if not self.can_start:
            logger.info("turn_rejected state=%s", self._state)
            return TurnOutcome(accepted=False)
        self._last_error = None
        if self._capture is None:
            return self._fail(TurnError(TurnErrorKind.CAPABILITY_MISSING, CAPABILITY_MISSING_MESSAGE))

        self._active_task = asyncio.current_task()
        self._transition(TurnState.LISTENING)
        try:
            transcript, error = await self._listen(self._capture)
            if error is not None:
                return self._fail(error)
            return await self._dispatch_and_speak(transcript)
        finally:
            self._active_task = None
            self._transition(TurnState.IDLE)

    async def submit_text(self, text: str) -> TurnOutcome:
        """Typed question: skips capture and goes straight to dispatch."""
        if not self.can_start:
            logger.info("turn_rejected state=%s", self._state)
            return TurnOutcome(accepted=False)
        self._last_error = None
        utterance = " ".join(text.split()).strip()
        if not utterance:
            return self._fail(TurnError(TurnErrorKind.NO_INPUT, NO_INPUT_MESSAGE))

        self._active_task = asyncio.current_task()
        try:
            return await self._dispatch_and_speak(utterance)
        finally:
            self._active_task = None
            self._transition(TurnState.IDLE)

    def stop_listening(self) -> bool:
        if self._state != TurnState.LISTENING or self._capture_task is None:
            return False
        self._stop_requested = True
        if self._capture is not None:
            self._capture.stop()
        self._capture_task.cancel()
        return True

    async def shutdown(self) -> None:
        task = self._active_task
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("turn_cancelled_on_shutdown")

    async def _listen(self, capture: SpeechCapture) -> tuple[str, TurnError | None]:
        self._stop_requested = False
        self._capture_task = asyncio.ensure_future(capture.listen())
        try:
            transcript = await self._capture_task
        except asyncio.CancelledError:
            if not self._stop_requested:
                raise
            return "", TurnError(TurnErrorKind.CANCELLED, CANCELLED_MESSAGE)
        except CaptureError as exc:
            kind, message = _CAPTURE_ERRORS[exc.code]
            return "", TurnError(kind, message, detail=exc.detail or str(exc.code))
        except Exception as exc:
            logger.exception("turn_capture_failed")
            return "", TurnError(
                TurnErrorKind.CAPTURE_FAILED,
                "Listening failed. Please try again.",
                detail=str(exc),
            )
        finally:
            self._capture_task = None
            self._stop_requested = False

        utterance = " ".join((transcript or "").split()).strip()
        if not utterance:
            return "", TurnError(TurnErrorKind.NO_INPUT, NO_INPUT_MESSAGE)
        return utterance, None

    async def _dispatch_and_speak(self, utterance: str) -> TurnOutcome:
        self._transition(TurnState.DISPATCHING)
        result = await self._dispatch(utterance)
        if not result.ok or not (result.reply or "").strip():
            return self._fail(
                TurnError(
                    TurnErrorKind.TRANSPORT_FAILED,
                    TRANSPORT_FAILED_MESSAGE,
                    detail=result.error or "empty_reply",
                )
            )

        reply = (result.reply or "").strip()
        turn = ConversationTurn(utterance=utterance, reply=reply, timestamp=self._clock())
        self._last_turn = turn

        if self._playback is None:
            notice = None
            if not self._playback_notice_shown:
                self._playback_notice_shown = True
                notice = PLAYBACK_MISSING_NOTICE
            return TurnOutcome(accepted=True, turn=turn, spoken=False, notice=notice)

        self._transition(TurnState.SPEAKING)
        try:
            await self._playback.speak(reply)
        except PlaybackError as exc:
            logger.warning("turn_playback_failed error=%s", exc)
            return TurnOutcome(accepted=True, turn=turn, spoken=False)
        except Exception:
            logger.exception("turn_playback_failed")
            return TurnOutcome(accepted=True, turn=turn, spoken=False)
        return TurnOutcome(accepted=True, turn=turn, spoken=True)

    async def _dispatch(self, utterance: str) -> DispatchResult:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._dispatcher.dispatch, utterance),
                timeout=self._dispatch_timeout_sec,
            )
        except TimeoutError:
            logger.warning("turn_dispatch_timeout timeout_sec=%s", self._dispatch_timeout_sec)
            return DispatchResult(ok=False, error="dispatch_timeout")
        except Exception as exc:
            logger.exception("turn_dispatch_failed")
            return DispatchResult(ok=False, error=f"dispatch_exception:{exc}")

    def _fail(self, error: TurnError) -> TurnOutcome:
        self._last_error = error
        logger.info("turn_failed kind=%s detail=%s", error.kind, error.detail)
        return TurnOutcome(accepted=True, error=error)

    def _transition(self, target: TurnState) -> None:
        previous = self._state
        if previous == target:
            return
        self._state = target
        logger.debug("turn_state from=%s to=%s", previous, target)
        if self._on_state_change is not None:
            self._on_state_change(previous, target)
