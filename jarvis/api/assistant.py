from __future__ import annotations

import logging
from uuid import uuid4

from fastapi import APIRouter, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from jarvis.container import ServiceContainer
from jarvis.intelligence.models import ChatHistoryItem
from jarvis.intelligence.responder import respond
from jarvis.schemas import (
    DoctorRequest,
    DoctorResponse,
    ErrorReply,
    JarvisRequest,
    JarvisResponse,
)
from jarvis.services.ingress_service import EmptyUtteranceError

router = APIRouter(prefix="/functions/v1", tags=["functions"])
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
JARVIS_APOLOGY = "Sorry, I'm having trouble answering right now."
DOCTOR_APOLOGY = (
    "I apologize, but I encountered a technical issue. Please try again in a moment."
)


def _get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", None) or str(uuid4())


def _apology(reply: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorReply(reply=reply).model_dump(exclude_none=True),
        headers=CORS_HEADERS,
    )


@router.options("/jarvis-ai")
@router.options("/doctor-ai")
def preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@router.post("/jarvis-ai", response_model=JarvisResponse)
def jarvis_ai(req: JarvisRequest, request: Request) -> JarvisResponse | JSONResponse:
    container = _get_container(request)
    trace_id = _trace_id(request)
    try:
        envelope = container.ingress_service.build_envelope(
            function="jarvis-ai",
            trace_id=trace_id,
            message=req.message,
        )
    except EmptyUtteranceError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    try:
        reply = respond(envelope.text)
    except Exception:
        logger.exception("jarvis_reply_failed trace_id=%s", trace_id)
        return _apology(JARVIS_APOLOGY)

    logger.info(
        "jarvis_reply trace_id=%s category=%s topic=%s",
        trace_id,
        reply.category,
        reply.topic or "",
    )
    return JarvisResponse(reply=reply.text, category=str(reply.category), trace_id=trace_id)


@router.post("/doctor-ai", response_model=DoctorResponse, response_model_exclude_none=True)
def doctor_ai(req: DoctorRequest, request: Request) -> DoctorResponse | JSONResponse:
    container = _get_container(request)
    trace_id = _trace_id(request)
    try:
        envelope = container.ingress_service.build_envelope(
            function="doctor-ai",
            trace_id=trace_id,
            message=req.message,
        )
    except EmptyUtteranceError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    history = [
        ChatHistoryItem(role=item.role.strip().lower(), content=item.content)
        for item in (req.chat_history or [])
    ]
    logger.info(
        "doctor_request trace_id=%s history_len=%s",
        trace_id,
        len(history),
    )
    try:
        result = container.doctor_assistant.handle(
            message=envelope.text,
            chat_history=history,
            trace_id=trace_id,
        )
    except Exception:
        logger.exception("doctor_reply_failed trace_id=%s", trace_id)
        return _apology(DOCTOR_APOLOGY)

    return DoctorResponse(
        reply=result.reply,
        source=str(result.source),
        error=result.error,
        trace_id=trace_id,
    )
