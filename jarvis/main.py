import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from jarvis.api.assistant import CORS_ALLOW_HEADERS
from jarvis.api.assistant import router as functions_router
from jarvis.container import build_container
from jarvis.startup_self_check import run_startup_self_check

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):  # type: ignore[no-untyped-def]
    _app.state.startup_self_check = run_startup_self_check(
        logger=logger,
        container=_app.state.container,
    )
    _app.state.started_at = datetime.now(UTC).isoformat()
    yield


app = FastAPI(title="Jarvis Assistant Backend", version="0.1.0", lifespan=lifespan)
app.state.container = build_container()
app.add_middleware(
    CORSMiddleware,
    allow_origins=app.state.container.cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=CORS_ALLOW_HEADERS,
    expose_headers=["x-trace-id"],
)


@app.middleware("http")
async def attach_trace_id(request: Request, call_next):  # type: ignore[no-untyped-def]
    trace_id = request.headers.get("x-trace-id") or str(uuid4())
    request.state.trace_id = trace_id
    response = await call_next(request)
    response.headers["x-trace-id"] = trace_id
    return response


app.include_router(functions_router)


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok", "service": "jarvis-backend"}


@app.get("/api/v1/runtime/identity")
def runtime_identity() -> dict[str, object]:
    container = app.state.container
    return {
        "assistant_identity": "Jarvis",
        "service": "jarvis-backend",
        "functions": ["jarvis-ai", "doctor-ai"],
        "responder": "rule-based",
        "doctor_model": {
            "enabled": container.completion_client.enabled,
            "model": container.completion_client.model,
        },
    }


@app.get("/api/v1/ops/health")
def ops_health() -> dict[str, object]:
    startup = getattr(app.state, "startup_self_check", None)
    startup_payload = (
        {
            "responder_ok": startup.responder_ok,
            "completion_enabled": startup.completion_enabled,
            "completion_base_url_valid": startup.completion_base_url_valid,
            "speech_capture_available": startup.speech_capture_available,
            "speech_playback_available": startup.speech_playback_available,
            "issues": startup.issues,
        }
        if startup is not None
        else {
            "responder_ok": False,
            "completion_enabled": False,
            "completion_base_url_valid": False,
            "speech_capture_available": False,
            "speech_playback_available": False,
            "issues": ["startup_self_check_not_available"],
        }
    )
    degraded = bool(startup_payload["issues"])
    return {
        "status": "degraded" if degraded else "ok",
        "service": "jarvis-backend",
        "timestamp": datetime.now(UTC).isoformat(),
        "started_at": getattr(app.state, "started_at", None),
        "startup_self_check": startup_payload,
    }
