"""
FastAPI Application Module

REST API for logging pet walks, meals and medications. Besides the raw
activity log it serves a daily summary, an evening walk reminder and a
keyword-driven chat assistant that answers questions about the pet's day.

Key Features:
- Async request handling with FastAPI
- Structured logging and metrics
- CORS and OpenTelemetry support

All state lives in memory on the app instance and is lost on restart.
Every response is wrapped in a ``{"success": bool, "data" | "error": ...}``
envelope.
"""

import random
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from prometheus_client import CollectorRegistry, Counter, generate_latest
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog import get_logger

from ..config import Settings, configure_logging, get_settings
from ..domain.clock import Clock, system_clock, with_offset
from ..domain.exceptions import TrackerError
from ..domain.models import ActivityListing
from ..repositories.memory import InMemoryActivityRepository, InMemoryChatRepository
from ..services.chat import ChatService
from ..services.insights import evaluate_reminder, summarize
from ..services.responder import ResponseSelector

# Registry for isolated metric collection
CUSTOM_REGISTRY = CollectorRegistry()

REQUESTS = Counter("requests_total", "Total requests", registry=CUSTOM_REGISTRY)
ERRORS = Counter("errors_total", "Total failed requests", registry=CUSTOM_REGISTRY)

INTERNAL_ERROR = "Internal server error"

logger = get_logger()


class ActivityCreate(BaseModel):
    """Body of an activity log request; field checks happen in the store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    pet_name: Optional[str] = None
    activity_type: Optional[str] = None
    duration: Any = None  # raw; the store rejects booleans and non-numeric values
    date_time: Optional[datetime] = None


class MessageCreate(BaseModel):
    """Defines the structure for chat message requests"""
    message: Optional[str] = None


@dataclass
class TrackerState:
    """Everything a request handler needs, held on ``app.state``."""

    settings: Settings
    activities: InMemoryActivityRepository
    chat: ChatService
    clock: Clock


def get_state(request: Request) -> TrackerState:
    """Returns the tracker state bound to the running app"""
    return request.app.state.tracker


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value


def success(data: Any, status_code: int = 200, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": _dump(data), **extra},
    )


def failure(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Logs app startup/shutdown"""
    logger.info("application_startup_complete")
    yield
    logger.info("application_shutdown_complete")


def create_app(
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    """Build an app with its own empty stores.

    ``clock`` and ``rng`` default to the wall clock and a fresh
    ``random.Random``; tests pass fixed ones.
    """
    settings = settings or get_settings()
    clock = clock or system_clock
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Pet Activity Tracker API",
        description="Logs pet walks, meals and medications and chats about them",
        version="0.1.0",
        lifespan=lifespan,
    )

    activities = InMemoryActivityRepository(clock=clock)
    chat_log = InMemoryChatRepository(limit=settings.CHAT_HISTORY_LIMIT)
    app.state.tracker = TrackerState(
        settings=settings,
        activities=activities,
        chat=ChatService(activities, chat_log, ResponseSelector(rng), clock),
        clock=clock,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Set up request tracing
    FastAPIInstrumentor.instrument_app(app)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Tracks requests and counts failures"""
        logger.info("request_started", method=request.method, path=request.url.path)
        REQUESTS.inc()
        try:
            response = await call_next(request)
        except Exception as e:
            ERRORS.inc()
            logger.error("request_failed", path=request.url.path, error=str(e))
            raise
        if response.status_code >= 500:
            ERRORS.inc()
        return response

    @app.exception_handler(TrackerError)
    async def tracker_error_handler(request: Request, exc: TrackerError):
        logger.warning(
            "request_rejected",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message,
        )
        return failure(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning("invalid_request", path=request.url.path, errors=str(exc.errors()))
        return failure(400, "Invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return failure(404, "API endpoint not found")
        return failure(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("unhandled_error", path=request.url.path, error=str(exc))
        return failure(500, INTERNAL_ERROR)

    register_routes(app)
    return app


def register_routes(app: FastAPI) -> None:
    """Attach the /api routes and the metrics endpoint"""

    @app.get("/api/activities")
    async def list_activities(state: TrackerState = Depends(get_state)) -> JSONResponse:
        """Returns every logged activity and the current pet"""
        try:
            activities, current_pet = await state.activities.list()
            return success(ActivityListing(activities=activities, current_pet=current_pet))
        except Exception as e:
            logger.error("list_activities_error", error=str(e))
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    @app.post("/api/activities")
    async def add_activity(
        body: ActivityCreate, state: TrackerState = Depends(get_state)
    ) -> JSONResponse:
        """Logs a walk, meal or medication"""
        try:
            activity = await state.activities.add(
                body.pet_name, body.activity_type, body.duration, body.date_time
            )
            return success(activity, status_code=201, message="Activity logged successfully")
        except TrackerError:
            raise
        except Exception as e:
            logger.error("add_activity_error", error=str(e))
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    @app.delete("/api/activities/{activity_id}")
    async def delete_activity(
        activity_id: UUID, state: TrackerState = Depends(get_state)
    ) -> JSONResponse:
        """Removes a single activity by id"""
        try:
            activity = await state.activities.delete_by_id(activity_id)
            return success(activity, message="Activity deleted successfully")
        except TrackerError:
            raise
        except Exception as e:
            logger.error("delete_activity_error", activity_id=str(activity_id), error=str(e))
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    @app.get("/api/summary")
    async def get_summary(state: TrackerState = Depends(get_state)) -> JSONResponse:
        """Aggregates today's walks, meals and medications"""
        try:
            activities, _ = await state.activities.list()
            return success(summarize(activities, state.clock()))
        except Exception as e:
            logger.error("get_summary_error", error=str(e))
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    @app.get("/api/reminder")
    async def get_reminder(state: TrackerState = Depends(get_state)) -> JSONResponse:
        """Checks whether the evening walk reminder should be shown"""
        try:
            activities, current_pet = await state.activities.list()
            reminder = evaluate_reminder(
                activities, current_pet, state.clock(), state.settings.REMINDER_HOUR
            )
            return success(reminder)
        except Exception as e:
            logger.error("get_reminder_error", error=str(e))
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    @app.post("/api/chat")
    async def post_chat_message(
        body: MessageCreate, state: TrackerState = Depends(get_state)
    ) -> JSONResponse:
        """
        Stores the user's message and the assistant's reply.
        Both messages are returned.
        """
        try:
            return success(await state.chat.post_message(body.message))
        except TrackerError:
            raise
        except Exception as e:
            logger.error("post_chat_message_error", error=str(e))
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    @app.get("/api/chat")
    async def get_chat_history(state: TrackerState = Depends(get_state)) -> JSONResponse:
        """Returns the chat log, oldest first"""
        try:
            return success(await state.chat.history())
        except Exception as e:
            logger.error("get_chat_history_error", error=str(e))
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    @app.get("/api/health")
    async def health(state: TrackerState = Depends(get_state)) -> JSONResponse:
        """Liveness probe with store sizes"""
        current_pet = state.activities.current_pet
        return JSONResponse(
            content={
                "success": True,
                "message": "Pet Activity Tracker API is running",
                "timestamp": with_offset(state.clock()).isoformat(),
                "stats": {
                    "totalActivities": await state.activities.count(),
                    "chatMessages": await state.chat.chat_log.count(),
                    "currentPet": current_pet or "None",
                },
            }
        )

    @app.get("/metrics")
    async def metrics():
        """Provides Prometheus metrics for system monitoring"""
        return Response(generate_latest(CUSTOM_REGISTRY), media_type="text/plain")


app = create_app()


def main() -> None:
    """Serve the API with uvicorn on the configured host and port"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
