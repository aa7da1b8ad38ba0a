"""Entry point for the FastAPI-powered movie night service."""

from __future__ import annotations

import json
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import Settings, settings
from .database import Database
from .errors import InvalidInput, RoomCodeExhausted, RoomNotFound
from .models import PreferenceSubmission
from .services.matcher import MatchService
from .services.rooms import RoomRepository, SQLRoomRepository, create_room
from .services.tmdb import TMDBClient
from .services.watchmode import WatchmodeClient
from .utils import normalize_room_code

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


def _build_lifespan(app_settings: Settings):
    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        exit_stack = AsyncExitStack()
        tmdb_http_client = await exit_stack.enter_async_context(
            httpx.AsyncClient(
                base_url=str(app_settings.tmdb_api_url),
                timeout=httpx.Timeout(15.0, connect=5.0),
            )
        )
        watchmode_http_client = await exit_stack.enter_async_context(
            httpx.AsyncClient(
                base_url=str(app_settings.watchmode_api_url),
                timeout=httpx.Timeout(15.0, connect=5.0),
            )
        )
        database = Database(app_settings.database_url)
        await database.create_all()

        repository = SQLRoomRepository(database.session_factory)
        tmdb = TMDBClient(app_settings, tmdb_http_client)
        watchmode = WatchmodeClient(app_settings, watchmode_http_client)
        if not tmdb.enabled:
            logger.warning("TMDB_API_KEY not set; matches will use the fallback catalog")
        if not watchmode.enabled:
            logger.info("WATCHMODE_API_KEY not set; streaming services will be empty")

        fastapi_app.state.database = database
        fastapi_app.state.room_repository = repository
        fastapi_app.state.match_service = MatchService(repository, tmdb, watchmode)

        try:
            yield
        finally:  # pragma: no cover - teardown path exercised at runtime
            await database.dispose()
            await exit_stack.aclose()

    return lifespan


def create_app(app_settings: Settings | None = None) -> FastAPI:
    resolved_settings = app_settings or settings
    fastapi_app = FastAPI(
        title=resolved_settings.app_name,
        description="Group movie recommendations from shared room preferences",
        version="1.0.0",
        lifespan=_build_lifespan(resolved_settings),
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    fastapi_app.state.settings = resolved_settings
    register_exception_handlers(fastapi_app)
    register_routes(fastapi_app)
    return fastapi_app


def get_match_service(app: FastAPI) -> MatchService:
    service = getattr(app.state, "match_service", None)
    if not isinstance(service, MatchService):
        raise RuntimeError("Match service not initialised")
    return service


def get_room_repository(app: FastAPI) -> RoomRepository:
    repository = getattr(app.state, "room_repository", None)
    if repository is None:
        raise RuntimeError("Room repository not initialised")
    return repository


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def register_exception_handlers(fastapi_app: FastAPI) -> None:
    @fastapi_app.exception_handler(InvalidInput)
    async def _invalid_input(_: Request, exc: InvalidInput) -> JSONResponse:
        return _error(400, str(exc))

    @fastapi_app.exception_handler(RoomNotFound)
    async def _room_not_found(_: Request, exc: RoomNotFound) -> JSONResponse:
        return _error(404, "Room not found")

    @fastapi_app.exception_handler(RoomCodeExhausted)
    async def _room_code_exhausted(_: Request, exc: RoomCodeExhausted) -> JSONResponse:
        return _error(500, str(exc))


def register_routes(fastapi_app: FastAPI) -> None:
    def _settings() -> Settings:
        return getattr(fastapi_app.state, "settings", settings)

    @fastapi_app.get("/healthz")
    @fastapi_app.get("/api/health")
    async def healthcheck() -> dict[str, Any]:
        current = _settings()
        return {
            "status": "ok",
            "tmdb": current.tmdb_enabled,
            "watchmode": current.watchmode_enabled,
        }

    @fastapi_app.post("/api/createRoom")
    async def create_room_endpoint() -> dict[str, str]:
        repository = get_room_repository(fastapi_app)
        room = await create_room(repository, attempts=_settings().room_code_attempts)
        logger.info("Created room %s", room.code)
        return {"code": room.code}

    @fastapi_app.get("/api/room")
    async def room_endpoint(roomCode: str | None = None) -> dict[str, Any]:
        code = normalize_room_code(roomCode)
        if not code:
            raise InvalidInput("roomCode required")
        repository = get_room_repository(fastapi_app)
        room = await repository.lookup_room_by_code(code)
        if room is None:
            raise RoomNotFound(code)
        return {"room": room.to_payload()}

    @fastapi_app.post("/api/savePreferences")
    async def save_preferences_endpoint(request: Request) -> dict[str, bool]:
        try:
            payload = await request.json()
        except json.JSONDecodeError:
            payload = {}
        if not isinstance(payload, dict):
            raise InvalidInput("Invalid payload")
        if not normalize_room_code(str(payload.get("roomCode") or "")):
            raise InvalidInput("roomCode required")
        try:
            submission = PreferenceSubmission.model_validate(payload)
        except ValidationError as exc:
            raise InvalidInput(_format_validation_error(exc)) from exc

        repository = get_room_repository(fastapi_app)
        room = await repository.lookup_room_by_code(submission.room_code)
        if room is None:
            raise RoomNotFound(submission.room_code)
        await repository.add_preference(room.id, submission)
        return {"ok": True}

    @fastapi_app.get("/api/match")
    @fastapi_app.get("/match")
    async def match_endpoint(roomCode: str | None = None) -> JSONResponse:
        service = get_match_service(fastapi_app)
        result = await service.match(roomCode)
        return JSONResponse(result.to_payload())


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid payload"


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
