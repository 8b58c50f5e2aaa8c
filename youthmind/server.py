"""
FastAPI server for the YouthMind service.

Each endpoint is a thin controller: gather input, invoke the orchestrator,
return the structured result or an error payload. Mood updates for a session
are also streamed as Server-Sent Events.
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field

from . import __version__
from .activities import activities_for_mood
from .config import Settings
from .errors import (
    EmptyEntry,
    FlowError,
    FlowInputError,
    MediaError,
    ModerationRejected,
    MoodRequired,
    StoreError,
    TaskNotFound,
)
from .flows import generate_feature_image, moderate_text
from .genai import GenerativeClient
from .models import MoodSignal, NewThread
from .orchestrator import Outcome, RecommendationKind, SessionOrchestrator
from .safety import CRISIS_RESOURCES
from .schemas import RoadmapInput, WireModel
from .session import SessionStore
from .support import (
    MemoryThreadCollection,
    MongoThreadCollection,
    SupportBoard,
    prompt_for_mood,
)

logger = logging.getLogger(__name__)

GENERIC_AI_FAILURE = "Failed to get a response from the AI. Please try again."
STORE_FAILURE = "The support board is unavailable right now. Please try again."


# API Request/Response Schemas
class TextRequest(WireModel):
    """Payload for check-in and chat requests."""

    text: str = Field(..., min_length=1, description="What the user wrote")
    language: str = Field("en", description="The user selected language")


class FaceRequest(WireModel):
    image_data_uri: str = Field(..., description="Camera snapshot as a data URI")
    language: str = Field("en")


class VoiceRequest(WireModel):
    audio_data_uri: str = Field(..., description="Voice recording as a data URI")
    language: str = Field("en")


class MoodUpdate(WireModel):
    """Payload for self-reported mood updates."""

    mood: str = Field(..., min_length=1, description="The new mood value to set")
    language: str = Field("en")


class RecommendationRequest(WireModel):
    language: str = Field("en")
    mood: str | None = Field(None, description="Overrides the session's stored mood")
    prompt: str | None = Field(None, description="Creative direction for mood art")


class FeatureImageRequest(WireModel):
    feature_title: str
    feature_description: str


class TaskRequest(WireModel):
    text: str = Field(..., description="The task to add")


class GratitudeRequest(WireModel):
    entry: str = Field(..., description="Something the user is grateful for")


class MoodResponse(BaseModel):
    """Response model for mood endpoints."""

    mood: MoodSignal | None = Field(..., description="The session's current mood")


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


def _outcome(outcome: Outcome[Any]) -> dict[str, Any]:
    return {
        "crisis": outcome.crisis,
        "resources": _dump(outcome.resources) if outcome.resources else None,
        "result": _dump(outcome.result) if outcome.result is not None else None,
    }


def build_orchestrator(settings: Settings) -> SessionOrchestrator:
    """Wire the default collaborators from settings."""
    client = GenerativeClient(settings)
    if settings.database_url:
        collection: Any = MongoThreadCollection(settings.database_url, settings.database_name)
    else:
        collection = MemoryThreadCollection()
    board = SupportBoard(collection, lambda text: moderate_text(client, text))
    return SessionOrchestrator(client, SessionStore(), board)


def create_app(orchestrator: SessionOrchestrator) -> FastAPI:
    """
    Create a FastAPI application around the given orchestrator.

    Args:
        orchestrator: The SessionOrchestrator instance to use for the application

    Returns:
        Configured FastAPI application
    """
    sessions = orchestrator.sessions

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for FastAPI application."""
        yield
        aclose = getattr(orchestrator.client, "aclose", None)
        if aclose is not None:
            await aclose()
        orchestrator.support.close()

    app = FastAPI(
        title="YouthMind",
        description="A mood-aware wellness companion service",
        version=__version__,
        lifespan=lifespan,
    )

    # MARK: - Error mapping

    @app.exception_handler(FlowInputError)
    async def flow_input_error(request: Request, exc: FlowInputError) -> JSONResponse:
        logger.warning("Rejected flow input on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": "The request could not be processed."},
        )

    @app.exception_handler(FlowError)
    async def flow_error(request: Request, exc: FlowError) -> JSONResponse:
        logger.error("AI call failed on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": GENERIC_AI_FAILURE}
        )

    @app.exception_handler(MediaError)
    async def media_error(request: Request, exc: MediaError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    @app.exception_handler(ModerationRejected)
    async def moderation_rejected(request: Request, exc: ModerationRejected) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": exc.reason}
        )

    @app.exception_handler(MoodRequired)
    async def mood_required(request: Request, exc: MoodRequired) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.exception_handler(StoreError)
    async def store_error(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Thread store failed on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": STORE_FAILURE}
        )

    @app.exception_handler(EmptyEntry)
    async def empty_entry(request: Request, exc: EmptyEntry) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)}
        )

    @app.exception_handler(TaskNotFound)
    async def task_not_found(request: Request, exc: TaskNotFound) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    # MARK: - Endpoints

    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "youthmind"}

    @app.get("/resources/crisis")
    async def crisis_resources() -> dict[str, Any]:
        return _dump(CRISIS_RESOURCES)

    @app.post("/sessions/{session_id}/check-in")
    async def check_in(session_id: str, body: TextRequest) -> dict[str, Any]:
        """Detect mood from free text and reply with support and a recommendation."""
        outcome = await orchestrator.check_in(session_id, body.text, body.language)
        return _outcome(outcome)

    @app.post("/sessions/{session_id}/face")
    async def face(session_id: str, body: FaceRequest) -> MoodResponse:
        """Detect mood from a camera snapshot; polled by the client for continuous sensing."""
        await orchestrator.detect_face(session_id, body.image_data_uri, body.language)
        return MoodResponse(mood=await sessions.read_mood(session_id))

    @app.post("/sessions/{session_id}/chat")
    async def chat(session_id: str, body: TextRequest) -> dict[str, Any]:
        outcome = await orchestrator.chat(session_id, body.text, body.language)
        return _outcome(outcome)

    @app.get("/sessions/{session_id}/chat")
    async def chat_history(session_id: str) -> dict[str, Any]:
        session = sessions.get(session_id)
        return {"history": [_dump(turn) for turn in session.chat]}

    @app.post("/sessions/{session_id}/voice")
    async def voice(session_id: str, body: VoiceRequest) -> dict[str, Any]:
        result = await orchestrator.voice(session_id, body.audio_data_uri, body.language)
        return _dump(result)

    @app.get("/sessions/{session_id}/mood")
    async def get_mood(session_id: str) -> MoodResponse:
        """
        Get the session's current mood.

        Returns:
            The last recorded mood, or null when none is known yet
        """
        return MoodResponse(mood=await sessions.read_mood(session_id))

    @app.put("/sessions/{session_id}/mood")
    async def update_mood(session_id: str, body: MoodUpdate) -> MoodResponse:
        """Record a self-reported mood and notify all subscribers."""
        updated = await sessions.update_mood(session_id, body.mood, "manual", body.language)
        return MoodResponse(mood=updated)

    @app.get("/sessions/{session_id}/mood/stream")
    async def stream_mood(session_id: str) -> StreamingResponse:
        """
        Stream a session's mood updates via Server-Sent Events.

        The current mood (if any) is sent immediately upon connection.

        Returns:
            StreamingResponse with text/event-stream content type
        """

        async def event_generator() -> AsyncGenerator[str, None]:
            try:
                async with sessions.stream(session_id) as mood_stream:
                    async for mood in mood_stream:
                        yield f"data: {json.dumps(mood.model_dump())}\n\n"
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.exception("Mood stream for session %s failed", session_id)
                error_data = json.dumps({"error": str(e)})
                yield f"event: error\ndata: {error_data}\n\n"

        return StreamingResponse(
            event_generator(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Headers": "*",
            },
        )

    @app.post("/sessions/{session_id}/recommendations/{kind}")
    async def recommend(
        session_id: str, kind: RecommendationKind, body: RecommendationRequest
    ) -> dict[str, Any]:
        """Journaling prompt, music, game, art or coping recommendation for the session's mood."""
        outcome = await orchestrator.recommend(
            session_id, kind, body.language, mood=body.mood, prompt=body.prompt
        )
        return _outcome(outcome)

    @app.get("/activities")
    async def activities(mood: str) -> dict[str, Any]:
        return {
            "activities": [
                {"gameId": a.game_id, "title": a.title, "description": a.description}
                for a in activities_for_mood(mood)
            ]
        }

    @app.post("/roadmap")
    async def roadmap(body: RoadmapInput) -> dict[str, Any]:
        return _dump(await orchestrator.roadmap(body))

    @app.post("/features/image")
    async def feature_image(body: FeatureImageRequest) -> dict[str, Any]:
        result = await generate_feature_image(
            orchestrator.client, body.feature_title, body.feature_description
        )
        return _dump(result)

    @app.get("/threads")
    async def list_threads(session_id: str | None = None) -> dict[str, Any]:
        """List support threads newest first, narrowed to the session's mood when given."""
        threads = await orchestrator.threads(session_id)
        return {"threads": [_dump(thread) for thread in threads]}

    @app.post("/threads", status_code=status.HTTP_201_CREATED)
    async def create_thread(body: NewThread) -> dict[str, Any]:
        """Moderate and publish a new support thread."""
        thread = await orchestrator.create_thread(body)
        return {"thread": _dump(thread)}

    @app.get("/threads/prompt")
    async def thread_prompt(mood: str) -> dict[str, Any]:
        """Conversation starter suggested for the user's mood, or null."""
        return {"prompt": prompt_for_mood(mood)}

    # MARK: - Personal lists

    @app.get("/sessions/{session_id}/todos")
    async def list_tasks(session_id: str) -> dict[str, Any]:
        tasks = sessions.get(session_id).todos
        return {
            "tasks": [_dump(task) for task in tasks],
            "completed": sum(1 for task in tasks if task.completed),
            "total": len(tasks),
        }

    @app.post("/sessions/{session_id}/todos", status_code=status.HTTP_201_CREATED)
    async def add_task(session_id: str, body: TaskRequest) -> dict[str, Any]:
        return {"task": _dump(sessions.get(session_id).add_task(body.text))}

    @app.post("/sessions/{session_id}/todos/{task_id}/toggle")
    async def toggle_task(session_id: str, task_id: int) -> dict[str, Any]:
        return {"task": _dump(sessions.get(session_id).toggle_task(task_id))}

    @app.delete("/sessions/{session_id}/todos/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_task(session_id: str, task_id: int) -> None:
        sessions.get(session_id).delete_task(task_id)

    @app.get("/sessions/{session_id}/gratitude")
    async def gratitude_wall(session_id: str) -> dict[str, Any]:
        return {"entries": list(sessions.get(session_id).gratitude)}

    @app.post("/sessions/{session_id}/gratitude", status_code=status.HTTP_201_CREATED)
    async def add_gratitude(session_id: str, body: GratitudeRequest) -> dict[str, Any]:
        return {"entries": sessions.get(session_id).add_gratitude(body.entry)}

    return app


# Default app instance for `uvicorn youthmind.server:app`
app = create_app(build_orchestrator(Settings()))


def main() -> None:
    """Main entry point for the server."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "youthmind.server:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()
