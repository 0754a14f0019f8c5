"""
FastAPI server for the MindWell Companion service.

This module implements the HTTP API for mood, activity, journal and exercise
tracking and the companion chat. Records are kept in a WellnessStore; chat
turns are answered by a CompanionEngine.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from .config import Settings, get_settings
from .engine import CompanionEngine
from .models import (
    Activity,
    ActivityStats,
    ChatMessage,
    CompanionResponse,
    ConversationContext,
    DashboardStats,
    ExerciseSession,
    JournalEntry,
    Mood,
    MoodSample,
    MoodStats,
    UserProfile,
)
from .store import DEFAULT_LIMIT, WellnessStore

logger = logging.getLogger(__name__)

MAX_LIMIT = 500
DASHBOARD_EXERCISE_LIMIT = 30


# API Request/Response Schemas
class ProfileUpdate(BaseModel):
    """Payload for profile updates."""

    display_name: str | None = Field(
        None, description="How the assistant addresses the user"
    )
    tone: str | None = Field(None, description="Preferred assistant tone")


class MoodCreate(BaseModel):
    """Payload for logging a mood."""

    value: int = Field(..., ge=1, le=5, description="Mood on a 1-5 scale")
    note: str | None = Field(None, description="Optional note")


class ActivityCreate(BaseModel):
    """Payload for recording an activity."""

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, description="meditation, exercise, ...")
    duration_minutes: int | None = Field(None, ge=0)
    completed: bool = False


class JournalCreate(BaseModel):
    """Payload for writing a journal entry."""

    content: str = Field(..., min_length=1)
    title: str | None = None
    prompt: str | None = Field(None, description="Prompt the entry answers")


class ExerciseCreate(BaseModel):
    """Payload for recording a guided exercise session."""

    exercise_type: str = Field(..., min_length=1, description="breathing, ...")
    duration_seconds: int | None = Field(None, ge=0)
    completed: bool = False
    data: dict[str, Any] | None = Field(None, description="Session-specific data")


class ChatRequest(BaseModel):
    """Payload for a chat turn."""

    message: str = Field(..., description="The user's message")


class JournalPromptResponse(BaseModel):
    prompt: str


def create_app(
    store: WellnessStore,
    engine: CompanionEngine,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Create a FastAPI application with the given store and companion engine.

    Args:
        store: The WellnessStore instance holding user records
        engine: The CompanionEngine answering chat turns
        settings: Settings to use, defaults to the process-wide settings

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for FastAPI application."""
        logger.info("MindWell Companion starting with model %s", settings.model)
        yield

    app = FastAPI(
        title="MindWell Companion",
        description="A wellness-support service with an empathetic assistant",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "mindwell-companion"}

    # MARK: - Profile

    @app.get("/users/{user_id}/profile")
    async def get_profile(user_id: str) -> UserProfile:
        return await store.get_profile(user_id)

    @app.put("/users/{user_id}/profile")
    async def update_profile(user_id: str, update: ProfileUpdate) -> UserProfile:
        return await store.update_profile(
            user_id, display_name=update.display_name, tone=update.tone
        )

    # MARK: - Moods

    @app.post("/users/{user_id}/moods")
    async def create_mood(user_id: str, mood: MoodCreate) -> Mood:
        return await store.create_mood(user_id, value=mood.value, note=mood.note)

    @app.get("/users/{user_id}/moods")
    async def list_moods(
        user_id: str, limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    ) -> list[Mood]:
        """List the user's moods, newest first."""
        return await store.list_moods(user_id, limit=limit)

    @app.get("/users/{user_id}/moods/stats")
    async def mood_stats(user_id: str) -> MoodStats:
        return await store.mood_stats(user_id)

    # MARK: - Activities

    @app.post("/users/{user_id}/activities")
    async def create_activity(user_id: str, activity: ActivityCreate) -> Activity:
        return await store.create_activity(
            user_id,
            name=activity.name,
            type=activity.type,
            duration_minutes=activity.duration_minutes,
            completed=activity.completed,
        )

    @app.get("/users/{user_id}/activities")
    async def list_activities(
        user_id: str, limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    ) -> list[Activity]:
        return await store.list_activities(user_id, limit=limit)

    @app.post("/users/{user_id}/activities/{activity_id}/complete")
    async def complete_activity(user_id: str, activity_id: int) -> dict[str, str]:
        if not await store.complete_activity(activity_id, user_id):
            raise HTTPException(status_code=404, detail="Activity not found")
        return {"message": "Activity completed"}

    @app.get("/users/{user_id}/activities/stats")
    async def activity_stats(user_id: str) -> ActivityStats:
        return await store.activity_stats(user_id)

    # MARK: - Journal

    @app.post("/users/{user_id}/journal")
    async def create_journal_entry(user_id: str, entry: JournalCreate) -> JournalEntry:
        return await store.create_journal_entry(
            user_id, content=entry.content, title=entry.title, prompt=entry.prompt
        )

    @app.get("/users/{user_id}/journal")
    async def list_journal_entries(
        user_id: str, limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    ) -> list[JournalEntry]:
        return await store.list_journal_entries(user_id, limit=limit)

    @app.get("/journal/prompt")
    async def journal_prompt() -> JournalPromptResponse:
        """Generate a reflective journaling question."""
        return JournalPromptResponse(prompt=await engine.generate_journal_prompt())

    # MARK: - Chat

    @app.post("/users/{user_id}/chat")
    async def chat(user_id: str, request: ChatRequest) -> CompanionResponse:
        """
        Answer a chat turn and record both sides of the conversation.

        The assistant is given the user's profile and most recent moods as
        context.

        Returns:
            The companion's reply with sentiment and suggestions
        """
        if not request.message.strip():
            raise HTTPException(status_code=400, detail="Message is required")

        try:
            await store.create_chat_message(user_id, request.message, is_ai=False)
            profile = await store.get_profile(user_id)
            recent_moods = await store.list_moods(
                user_id, limit=settings.recent_mood_limit
            )
        except Exception as e:
            raise HTTPException(
                status_code=500, detail=f"Failed to process chat message: {str(e)}"
            )

        context = ConversationContext(
            display_name=profile.display_name,
            tone_hint=profile.tone,
            recent_moods=[
                MoodSample(value=m.value, note=m.note, timestamp=m.created_at)
                for m in recent_moods
            ],
        )
        response = await engine.generate_companion_response(request.message, context)

        try:
            await store.create_chat_message(user_id, response.message, is_ai=True)
        except Exception:
            # The reply was generated; the user still gets it.
            logger.exception("Failed to save chat reply for user %s", user_id)

        logger.info(
            "Chat turn handled for user %s (rating=%s)",
            user_id,
            response.sentiment.rating if response.sentiment else "fallback",
        )
        return response

    @app.get("/users/{user_id}/chat/history")
    async def chat_history(
        user_id: str, limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    ) -> list[ChatMessage]:
        """List chat messages, newest first."""
        return await store.list_chat_history(user_id, limit=limit)

    # MARK: - Exercises

    @app.post("/users/{user_id}/exercises")
    async def create_exercise_session(
        user_id: str, session: ExerciseCreate
    ) -> ExerciseSession:
        return await store.create_exercise_session(
            user_id,
            exercise_type=session.exercise_type,
            duration_seconds=session.duration_seconds,
            completed=session.completed,
            data=session.data,
        )

    @app.get("/users/{user_id}/exercises")
    async def list_exercise_sessions(
        user_id: str, limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    ) -> list[ExerciseSession]:
        """List exercise sessions, newest first."""
        return await store.list_exercise_sessions(user_id, limit=limit)

    # MARK: - Dashboard

    @app.get("/users/{user_id}/dashboard")
    async def dashboard(user_id: str) -> DashboardStats:
        """
        Summary figures for the user's dashboard.

        Completed exercises are counted among the most recent sessions only.
        """
        moods = await store.mood_stats(user_id)
        activities = await store.activity_stats(user_id)
        sessions = await store.list_exercise_sessions(
            user_id, limit=DASHBOARD_EXERCISE_LIMIT
        )
        return DashboardStats(
            daily_activities=activities.completed,
            mood_score=round(moods.average, 1),
            exercises_completed=sum(1 for s in sessions if s.completed),
            streak=activities.streak,
        )

    return app


# Default app instance used by the uvicorn entry point
app = create_app(WellnessStore(), CompanionEngine())


def main() -> None:
    """Main entry point for the server."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    uvicorn.run(
        "mindwell_companion.server:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
