"""
Shared data models for the MindWell Companion service.

This module defines the domain models used across the layers of the
application: the companion engine contracts, the stored records and the
statistics derived from them.
"""

from typing import Any

from pydantic import BaseModel, Field

# MARK: - Companion Engine


class MoodSample(BaseModel):
    """A single mood reading fed into the conversation context."""

    value: int = Field(..., ge=1, le=5, description="Mood on a 1-5 scale")
    note: str | None = Field(None, description="Optional free-text note")
    timestamp: float | None = Field(
        None, description="Unix timestamp when the mood was logged"
    )


class ConversationContext(BaseModel):
    """Per-request context used to build the assistant's system prompt."""

    display_name: str | None = Field(None, description="How to address the user")
    tone_hint: str | None = Field(None, description="Requested tone of voice")
    recent_moods: list[MoodSample] = Field(
        default_factory=list, description="Recent moods, newest first"
    )


class SentimentResult(BaseModel):
    """Sentiment classification of a user utterance."""

    rating: int = Field(..., ge=1, le=5, description="1 very negative, 5 very positive")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Classifier confidence")


class CompanionResponse(BaseModel):
    """The assistant's answer to a single chat turn."""

    message: str = Field(..., min_length=1, description="Reply shown to the user")
    sentiment: SentimentResult | None = Field(
        None, description="Sentiment of the user's message, absent on fallback"
    )
    suggestions: list[str] | None = Field(
        None, max_length=3, description="Coping activities to offer"
    )


# MARK: - Records


class UserProfile(BaseModel):
    """Per-user preferences."""

    user_id: str
    display_name: str | None = None
    tone: str | None = Field(None, description="Preferred assistant tone")


class Mood(BaseModel):
    """A logged mood entry."""

    id: int
    user_id: str
    value: int = Field(..., ge=1, le=5)
    note: str | None = None
    created_at: float = Field(..., description="Unix timestamp of creation")


class Activity(BaseModel):
    """A wellness activity such as a meditation or a walk."""

    id: int
    user_id: str
    name: str
    type: str = Field(..., description="meditation, exercise, journaling, ...")
    duration_minutes: int | None = None
    completed: bool = False
    created_at: float


class JournalEntry(BaseModel):
    """A journal entry, optionally written in answer to a prompt."""

    id: int
    user_id: str
    title: str | None = None
    content: str
    prompt: str | None = None
    created_at: float


class ExerciseSession(BaseModel):
    """A guided exercise session such as a breathing routine."""

    id: int
    user_id: str
    exercise_type: str = Field(..., description="breathing, stretching, ...")
    duration_seconds: int | None = None
    completed: bool = False
    data: dict[str, Any] | None = Field(None, description="Session-specific data")
    created_at: float


class ChatMessage(BaseModel):
    """One side of a chat turn."""

    id: int
    user_id: str
    message: str
    is_ai: bool = False
    created_at: float


# MARK: - Statistics


class MoodStats(BaseModel):
    average: float = 0.0
    count: int = 0


class ActivityStats(BaseModel):
    completed: int = 0
    total: int = 0
    streak: int = Field(0, description="Consecutive days with a completed activity")


class DashboardStats(BaseModel):
    daily_activities: int
    mood_score: float
    exercises_completed: int
    streak: int
