"""
Record storage implementation for the MindWell Companion service.

This module provides an in-memory store for user profiles, moods, activities,
journal entries, exercise sessions and chat history, along with the
statistics derived from them. The design allows for easy replacement with a
persistent backend.
"""

import asyncio
import time
from datetime import date, datetime, timedelta
from itertools import count
from typing import Any, TypeVar

from pydantic import BaseModel

from .models import (
    Activity,
    ActivityStats,
    ChatMessage,
    ExerciseSession,
    JournalEntry,
    Mood,
    MoodStats,
    UserProfile,
)

DEFAULT_LIMIT = 50
STREAK_LOOKBACK_DAYS = 30

RecordT = TypeVar("RecordT", bound=BaseModel)


def _local_day(timestamp: float) -> date:
    """Calendar day of a timestamp, truncated at local midnight."""
    return datetime.fromtimestamp(timestamp).date()


def _newest_first(records: list[RecordT], user_id: str, limit: int) -> list[RecordT]:
    owned = [r for r in records if r.user_id == user_id]
    owned.sort(key=lambda r: (r.created_at, r.id), reverse=True)
    return owned[:limit]


class WellnessStore:
    """
    In-memory record storage.

    Records are kept in insertion order per kind. All mutations go through a
    single asyncio lock; reads return copies so callers cannot mutate stored
    records.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._ids = count(1)
        self._profiles: dict[str, UserProfile] = {}
        self._moods: list[Mood] = []
        self._activities: list[Activity] = []
        self._journal: list[JournalEntry] = []
        self._exercises: list[ExerciseSession] = []
        self._chat: list[ChatMessage] = []

    # MARK: - Profiles

    async def get_profile(self, user_id: str) -> UserProfile:
        """Return the user's profile, or a blank one if none was saved."""
        async with self._lock:
            profile = self._profiles.get(user_id)
            return profile.model_copy() if profile else UserProfile(user_id=user_id)

    async def update_profile(
        self, user_id: str, display_name: str | None = None, tone: str | None = None
    ) -> UserProfile:
        async with self._lock:
            profile = UserProfile(user_id=user_id, display_name=display_name, tone=tone)
            self._profiles[user_id] = profile
            return profile.model_copy()

    # MARK: - Moods

    async def create_mood(
        self,
        user_id: str,
        value: int,
        note: str | None = None,
        created_at: float | None = None,
    ) -> Mood:
        async with self._lock:
            mood = Mood(
                id=next(self._ids),
                user_id=user_id,
                value=value,
                note=note,
                created_at=time.time() if created_at is None else created_at,
            )
            self._moods.append(mood)
            return mood.model_copy()

    async def list_moods(self, user_id: str, limit: int = DEFAULT_LIMIT) -> list[Mood]:
        """Return the user's moods, newest first."""
        async with self._lock:
            return [m.model_copy() for m in _newest_first(self._moods, user_id, limit)]

    async def mood_stats(
        self,
        user_id: str,
        start: float | None = None,
        end: float | None = None,
    ) -> MoodStats:
        """
        Average mood over an optional time window.

        Args:
            user_id: Owner of the moods
            start: Inclusive lower bound on creation time
            end: Inclusive upper bound on creation time

        Returns:
            The average and number of moods; the average is 0 with no moods
        """
        async with self._lock:
            values = [
                m.value
                for m in self._moods
                if m.user_id == user_id
                and (start is None or m.created_at >= start)
                and (end is None or m.created_at <= end)
            ]

        if not values:
            return MoodStats(average=0.0, count=0)
        return MoodStats(average=sum(values) / len(values), count=len(values))

    # MARK: - Activities

    async def create_activity(
        self,
        user_id: str,
        name: str,
        type: str,
        duration_minutes: int | None = None,
        completed: bool = False,
        created_at: float | None = None,
    ) -> Activity:
        async with self._lock:
            activity = Activity(
                id=next(self._ids),
                user_id=user_id,
                name=name,
                type=type,
                duration_minutes=duration_minutes,
                completed=completed,
                created_at=time.time() if created_at is None else created_at,
            )
            self._activities.append(activity)
            return activity.model_copy()

    async def list_activities(
        self, user_id: str, limit: int = DEFAULT_LIMIT
    ) -> list[Activity]:
        async with self._lock:
            return [
                a.model_copy() for a in _newest_first(self._activities, user_id, limit)
            ]

    async def complete_activity(self, activity_id: int, user_id: str) -> bool:
        """
        Mark an activity as completed.

        Returns:
            False if the user owns no activity with that id
        """
        async with self._lock:
            for activity in self._activities:
                if activity.id == activity_id and activity.user_id == user_id:
                    activity.completed = True
                    return True
            return False

    async def activity_stats(
        self, user_id: str, now: datetime | None = None
    ) -> ActivityStats:
        """
        Completion counts and the current streak.

        The streak counts consecutive local calendar days, walking back from
        today, that have at least one completed activity. Today may still be
        empty without breaking the streak.
        """
        async with self._lock:
            owned = [a for a in self._activities if a.user_id == user_id]

        completed_days = {_local_day(a.created_at) for a in owned if a.completed}
        today = (now or datetime.now()).date()

        streak = 0
        for offset in range(STREAK_LOOKBACK_DAYS):
            if today - timedelta(days=offset) in completed_days:
                streak += 1
            elif offset > 0:
                break

        return ActivityStats(
            completed=sum(1 for a in owned if a.completed),
            total=len(owned),
            streak=streak,
        )

    # MARK: - Journal

    async def create_journal_entry(
        self,
        user_id: str,
        content: str,
        title: str | None = None,
        prompt: str | None = None,
    ) -> JournalEntry:
        async with self._lock:
            entry = JournalEntry(
                id=next(self._ids),
                user_id=user_id,
                title=title,
                content=content,
                prompt=prompt,
                created_at=time.time(),
            )
            self._journal.append(entry)
            return entry.model_copy()

    async def list_journal_entries(
        self, user_id: str, limit: int = DEFAULT_LIMIT
    ) -> list[JournalEntry]:
        async with self._lock:
            return [
                e.model_copy() for e in _newest_first(self._journal, user_id, limit)
            ]

    # MARK: - Exercises

    async def create_exercise_session(
        self,
        user_id: str,
        exercise_type: str,
        duration_seconds: int | None = None,
        completed: bool = False,
        data: dict[str, Any] | None = None,
        created_at: float | None = None,
    ) -> ExerciseSession:
        async with self._lock:
            session = ExerciseSession(
                id=next(self._ids),
                user_id=user_id,
                exercise_type=exercise_type,
                duration_seconds=duration_seconds,
                completed=completed,
                data=data,
                created_at=time.time() if created_at is None else created_at,
            )
            self._exercises.append(session)
            return session.model_copy(deep=True)

    async def list_exercise_sessions(
        self, user_id: str, limit: int = DEFAULT_LIMIT
    ) -> list[ExerciseSession]:
        """Return the user's exercise sessions, newest first."""
        async with self._lock:
            return [
                s.model_copy(deep=True)
                for s in _newest_first(self._exercises, user_id, limit)
            ]

    # MARK: - Chat

    async def create_chat_message(
        self, user_id: str, message: str, is_ai: bool = False
    ) -> ChatMessage:
        async with self._lock:
            chat_message = ChatMessage(
                id=next(self._ids),
                user_id=user_id,
                message=message,
                is_ai=is_ai,
                created_at=time.time(),
            )
            self._chat.append(chat_message)
            return chat_message.model_copy()

    async def list_chat_history(
        self, user_id: str, limit: int = DEFAULT_LIMIT
    ) -> list[ChatMessage]:
        async with self._lock:
            return [m.model_copy() for m in _newest_first(self._chat, user_id, limit)]
