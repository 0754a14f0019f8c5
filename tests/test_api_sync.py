"""
End-to-end tests for the MindWell Companion API endpoints.

These tests drive the HTTP API through FastAPI's TestClient with a fake
inference service behind the companion engine.
"""

import asyncio
import logging

from fakes import FakeInference
from fastapi.testclient import TestClient

from mindwell_companion.config import Settings
from mindwell_companion.engine import (
    FALLBACK_JOURNAL_PROMPT,
    FALLBACK_MESSAGE,
    FALLBACK_SUGGESTIONS,
    CompanionEngine,
)
from mindwell_companion.server import create_app
from mindwell_companion.store import WellnessStore
from mindwell_companion.suggestions import LOW_MOOD_SUGGESTIONS


class TestAPISync:
    """Integration tests covering the complete application flow."""

    def setup_method(self):
        """Set up a fresh app with a new store and fake inference for each test."""
        self.settings = Settings(recent_mood_limit=2)
        self.store = WellnessStore()
        self.inference = FakeInference(
            text="I'm sorry today feels heavy, Sam.",
            sentiment_payload='{"rating": 1, "confidence": 0.9}',
        )
        self.engine = CompanionEngine(self.inference, settings=self.settings)
        self.app = create_app(self.store, self.engine, settings=self.settings)

    def test_health(self):
        with TestClient(self.app) as client:
            response = client.get("/")
            assert response.status_code == 200
            assert response.json()["status"] == "ok"

    def test_chat_workflow(self):
        """Test profile -> moods -> chat -> history."""
        with TestClient(self.app) as client:
            # 1. Set up the profile and some mood history
            profile = client.put(
                "/users/sam/profile", json={"display_name": "Sam", "tone": "gentle"}
            )
            assert profile.status_code == 200
            assert profile.json()["display_name"] == "Sam"

            for value, note in [(4, "ok"), (2, "tired"), (1, None)]:
                response = client.post(
                    "/users/sam/moods", json={"value": value, "note": note}
                )
                assert response.status_code == 200

            # 2. Chat
            response = client.post(
                "/users/sam/chat", json={"message": "I feel hopeless today"}
            )
            assert response.status_code == 200

            result = response.json()
            assert result["message"] == "I'm sorry today feels heavy, Sam."
            assert result["sentiment"] == {"rating": 1, "confidence": 0.9}
            assert result["suggestions"] == list(LOW_MOOD_SUGGESTIONS[:3])

            # 3. The prompt carried the profile and the two newest moods
            [call] = self.inference.generate_calls
            system_prompt = call["system_instruction"]
            assert "The user's name is Sam." in system_prompt
            assert "Use a gentle tone" in system_prompt
            assert "Recent mood data: 1/5 (no note), 2/5 (tired)" in system_prompt
            assert "4/5 (ok)" not in system_prompt

            # 4. Both sides of the turn were recorded
            history = client.get("/users/sam/chat/history").json()
            assert [(m["message"], m["is_ai"]) for m in history] == [
                ("I'm sorry today feels heavy, Sam.", True),
                ("I feel hopeless today", False),
            ]

    def test_chat_rejects_blank_message(self):
        with TestClient(self.app) as client:
            response = client.post("/users/sam/chat", json={"message": "   "})
            assert response.status_code == 400

            missing = client.post("/users/sam/chat", json={})
            assert missing.status_code == 422

        assert self.inference.generate_calls == []

    def test_chat_fallback_when_inference_fails(self):
        self.inference.fail_generate = True

        with TestClient(self.app) as client:
            response = client.post("/users/sam/chat", json={"message": "Hello"})
            assert response.status_code == 200

            result = response.json()
            assert result["message"] == FALLBACK_MESSAGE
            assert result["suggestions"] == list(FALLBACK_SUGGESTIONS)
            assert result["sentiment"] is None

            history = client.get("/users/sam/chat/history").json()
            assert history[0]["message"] == FALLBACK_MESSAGE
            assert history[0]["is_ai"] is True

        assert self.inference.structured_calls == []

    def test_journal_prompt_and_entries(self):
        self.inference.text = "What gave you energy today?"

        with TestClient(self.app) as client:
            prompt = client.get("/journal/prompt").json()["prompt"]
            assert prompt == "What gave you energy today?"

            created = client.post(
                "/users/sam/journal", json={"content": "A long walk.", "prompt": prompt}
            )
            assert created.status_code == 200

            [entry] = client.get("/users/sam/journal").json()
            assert entry["prompt"] == prompt
            assert entry["content"] == "A long walk."

            empty = client.post("/users/sam/journal", json={"content": ""})
            assert empty.status_code == 422

    def test_journal_prompt_fallback(self):
        self.inference.fail_generate = True

        with TestClient(self.app) as client:
            response = client.get("/journal/prompt")
            assert response.status_code == 200
            assert response.json() == {"prompt": FALLBACK_JOURNAL_PROMPT}

    def test_activities_and_dashboard(self):
        with TestClient(self.app) as client:
            created = client.post(
                "/users/sam/activities",
                json={
                    "name": "Meditation",
                    "type": "meditation",
                    "duration_minutes": 10,
                },
            )
            assert created.status_code == 200
            activity_id = created.json()["id"]

            missing = client.post("/users/sam/activities/9999/complete")
            assert missing.status_code == 404

            done = client.post(f"/users/sam/activities/{activity_id}/complete")
            assert done.status_code == 200

            stats = client.get("/users/sam/activities/stats").json()
            assert stats == {"completed": 1, "total": 1, "streak": 1}

            client.post("/users/sam/moods", json={"value": 4})
            client.post("/users/sam/moods", json={"value": 3})
            client.post("/users/sam/moods", json={"value": 3})

            mood_stats = client.get("/users/sam/moods/stats").json()
            assert mood_stats["count"] == 3

            dashboard = client.get("/users/sam/dashboard").json()
            assert dashboard == {
                "daily_activities": 1,
                "mood_score": 3.3,
                "exercises_completed": 0,
                "streak": 1,
            }

    def test_mood_validation(self):
        with TestClient(self.app) as client:
            assert client.post("/users/sam/moods", json={"value": 6}).status_code == 422
            assert client.post("/users/sam/moods", json={"value": 0}).status_code == 422
            assert client.get("/users/sam/moods?limit=0").status_code == 422

    def test_exercise_sessions(self):
        with TestClient(self.app) as client:
            created = client.post(
                "/users/sam/exercises",
                json={
                    "exercise_type": "breathing",
                    "duration_seconds": 300,
                    "completed": True,
                    "data": {"pattern": "4-7-8"},
                },
            )
            assert created.status_code == 200
            assert created.json()["exercise_type"] == "breathing"

            client.post("/users/sam/exercises", json={"exercise_type": "stretching"})

            sessions = client.get("/users/sam/exercises").json()
            assert [s["exercise_type"] for s in sessions] == ["stretching", "breathing"]
            assert sessions[1]["data"] == {"pattern": "4-7-8"}

            invalid = client.post("/users/sam/exercises", json={"exercise_type": ""})
            assert invalid.status_code == 422

            dashboard = client.get("/users/sam/dashboard").json()
            assert dashboard["exercises_completed"] == 1

    def test_dashboard_counts_completed_exercises_among_newest_thirty(self):
        async def seed() -> None:
            # Oldest five are completed and fall outside the newest thirty.
            for i in range(35):
                await self.store.create_exercise_session(
                    "sam", "breathing", completed=i < 5 or i >= 30, created_at=float(i)
                )

        asyncio.run(seed())

        with TestClient(self.app) as client:
            dashboard = client.get("/users/sam/dashboard").json()
            assert dashboard["exercises_completed"] == 5

    def test_chat_reply_returned_when_saving_it_fails(self, caplog):
        class FailingReplyStore(WellnessStore):
            async def create_chat_message(self, user_id, message, is_ai=False):
                if is_ai:
                    raise RuntimeError("disk full")
                return await super().create_chat_message(user_id, message, is_ai)

        store = FailingReplyStore()
        app = create_app(store, self.engine, settings=self.settings)

        with caplog.at_level(logging.ERROR):
            with TestClient(app) as client:
                response = client.post("/users/sam/chat", json={"message": "Hi"})
                assert response.status_code == 200
                assert response.json()["message"] == "I'm sorry today feels heavy, Sam."

                history = client.get("/users/sam/chat/history").json()
                assert [m["message"] for m in history] == ["Hi"]

        assert "Failed to save chat reply" in caplog.text
