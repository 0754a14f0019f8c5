"""
Companion response engine.

This module turns a user message and their recent mood history into a
supportive reply, a sentiment classification and a set of coping suggestions.
Each inference stage fails independently and substitutes a fixed value, so
the public operations always return a usable result.
"""

import logging
import math

from pydantic import BaseModel, Field, ValidationError

from .config import Settings, get_settings
from .inference import InferenceClient, InferenceError
from .models import CompanionResponse, ConversationContext, SentimentResult
from .prompts import (
    JOURNAL_INSTRUCTION,
    JOURNAL_TRIGGER,
    SENTIMENT_INSTRUCTION,
    build_system_prompt,
)
from .suggestions import select_suggestions

logger = logging.getLogger(__name__)

EMPTY_REPLY_MESSAGE = (
    "I'm here to support you. Could you tell me more about how you're feeling?"
)

FALLBACK_MESSAGE = (
    "I'm here to listen and support you. How can I help you feel better today?"
)
FALLBACK_SUGGESTIONS = (
    "Try a breathing exercise",
    "Consider journaling your thoughts",
    "Take a short walk",
)

EMPTY_JOURNAL_PROMPT = "What are you grateful for today, and how did it make you feel?"
FALLBACK_JOURNAL_PROMPT = (
    "What emotions did you experience today, and what might have triggered them?"
)

DEFAULT_RATING = 3
DEFAULT_CONFIDENCE = 0.5


class _SentimentPayload(BaseModel):
    """Shape expected back from the classifier, before clamping."""

    rating: float = Field(DEFAULT_RATING, allow_inf_nan=False)
    confidence: float = Field(DEFAULT_CONFIDENCE, allow_inf_nan=False)


def default_sentiment() -> SentimentResult:
    return SentimentResult(rating=DEFAULT_RATING, confidence=DEFAULT_CONFIDENCE)


def clamp_sentiment(rating: float, confidence: float) -> SentimentResult:
    """
    Bound raw classifier values to the valid sentiment range.

    The rating is rounded half up to an integer and bounded to [1, 5]; the
    confidence is bounded to [0, 1] without rounding.
    """
    rounded = math.floor(rating + 0.5)
    return SentimentResult(
        rating=max(1, min(5, rounded)),
        confidence=max(0.0, min(1.0, float(confidence))),
    )


def parse_sentiment(payload: str | None) -> SentimentResult:
    """Decode and clamp a classifier payload, defaulting on anything unusable."""
    if not payload:
        return default_sentiment()

    try:
        raw = _SentimentPayload.model_validate_json(payload)
    except ValidationError as e:
        logger.warning(
            "Discarding malformed sentiment payload (%d chars, %d error(s))",
            len(payload),
            e.error_count(),
        )
        return default_sentiment()

    return clamp_sentiment(raw.rating, raw.confidence)


def fallback_response() -> CompanionResponse:
    """The reply used when no live reply could be generated."""
    return CompanionResponse(
        message=FALLBACK_MESSAGE,
        suggestions=list(FALLBACK_SUGGESTIONS),
    )


class CompanionEngine:
    """
    Orchestrates reply generation, sentiment analysis and suggestions.

    The engine holds no per-call state; one instance can serve concurrent
    requests.
    """

    def __init__(
        self,
        inference: InferenceClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._inference = inference or InferenceClient(self._settings)

    async def generate_companion_response(
        self, utterance: str, context: ConversationContext
    ) -> CompanionResponse:
        """
        Produce the assistant's answer to a user message.

        Args:
            utterance: The user's message, must not be empty
            context: Conversation context for the user

        Returns:
            The reply with sentiment and suggestions, or the fixed fallback
            response if the reply could not be generated
        """
        system_prompt = build_system_prompt(context)

        message = await self.generate_reply(system_prompt, utterance)
        if message is None:
            return fallback_response()

        sentiment = await self.classify_sentiment(utterance)

        return CompanionResponse(
            message=message,
            sentiment=sentiment,
            suggestions=select_suggestions(sentiment.rating),
        )

    async def generate_reply(self, system_prompt: str, utterance: str) -> str | None:
        """
        Generate the assistant's reply text.

        Returns:
            The reply, or None if the inference service failed
        """
        try:
            text = await self._inference.generate(
                system_prompt,
                utterance,
                max_output_tokens=self._settings.reply_max_tokens,
                temperature=self._settings.reply_temperature,
            )
        except InferenceError:
            logger.exception("Reply generation failed")
            return None

        if not text or not text.strip():
            logger.info("Inference returned no reply content, using default reply")
            return EMPTY_REPLY_MESSAGE
        return text

    async def classify_sentiment(self, utterance: str) -> SentimentResult:
        """Classify the sentiment of a user message, defaulting to neutral."""
        try:
            payload = await self._inference.generate_structured(
                SENTIMENT_INSTRUCTION,
                utterance,
                max_output_tokens=self._settings.sentiment_max_tokens,
            )
        except InferenceError:
            logger.exception("Sentiment analysis failed")
            return default_sentiment()

        return parse_sentiment(payload)

    async def generate_journal_prompt(self) -> str:
        """Generate an open-ended reflective question for journaling."""
        try:
            text = await self._inference.generate(
                JOURNAL_INSTRUCTION,
                JOURNAL_TRIGGER,
                max_output_tokens=self._settings.journal_max_tokens,
                temperature=self._settings.journal_temperature,
            )
        except InferenceError:
            logger.exception("Journal prompt generation failed")
            return FALLBACK_JOURNAL_PROMPT

        if not text or not text.strip():
            logger.info("Inference returned no journal prompt, using default")
            return EMPTY_JOURNAL_PROMPT
        return text
