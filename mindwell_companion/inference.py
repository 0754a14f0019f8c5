"""
Adapter over the hosted language-model inference service.

Every failure talking to the service, whether transport, authentication or a
malformed response, is raised as a single ``InferenceError`` so the engine
has one thing to catch.
"""

import logging

from openai import AsyncOpenAI, OpenAIError

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


class InferenceError(Exception):
    """Raised when the inference service cannot produce a result."""


class InferenceClient:
    """
    Thin async wrapper around the chat completions API.

    The underlying client is created on first use so that a missing API key
    surfaces as an ``InferenceError`` on the call instead of at startup.
    """

    def __init__(
        self, settings: Settings | None = None, client: AsyncOpenAI | None = None
    ) -> None:
        self._settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            try:
                self._client = AsyncOpenAI(
                    api_key=self._settings.openai_api_key or None,
                    base_url=self._settings.openai_base_url,
                )
            except OpenAIError as e:
                raise InferenceError(f"Could not create inference client: {e}") from e
        return self._client

    async def generate(
        self,
        system_instruction: str,
        user_text: str,
        max_output_tokens: int,
        temperature: float,
    ) -> str | None:
        """
        Generate free text for a user message.

        Returns:
            The model's text, or None if the service returned no content
        """
        return await self._complete(
            system_instruction,
            user_text,
            max_tokens=max_output_tokens,
            temperature=temperature,
        )

    async def generate_structured(
        self, system_instruction: str, user_text: str, max_output_tokens: int
    ) -> str | None:
        """
        Generate a JSON object payload for a user message.

        Returns:
            The raw JSON text, or None if the service returned no content
        """
        return await self._complete(
            system_instruction,
            user_text,
            max_tokens=max_output_tokens,
            response_format={"type": "json_object"},
        )

    async def _complete(
        self, system_instruction: str, user_text: str, **options
    ) -> str | None:
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self._settings.model,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": user_text},
                ],
                **options,
            )
        except OpenAIError as e:
            raise InferenceError(f"Inference request failed: {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise InferenceError("Malformed inference response") from e

        logger.debug("Inference completed with %d characters", len(content or ""))
        return content or None
