"""
Test doubles for the inference service.
"""

from mindwell_companion.inference import InferenceError


class FakeInference:
    """
    Stand-in for InferenceClient that returns canned payloads.

    Every call is recorded so tests can assert which stages ran.
    """

    def __init__(
        self,
        text: str | None = "That sounds hard. I'm here with you.",
        sentiment_payload: str | None = '{"rating": 4, "confidence": 0.8}',
        fail_generate: bool = False,
        fail_structured: bool = False,
    ) -> None:
        self.text = text
        self.sentiment_payload = sentiment_payload
        self.fail_generate = fail_generate
        self.fail_structured = fail_structured
        self.generate_calls: list[dict] = []
        self.structured_calls: list[dict] = []

    async def generate(
        self,
        system_instruction: str,
        user_text: str,
        max_output_tokens: int,
        temperature: float,
    ) -> str | None:
        self.generate_calls.append(
            {
                "system_instruction": system_instruction,
                "user_text": user_text,
                "max_output_tokens": max_output_tokens,
                "temperature": temperature,
            }
        )
        if self.fail_generate:
            raise InferenceError("connection refused")
        return self.text

    async def generate_structured(
        self, system_instruction: str, user_text: str, max_output_tokens: int
    ) -> str | None:
        self.structured_calls.append(
            {
                "system_instruction": system_instruction,
                "user_text": user_text,
                "max_output_tokens": max_output_tokens,
            }
        )
        if self.fail_structured:
            raise InferenceError("service unavailable")
        return self.sentiment_payload
