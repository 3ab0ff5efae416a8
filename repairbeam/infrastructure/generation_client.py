"""Text-generation client for catalog lists.

Wraps the Gemini API behind a small interface that takes a system
instruction and a user prompt and returns the parsed JSON object the
model produced. Every failure mode (transport, provider, timeout,
unparseable output) surfaces as a single ``GenerationError``.
"""

import asyncio
import json
from typing import Any, Protocol

import google.generativeai as genai
import structlog

logger = structlog.get_logger()


class GenerationError(Exception):
    """Error from a generation provider call."""

    def __init__(self, message: str, purpose: str | None = None) -> None:
        self.message = message
        self.purpose = purpose
        prefix = f"[{purpose}] " if purpose else ""
        super().__init__(f"{prefix}{message}")


class TextGenerator(Protocol):
    """Anything that can turn a prompt pair into a JSON object."""

    async def generate_json(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        """Run one generation request and return the parsed JSON object."""
        ...


def parse_json_object(text: str | None) -> dict[str, Any]:
    """Parse provider output into a JSON object.

    Tolerates a surrounding Markdown code fence, which some models emit
    even when asked for raw JSON.

    Args:
        text: Raw response text.

    Returns:
        Parsed JSON object.

    Raises:
        GenerationError: If the text is empty, not JSON, or not an object.
    """
    if not text or not text.strip():
        raise GenerationError("Empty response from provider")

    body = text.strip()
    if body.startswith("```"):
        body = body.split("\n", 1)[1] if "\n" in body else ""
        if body.rstrip().endswith("```"):
            body = body.rstrip()[:-3]

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Response is not valid JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise GenerationError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    return data


class GeminiGenerationClient:
    """Generation client backed by Google Gemini.

    Example usage:
        client = GeminiGenerationClient(api_key="...", model_name="gemini-1.5-flash")
        data = await client.generate_json(
            system_prompt="You are an expert in device brands.",
            user_prompt='Respond with {"brands": [...]}',
        )
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-1.5-flash",
        timeout: float = 60.0,
    ) -> None:
        """Initialize Gemini client.

        Args:
            api_key: Gemini API key.
            model_name: Gemini model to call.
            timeout: Upper bound in seconds for a single call.
        """
        self.model_name = model_name
        self.timeout = timeout
        genai.configure(api_key=api_key)

    def _get_model(self, system_prompt: str) -> "genai.GenerativeModel":
        """Build a model bound to a system instruction and JSON output."""
        return genai.GenerativeModel(
            model_name=self.model_name,
            system_instruction=system_prompt,
            generation_config={"response_mime_type": "application/json"},
        )

    async def generate_json(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        """Run one generation request and return the parsed JSON object.

        Args:
            system_prompt: System instruction.
            user_prompt: User message.

        Returns:
            Parsed JSON object.

        Raises:
            GenerationError: On timeout, provider error or unusable output.
        """
        model = self._get_model(system_prompt)

        try:
            response = await asyncio.wait_for(
                model.generate_content_async(user_prompt),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise GenerationError(
                f"Provider call timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            # The SDK raises a mix of google.api_core, grpc and transport errors
            raise GenerationError(f"Provider call failed: {e}") from e

        try:
            text = response.text
        except ValueError as e:
            # Raised when the candidate was blocked or has no text parts
            raise GenerationError(f"Provider returned no text: {e}") from e

        logger.debug(
            "Generation response received",
            model=self.model_name,
            response_chars=len(text or ""),
        )
        return parse_json_object(text)
