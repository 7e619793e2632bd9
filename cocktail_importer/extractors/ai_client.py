"""
AI completion client.

The parser treats model output as opaque text; this module is the only
place that talks to the model. Anything with a ``complete`` method can
stand in for the Gemini client, which keeps the import service testable.
"""
from __future__ import annotations

import logging
from typing import Protocol

import google.generativeai as genai

from ..const import DEFAULT_MODEL
from ..exceptions import AICompletionError

_LOGGER = logging.getLogger(__name__)


class CompletionClient(Protocol):
    """Anything that turns a system prompt plus content into a text completion."""

    def complete(self, system_prompt: str, content: str) -> str:
        ...


class GeminiCompletionClient:
    """Text completions from Google's Gemini models."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL) -> None:
        """Initialize the client.

        Args:
            api_key: API key for the Gemini API
            model: The model to use for completions

        Raises:
            ValueError: If API key is empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key cannot be empty")

        self.api_key = api_key
        self.model = model
        genai.configure(api_key=api_key)
        _LOGGER.debug("Initialized GeminiCompletionClient with model %s", model)

    def complete(self, system_prompt: str, content: str) -> str:
        """Ask the model to complete ``content`` under ``system_prompt``.

        Returns:
            The raw completion text

        Raises:
            AICompletionError: If the model returns no usable text
        """
        _LOGGER.info("Requesting completion from %s for %d characters of content",
                     self.model, len(content))

        model = genai.GenerativeModel(
            model_name=self.model,
            system_instruction=system_prompt,
        )
        try:
            response = model.generate_content(
                content,
                generation_config={"temperature": 0},
            )
        except Exception as e:
            _LOGGER.error("Error during completion with %s: %s",
                          self.model, str(e), exc_info=True)
            raise

        try:
            text = response.text
        except ValueError as e:
            # Raised by the SDK when the candidate was blocked or is empty
            raise AICompletionError(
                f"Model {self.model} returned no text: {e}") from e

        if not text or not text.strip():
            raise AICompletionError(f"Model {self.model} returned an empty completion")

        _LOGGER.debug("Received %d characters from %s", len(text), self.model)
        return text


def list_models(api_key: str) -> list[str]:
    """Return the names of models that support text generation."""
    genai.configure(api_key=api_key)
    return [
        model.name
        for model in genai.list_models()
        if "generateContent" in model.supported_generation_methods
    ]
