"""Abstract base class for LLM providers and shared logic.

The service makes three kinds of call, all short: a one-line match
explanation, a profile headline, and a JSON object of skill tags. Every
call names its own system prompt and token budget.
"""

import json
import os
import re
from abc import ABC, abstractmethod
from typing import Any

DEFAULT_MAX_TOKENS = 256


def parse_json_response(raw_text: str) -> dict[str, Any]:
    """Parse an LLM response text into a JSON object.

    Handles markdown-wrapped JSON (```json ... ```) and plain JSON.
    """
    cleaned = re.sub(r"^```(?:json)?\s*\n?", "", raw_text.strip())
    cleaned = re.sub(r"\n?```\s*$", "", cleaned)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        msg = f"Failed to parse LLM response as JSON: {e}"
        raise ValueError(msg) from e

    if not isinstance(data, dict):
        msg = f"Expected a JSON object from LLM, got {type(data).__name__}"
        raise ValueError(msg)
    return data


class LLMProvider(ABC):
    """Base class that every LLM provider must implement."""

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'anthropic')."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""

    def api_key(self) -> str | None:
        """Read the API key named by env_var.

        Raises:
            ValueError: If the provider needs a key and it is not set.
        """
        if self.env_var is None:
            return None
        key = os.environ.get(self.env_var)
        if not key:
            msg = f"{self.env_var} environment variable is required"
            raise ValueError(msg)
        return key

    @abstractmethod
    def complete(
        self,
        prompt: str,
        *,
        system: str,
        model: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_output: bool = False,
    ) -> str:
        """Send one user message and return the raw response text.

        Args:
            prompt: The user message.
            system: System prompt for this call.
            model: Override the provider's default model. None uses default.
            max_tokens: Upper bound on the completion length.
            json_output: Ask the model for a single JSON object, using the
                provider's native JSON mode where it has one.
        """
