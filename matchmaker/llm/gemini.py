"""Google Gemini provider (google-genai SDK)."""

import logging
from typing import Any

from matchmaker.llm.base import DEFAULT_MAX_TOKENS, LLMProvider

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """LLM provider using the Gemini API."""

    @property
    def provider_id(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return "gemini-2.5-flash"

    @property
    def env_var(self) -> str | None:
        return "GOOGLE_API_KEY"

    def complete(
        self,
        prompt: str,
        *,
        system: str,
        model: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_output: bool = False,
    ) -> str:
        api_key = self.api_key()
        try:
            from google import genai
            from google.genai import types as genai_types
        except ImportError:
            msg = (
                "google-genai is required for this provider. "
                "Install with: pip install 'matchmaker[gemini]'"
            )
            raise ImportError(msg) from None

        config: dict[str, Any] = {
            "system_instruction": system,
            "max_output_tokens": max_tokens,
        }
        if json_output:
            config["response_mime_type"] = "application/json"

        use_model = model or self.default_model
        logger.debug("gemini completion (%s, max_tokens=%d, json=%s)", use_model, max_tokens, json_output)
        response = genai.Client(api_key=api_key).models.generate_content(
            model=use_model,
            contents=prompt,
            config=genai_types.GenerateContentConfig(**config),
        )
        return response.text or ""
