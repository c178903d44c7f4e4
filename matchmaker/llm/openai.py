"""OpenAI chat completions provider.

Also the base for any server speaking the OpenAI chat API (see ollama.py).
"""

import logging
from typing import Any

from matchmaker.llm.base import DEFAULT_MAX_TOKENS, LLMProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """LLM provider using the OpenAI chat completions API."""

    install_hint = "openai is required for this provider. Install with: pip install 'matchmaker[openai]'"

    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o-mini"

    @property
    def env_var(self) -> str | None:
        return "OPENAI_API_KEY"

    def _client(self) -> Any:
        api_key = self.api_key()
        try:
            import openai
        except ImportError:
            raise ImportError(self.install_hint) from None
        return openai.OpenAI(api_key=api_key)

    def complete(
        self,
        prompt: str,
        *,
        system: str,
        model: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_output: bool = False,
    ) -> str:
        client = self._client()
        request: dict[str, Any] = {
            "model": model or self.default_model,
            "max_tokens": max_tokens,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        }
        if json_output:
            request["response_format"] = {"type": "json_object"}

        logger.debug(
            "%s completion (%s, max_tokens=%d, json=%s)",
            self.provider_id, request["model"], max_tokens, json_output,
        )
        response = client.chat.completions.create(**request)
        return response.choices[0].message.content or ""
