"""Ollama local LLM provider over its OpenAI-compatible endpoint."""

import os
from typing import Any

from matchmaker.llm.openai import OpenAIProvider

OLLAMA_BASE_URL = "http://localhost:11434/v1"


def ollama_base_url() -> str:
    return os.environ.get("OLLAMA_BASE_URL", OLLAMA_BASE_URL)


class OllamaProvider(OpenAIProvider):
    """Local Ollama models; no API key. OLLAMA_BASE_URL overrides the endpoint."""

    install_hint = (
        "openai is required for Ollama (OpenAI-compatible API). "
        "Install with: pip install 'matchmaker[openai]'"
    )

    @property
    def provider_id(self) -> str:
        return "ollama"

    @property
    def default_model(self) -> str:
        return "llama3"

    @property
    def env_var(self) -> str | None:
        return None

    def _client(self) -> Any:
        try:
            import openai
        except ImportError:
            raise ImportError(self.install_hint) from None
        return openai.OpenAI(base_url=ollama_base_url(), api_key="ollama")
