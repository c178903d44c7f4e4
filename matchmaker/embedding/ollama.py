"""Ollama local embedding provider (OpenAI-compatible API)."""

import logging

from matchmaker.embedding.base import EmbeddingProvider
from matchmaker.llm.ollama import ollama_base_url

logger = logging.getLogger(__name__)


class OllamaEmbedder(EmbeddingProvider):
    """Embeddings from a local Ollama instance."""

    @property
    def provider_id(self) -> str:
        return "ollama"

    @property
    def default_model(self) -> str:
        return "nomic-embed-text"

    @property
    def env_var(self) -> None:
        return None

    def embed(self, text: str, model: str | None = None) -> list[float]:
        try:
            import openai
        except ImportError:
            msg = (
                "openai is required for Ollama (OpenAI-compatible API). "
                "Install with: pip install 'matchmaker[openai]'"
            )
            raise ImportError(msg) from None

        client = openai.OpenAI(base_url=ollama_base_url(), api_key="ollama")
        use_model = model or self.default_model

        logger.debug("Embedding %d characters with Ollama (%s)", len(text), use_model)
        response = client.embeddings.create(model=use_model, input=text)
        return list(response.data[0].embedding)
