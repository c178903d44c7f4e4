"""Abstract base class for embedding providers."""

from abc import ABC, abstractmethod

from matchmaker.core.errors import EmbeddingError


class EmbeddingProvider(ABC):
    """Base class that every embedding provider must implement.

    Providers are synchronous; the ranker runs them in a worker thread.
    Vectors from one provider/model pair always have the same length.
    """

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'openai')."""

    @abstractmethod
    def embed(self, text: str, model: str | None = None) -> list[float]:
        """Convert text into a fixed-length vector.

        Args:
            text: Composite text of a job or freelancer.
            model: Override the provider's default model. None uses default.

        Returns:
            The embedding as a list of floats.
        """

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""


def embed_text(provider: EmbeddingProvider, text: str, model: str | None = None) -> list[float]:
    """Embed text, turning any provider failure into EmbeddingError."""
    try:
        embedding = provider.embed(text, model)
    except Exception as e:
        msg = f"Embedding provider '{provider.provider_id}' failed: {e}"
        raise EmbeddingError(msg) from e
    if not embedding:
        msg = f"Embedding provider '{provider.provider_id}' returned an empty vector"
        raise EmbeddingError(msg)
    return embedding
