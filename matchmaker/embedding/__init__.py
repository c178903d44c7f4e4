"""Embedding provider registry with lazy loading.

Usage:
    from matchmaker.embedding import get_embedder

    embedder = get_embedder("openai")
    vector = embedder.embed(composite_text)
"""

import importlib

from matchmaker.embedding.base import EmbeddingProvider

__all__ = ["EmbeddingProvider", "available_embedders", "get_embedder"]

_REGISTRY: dict[str, tuple[str, str]] = {
    "hashing": ("matchmaker.embedding.hashing", "HashingEmbedder"),
    "ollama": ("matchmaker.embedding.ollama", "OllamaEmbedder"),
    "openai": ("matchmaker.embedding.openai", "OpenAIEmbedder"),
}


def get_embedder(name: str) -> EmbeddingProvider:
    """Instantiate and return an embedding provider by name.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown embedding provider '{name}'. Available: {valid}"
        raise ValueError(msg)

    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls()  # type: ignore[no-any-return]


def available_embedders() -> list[str]:
    """Return sorted list of registered embedding provider names."""
    return sorted(_REGISTRY)
