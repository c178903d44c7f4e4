"""Deterministic, offline embedding based on feature hashing.

Each token is hashed to one dimension with a +/-1 sign, then the vector is
normalised to unit length. Texts sharing words end up close in cosine
space. Good enough for local development and tests; no API key needed.
"""

import hashlib
import logging
import math
import re

from matchmaker.embedding.base import EmbeddingProvider

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"[a-z0-9]+")

DEFAULT_DIMENSIONS = 512


def hash_embed(text: str, dim: int = DEFAULT_DIMENSIONS) -> list[float]:
    """Embed text into a fixed-size unit vector."""
    vector = [0.0] * dim
    for token in _TOKEN_RE.findall(text.lower()):
        h = hashlib.md5(token.encode("utf-8")).hexdigest()
        index = int(h[:8], 16) % dim
        sign = 1.0 if int(h[8], 16) % 2 == 0 else -1.0
        vector[index] += sign
    norm = math.sqrt(sum(v * v for v in vector)) or 1.0
    return [v / norm for v in vector]


class HashingEmbedder(EmbeddingProvider):
    """Feature-hashing embedder. The model name selects the dimension."""

    @property
    def provider_id(self) -> str:
        return "hashing"

    @property
    def default_model(self) -> str:
        return f"hash-{DEFAULT_DIMENSIONS}"

    @property
    def env_var(self) -> None:
        return None

    def embed(self, text: str, model: str | None = None) -> list[float]:
        use_model = model or self.default_model
        match = re.fullmatch(r"hash-(\d+)", use_model)
        if match is None or int(match.group(1)) < 1:
            msg = f"Invalid hashing model '{use_model}', expected 'hash-<dimensions>'"
            raise ValueError(msg)
        return hash_embed(text, int(match.group(1)))
