"""Exception hierarchy for the matching service.

Three families reach the caller unchanged:
  - validation: bad input, raised before any external call
  - upstream: an embedding, search, record store or explanation call failed
  - not found: a referenced record does not exist
"""


class MatchmakerError(Exception):
    """Base class for every error raised by this package."""


class InvalidJobError(MatchmakerError, ValueError):
    """Job or profile input failed validation (e.g. empty description)."""


class UpstreamError(MatchmakerError):
    """An external collaborator failed."""


class EmbeddingError(UpstreamError):
    """The embedding provider failed."""


class VectorSearchError(UpstreamError):
    """The vector-similarity search failed."""


class RecordStoreError(UpstreamError):
    """Loading or saving a record failed, or a stored record is malformed."""


class ExplanationError(UpstreamError):
    """The explanation provider failed for at least one candidate."""


class ProviderTimeoutError(UpstreamError):
    """An external call did not finish within its configured timeout."""


class NotFoundError(MatchmakerError, LookupError):
    """A referenced record does not exist."""


class JobNotFoundError(NotFoundError):
    """The job request id is unknown."""


class MissingEmbeddingError(MatchmakerError):
    """The job request exists but has no stored embedding."""
