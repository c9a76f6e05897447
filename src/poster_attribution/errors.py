"""Exception hierarchy for entity resolution and attribution."""


class AttributionError(Exception):
    """Base exception for all poster attribution errors."""


class ValidationError(AttributionError):
    """Raised when a candidate name or input is empty or invalid."""


class ConflictError(AttributionError):
    """Raised when an insert loses a uniqueness race on the canonical name.

    Recoverable: the caller re-resolves, since the entity now exists.
    """


class EnrichmentUnavailable(AttributionError):
    """Raised when the enrichment source cannot provide data.

    Covers network failures, missing pages, and pages with nothing to parse.
    Always non-fatal for attribution.
    """


class StorageError(AttributionError):
    """Raised when the underlying persistence layer fails."""


class NotFoundError(AttributionError):
    """Raised when a requested entity or item does not exist."""
