# File: services/errors.py


class ResearchDigestError(Exception):
    """Base class for errors that map onto an `{error}` JSON response."""
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(ResearchDigestError):
    """A required request field is missing."""
    status_code = 400


class AuthError(ResearchDigestError):
    """Missing, malformed or rejected bearer token."""
    status_code = 401


class UpstreamSearchError(ResearchDigestError):
    """The bibliographic search API answered with a non-success status."""

    def __init__(self, message: str, upstream_status: int = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class UpstreamCompletionError(ResearchDigestError):
    """The completion endpoint answered with a non-success status (or not at all)."""

    def __init__(self, message: str, upstream_status: int = None, body: str = ""):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body


class InvalidCompletionResponse(ResearchDigestError):
    """The completion endpoint succeeded but the body has no usable choices."""
    pass


class SynthesisError(ResearchDigestError):
    """Cross-paper synthesis (overview or report) could not be produced."""
    pass


class SuggestionParseError(ResearchDigestError):
    """The model's refinement suggestion was not valid JSON."""
    pass


class PersistenceError(ResearchDigestError):
    """The record store failed to insert or return a record."""
    pass
