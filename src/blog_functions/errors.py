"""Error taxonomy shared by both functions.

Every error carries the HTTP status it should be reported with. The
application-level exception handlers in ``main.py`` turn these into response
envelopes.
"""


class FunctionError(Exception):
    """Base error for the summary and search functions."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# ---------------------------------------------------------------------------
# Client-caused errors (never retried)
# ---------------------------------------------------------------------------

class ValidationError(FunctionError):
    """Raised when a request fails validation."""

    status_code = 400


class MissingFieldError(ValidationError):
    pass


class TypeMismatchError(ValidationError):
    pass


class ContentTooLargeError(ValidationError):
    pass


class InvalidParameterError(ValidationError):
    """Raised when a search parameter is invalid; ``field`` names it."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class InvalidJsonError(FunctionError):
    """Raised when a request body is not parsable JSON."""

    status_code = 400


# ---------------------------------------------------------------------------
# Upstream errors
# ---------------------------------------------------------------------------

class UpstreamError(FunctionError):
    """Raised when an external service call fails."""


class UpstreamRateLimitedError(UpstreamError):
    status_code = 429


class UpstreamEmptyResultError(UpstreamError):
    pass


class UpstreamUnavailableError(UpstreamError):
    pass
