# wildbook/errors.py
"""Exception hierarchy for the Wildbook client."""


class WildbookError(Exception):
    """Base class for all errors raised by this package."""


class QueryError(WildbookError, ValueError):
    """A query builder or combinator received malformed input."""


class ConfigurationError(WildbookError):
    """Required configuration (URL or credentials) is missing."""


class NotAuthenticatedError(WildbookError):
    """An authenticated operation was called before login()."""

    def __init__(self, message: str = "Not authenticated. Call login() first.") -> None:
        super().__init__(message)


class APIError(WildbookError):
    """The server answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(APIError):
    """Login failed or the session is no longer valid (HTTP 401)."""


class ForbiddenError(APIError):
    """HTTP 403."""


class NotFoundError(APIError):
    """HTTP 404."""


class BadRequestError(APIError):
    """HTTP 400, with the per-field messages reported by the server."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message, status_code=400)
        self.errors = errors or []
