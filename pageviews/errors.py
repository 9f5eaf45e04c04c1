"""
Error taxonomy for the badge pipeline.

Every failure the pipeline can surface is a subclass of :class:`BadgeError`
carrying the HTTP status it maps to.  The API layer turns these into
responses (see ``api/errors.py``); nothing in this package knows about
FastAPI.
"""
from __future__ import annotations


class BadgeError(Exception):
    """Base class for failures that end a badge request."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(BadgeError):
    """A request parameter is missing or unusable."""

    status_code = 405
    default_message = "invalid input"


class MissingParameter(InvalidInput):
    default_message = "page_path not available"


class MethodNotAllowed(BadgeError):
    status_code = 405
    default_message = "Method not allowed"


class AuthError(BadgeError):
    """No bearer token could be obtained for the analytics backend."""

    default_message = "generating Google auth token failed"


class UpstreamError(BadgeError):
    """The analytics backend answered with a non-success status."""

    def __init__(self, body: str, upstream_status: int | None = None) -> None:
        self.body = body
        self.upstream_status = upstream_status
        super().__init__(body)


class UnexpectedError(BadgeError):
    """Any other fault raised while building a badge."""
