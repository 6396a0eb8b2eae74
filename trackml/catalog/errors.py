"""Error taxonomy for the catalog client.

Three kinds of failure reach a view:

- ``InputValidationError`` -- raised before any network call (missing name,
  no authenticated user, too few models selected).
- ``TransportError`` -- any failed request: connection problems, timeouts,
  non-2xx responses, malformed response bodies.
- ``AuthorizationError`` -- a 401 from the backend.  By the time it is raised
  the session has already been cleared.

Views translate all of them into a single flash message; nothing here is
retried.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for every error surfaced to a catalog view."""


class InputValidationError(CatalogError, ValueError):
    """Raised when user input is rejected locally, before any request."""


class TransportError(CatalogError):
    """Raised when a backend call fails.

    ``detail`` holds the server-provided message verbatim when the response
    carried one, so it can be shown to the user unchanged.
    """

    def __init__(self, message: str, *, status_code: int | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail

    @property
    def user_message(self) -> str:
        return self.detail or str(self)


class AuthorizationError(TransportError):
    """Raised on a 401 response, after the session has been torn down."""


class NotFoundError(TransportError, LookupError):
    """Raised on a 404 response."""
