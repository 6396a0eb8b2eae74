"""Authenticated session context.

Holds the bearer token and the current user for one client process.  The
context is passed explicitly to ``CatalogClient`` instead of living in a
module global, so tests and embedding applications can run several
independent sessions side by side.

A single subscriber may be registered with ``on_clear``; it fires whenever
the session is cleared (explicit logout or a 401 from the backend) and is
where the presentation layer navigates back to its login entry point.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger

from trackml.catalog.models.api import User

LOGIN_LOCATION = "/login"


@dataclass
class SessionContext:
    """Process-wide authentication state, owned by whoever builds the client."""

    token: str | None = None
    user: User | None = None

    _on_clear: Callable[[], None] | None = field(default=None, repr=False)

    # -- Mutation --------------------------------------------------------------

    def set(self, token: str, user: User | None = None) -> None:
        """Store a new token (and optionally the user it belongs to)."""
        self.token = token
        if user is not None:
            self.user = user
        logger.debug("Session: token set (user={})", user.id if user else None)

    def clear(self) -> None:
        """Drop token and user, then notify the subscriber.

        Clearing an already empty session still notifies, so a 401 on an
        anonymous request also lands on the login entry point.
        """
        self.token = None
        self.user = None
        logger.info("Session: cleared")
        if self._on_clear is not None:
            self._on_clear()

    def on_clear(self, callback: Callable[[], None] | None) -> None:
        """Register the single clear subscriber, replacing any previous one."""
        self._on_clear = callback

    # -- Query -----------------------------------------------------------------

    def read(self) -> str | None:
        return self.token

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def user_id(self) -> int | None:
        return self.user.id if self.user is not None else None
