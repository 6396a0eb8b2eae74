"""Session bootstrap.

Login and registration happen in the web UI; the client only verifies a
token it was given and learns which user it belongs to.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger
from pydantic import TypeAdapter

from trackml.catalog.models.api import AuthResponse, User

if TYPE_CHECKING:
    from trackml.catalog.transport import CatalogClient

_AUTH = TypeAdapter(AuthResponse)


async def restore_session(client: CatalogClient, token: str) -> User:
    """Install *token* in the client's session and load the current user.

    Raises ``AuthorizationError`` (and leaves the session cleared) when the
    backend rejects the token.
    """
    client.session.set(token)
    response = await client.get_json("/auth/verify-token", _AUTH)
    client.session.set(response.token or token, response.user)
    logger.info("Session restored for user {}", response.user.id)
    return response.user


def logout(client: CatalogClient) -> None:
    client.session.clear()
