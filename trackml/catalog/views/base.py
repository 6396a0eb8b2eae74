"""Callback types and helpers shared by the views."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable

from trackml.catalog.errors import AuthorizationError, CatalogError, InputValidationError, TransportError

Navigate = Callable[[str], None]
"""Receives a location such as ``/compare?models=3,5`` or ``/login``."""

Confirm = Callable[[str], bool | Awaitable[bool]]
"""Asks the user a yes/no question; may be sync or async."""


def no_navigation(location: str) -> None:
    """Default ``Navigate`` for views used without a router."""


def always_confirm(prompt: str) -> bool:
    return True


async def ask(confirm: Confirm, prompt: str) -> bool:
    answer = confirm(prompt)
    if inspect.isawaitable(answer):
        answer = await answer
    return bool(answer)


def flash_message(exc: CatalogError, fallback: str) -> str:
    """Render one user-facing message for a failed action.

    Validation and authorization errors carry their own wording; transport
    errors are prefixed with what the user was trying to do.
    """
    if isinstance(exc, (InputValidationError, AuthorizationError)):
        return str(exc)
    if isinstance(exc, TransportError) and exc.detail:
        return f"{fallback}: {exc.detail}"
    return fallback
