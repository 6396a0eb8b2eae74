"""Fixtures wiring ``CatalogClient`` to the in-process fake backend."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from fake_backend import FakeBackend
from httpx import ASGITransport, AsyncClient

from trackml.catalog.context import SessionContext
from trackml.catalog.models.api import User
from trackml.catalog.transport import CatalogClient

BASE_URL = "http://test/api/v1"


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def session(backend: FakeBackend) -> SessionContext:
    """An authenticated session for the backend's user."""
    return SessionContext(token=backend.token, user=User(id=backend.user["id"], username="ada"))


@pytest.fixture
async def client(backend: FakeBackend, session: SessionContext) -> AsyncIterator[CatalogClient]:
    """Catalog client whose HTTP traffic goes straight to ``backend.app``.

    The lifespan does not run under ``ASGITransport``; the fake backend has
    none.
    """
    http = AsyncClient(transport=ASGITransport(app=backend.app), base_url=BASE_URL)
    async with CatalogClient(session, http=http) as c:
        yield c


@pytest.fixture
def navigations() -> list[str]:
    return []
