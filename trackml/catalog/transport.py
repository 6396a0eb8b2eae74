"""HTTP transport for the TrackML REST API.

``CatalogClient`` owns one ``httpx.AsyncClient`` and the ``SessionContext``.
Every request reads the token at send time, so a token set or cleared after
the client was built takes effect on the next call.

Failure mapping (see ``trackml.catalog.errors``):

- connection errors / timeouts -> ``TransportError`` (no status code)
- 401 -> session cleared, then ``AuthorizationError``
- 404 -> ``NotFoundError``
- any other non-2xx -> ``TransportError`` with the server's message
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from trackml.catalog.context import SessionContext
from trackml.catalog.errors import AuthorizationError, NotFoundError, TransportError
from trackml.catalog.settings import TrackSettings, get_settings

T = TypeVar("T")


def build_async_client(
    settings: TrackSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` with the configured base URL and timeout.

    *transport* is passed through unchanged; tests use it to mount an
    in-process ASGI app.
    """
    settings = settings or get_settings()
    return httpx.AsyncClient(
        base_url=settings.api_url.rstrip("/"),
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        transport=transport,
    )


def _error_detail(response: httpx.Response) -> str | None:
    """Best-effort extraction of the server's error message."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text or None
    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None


class CatalogClient:
    """Authenticated JSON client for the TrackML backend.

    Usable as an async context manager; ``aclose`` releases the connection
    pool.
    """

    def __init__(
        self,
        session: SessionContext,
        *,
        settings: TrackSettings | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.session = session
        self._http = http or build_async_client(settings)

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -- Requests --------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        token = self.session.read()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        data: Mapping[str, Any] | None = None,
        files: Any = None,
    ) -> httpx.Response:
        """Send one request and return the successful response.

        Raises a ``TransportError`` subclass on any failure.
        """
        logger.debug("API {} {} params={}", method, path, dict(params) if params else None)
        try:
            response = await self._http.request(
                method,
                path,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=self._headers(),
            )
        except httpx.TimeoutException as exc:
            logger.warning("API {} {} timed out", method, path)
            msg = f"Request timed out: {method} {path}"
            raise TransportError(msg) from exc
        except httpx.HTTPError as exc:
            logger.warning("API {} {} failed: {}", method, path, exc)
            msg = f"Could not reach the backend: {exc}"
            raise TransportError(msg) from exc

        if response.is_success:
            return response

        detail = _error_detail(response)
        status_code = response.status_code
        logger.warning("API {} {} -> {} ({})", method, path, status_code, detail)

        if status_code == httpx.codes.UNAUTHORIZED:
            self.session.clear()
            msg = "Session expired or invalid; please log in again."
            raise AuthorizationError(msg, status_code=status_code, detail=detail)
        if status_code == httpx.codes.NOT_FOUND:
            msg = f"Not found: {path}"
            raise NotFoundError(msg, status_code=status_code, detail=detail)
        msg = f"Backend returned {status_code} for {method} {path}"
        raise TransportError(msg, status_code=status_code, detail=detail)

    async def get_json(self, path: str, adapter: TypeAdapter[T], **kwargs: Any) -> T:
        response = await self.request("GET", path, **kwargs)
        return self.parse(response, adapter)

    async def send_json(self, method: str, path: str, adapter: TypeAdapter[T], **kwargs: Any) -> T:
        response = await self.request(method, path, **kwargs)
        return self.parse(response, adapter)

    @staticmethod
    def parse(response: httpx.Response, adapter: TypeAdapter[T]) -> T:
        """Validate a response body.  Malformed bodies become ``TransportError``."""
        try:
            return adapter.validate_json(response.content)
        except ValidationError as exc:
            logger.warning("Malformed response from {}: {}", response.request.url, exc)
            msg = "The backend returned an unexpected response."
            raise TransportError(msg, status_code=response.status_code) from exc
