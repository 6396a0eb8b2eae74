"""Client configuration loaded from TRACKML_* environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackSettings(BaseSettings):
    """TrackML catalog client settings.

    All fields are read from environment variables with the ``TRACKML_``
    prefix.  For example, ``TRACKML_API_URL=https://trackml.lan/api/v1`` maps
    to ``api_url``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRACKML_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "WARNING"

    # -- Backend ---------------------------------------------------------------
    api_url: str = "http://localhost:5000/api/v1"
    """Base URL of the TrackML REST API, including the version prefix."""

    token: SecretStr | None = None
    """Bearer token for API access.  Obtained out of band (the web UI login)."""

    timeout_seconds: float = Field(default=30.0, gt=0)
    """Per-request timeout in seconds.  Also bounds autofill and comparison
    calls, which wait on the backend's language model."""

    user_agent: str = Field(default="trackml-client/0.1", min_length=1)

    # -- Helpers ---------------------------------------------------------------

    def resolve_token(self) -> str | None:
        """Return the configured token as plain text, or ``None``."""
        if self.token is None:
            return None
        return self.token.get_secret_value() or None


@lru_cache(maxsize=1)
def get_settings() -> TrackSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``get_settings.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return TrackSettings()
