"""API request / response schemas for the TrackML backend.

These schemas sit between HTTP and the views:

- **Entry** schemas validate what the backend returns.
- **Draft** / **Create** schemas carry user input and provide defaults.
- **Update** schemas allow partial updates via ``exclude_unset``.

All identifiers are integers.  Responses are plain JSON without an envelope.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trackml.catalog.models.enums import ModelStatus, ModelType


def _unique(values: list[str]) -> list[str]:
    """Drop blanks and duplicates, keeping the order of first appearance."""
    seen: dict[str, None] = {}
    for value in values:
        value = value.strip()
        if value:
            seen.setdefault(value, None)
    return list(seen)


def _coerce_date(value: Any) -> Any:
    # The backend stores a timestamp; only the day matters here.
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    if isinstance(value, datetime):
        return value.date()
    return value


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


class User(BaseModel):
    """Authenticated user as returned by ``/auth/verify-token``."""

    id: int
    username: str | None = None
    email: str | None = None
    is_active: bool = True
    created_at: datetime | None = None


class AuthResponse(BaseModel):
    token: str | None = None
    user: User


# ---------------------------------------------------------------------------
# Model entry
# ---------------------------------------------------------------------------


class _ModelFields(BaseModel):
    """Fields shared by entries, drafts and autofill results."""

    model_config = ConfigDict(protected_namespaces=())

    developer: str | None = None
    model_type: ModelType | None = None
    status: ModelStatus | None = None
    date_interacted: date | None = None
    tags: list[str] = Field(default_factory=list)
    notes: str | None = None
    source_links: list[str] = Field(default_factory=list)
    parameters: int | None = Field(default=None, ge=0)
    license: str | None = None
    version: str | None = None

    @field_validator("tags", "source_links", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("tags", "source_links")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return _unique(value)

    @field_validator("date_interacted", mode="before")
    @classmethod
    def _to_date(cls, value: Any) -> Any:
        return _coerce_date(value)


class ModelEntry(_ModelFields):
    """A catalogued model, as stored by the backend."""

    id: int
    name: str = Field(min_length=1)
    user_id: int | None = None
    workspace_id: int | None = None


class SemanticHit(ModelEntry):
    """A semantic search result: the entry plus the backend's relevance score."""

    similarity: float | None = None


class ModelDraft(_ModelFields):
    """Editable state of the "add model" form.

    ``name`` may be empty while the user is typing; it is checked when the
    draft is submitted, not when it is built.
    """

    name: str = ""
    workspace_id: int | None = None

    def to_payload(self) -> dict[str, Any]:
        """Request body for ``POST /models``."""
        return self.model_dump(mode="json", exclude_none=True)


class ModelUpdate(BaseModel):
    """Partial update -- only fields explicitly set by the caller are sent.

    Services use ``body.model_dump(exclude_unset=True)`` to extract only the
    provided fields.  ``user_id`` is not part of the schema; the backend
    derives ownership from the bearer token.
    """

    model_config = ConfigDict(protected_namespaces=())

    name: str | None = Field(default=None, min_length=1)
    developer: str | None = None
    model_type: ModelType | None = None
    status: ModelStatus | None = None
    date_interacted: date | None = None
    tags: list[str] | None = None
    notes: str | None = None
    source_links: list[str] | None = None
    parameters: int | None = Field(default=None, ge=0)
    license: str | None = None
    version: str | None = None
    workspace_id: int | None = None

    @field_validator("tags", "source_links")
    @classmethod
    def _dedupe(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else _unique(value)

    @field_validator("date_interacted", mode="before")
    @classmethod
    def _to_date(cls, value: Any) -> Any:
        return _coerce_date(value)

    def to_payload(self) -> dict[str, Any]:
        """Request body for ``PUT /models/{id}``."""
        return self.model_dump(mode="json", exclude_unset=True)


class AutofillResult(_ModelFields):
    """Partial entry returned by the autofill endpoint."""

    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    name: str | None = None


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------


class ModelInsights(BaseModel):
    """AI-generated analysis of one model, in three sections."""

    technical_analysis: str
    use_cases: str
    recommendations: str

    def sections(self) -> list[tuple[str, str]]:
        """Non-empty ``(heading, text)`` pairs in display order."""
        pairs = [
            ("Technical analysis", self.technical_analysis),
            ("Use cases", self.use_cases),
            ("Recommendations", self.recommendations),
        ]
        return [(heading, text.strip()) for heading, text in pairs if text.strip()]


class CompareRequest(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_ids: list[int] = Field(min_length=2)
    prompt: str | None = None


class ComparativeAnalysis(BaseModel):
    comparative_analysis: str


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------


class WorkspaceEntry(BaseModel):
    """A named grouping of model entries.  One per user is the default."""

    id: int
    name: str = Field(min_length=1)
    description: str | None = None
    created_at: datetime | None = None
    is_default: bool = False
    user_id: int | None = None
    models: list[ModelEntry] = Field(default_factory=list)

    @field_validator("models", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value


class WorkspaceCreate(BaseModel):
    """Input for creating a new workspace."""

    name: str = Field(min_length=1)
    description: str | None = None


class WorkspaceUpdate(BaseModel):
    """Partial workspace update."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None


class MoveModelRequest(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: int
    source_workspace_id: int
    target_workspace_id: int
