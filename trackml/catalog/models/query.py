"""List-view query state.

``QueryState`` is an immutable value object: every change produces a new
instance via ``replace``.  It lives only as long as the list view session.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from trackml.catalog.models.enums import ModelStatus, ModelType


@dataclass(frozen=True)
class QueryState:
    """Filter / search criteria of the model list."""

    term: str = ""
    model_type: ModelType | None = None
    status: ModelStatus | None = None
    tag: str | None = None
    workspace_id: int | None = None
    semantic: bool = False

    @property
    def trimmed_term(self) -> str:
        return self.term.strip()

    @property
    def uses_semantic_search(self) -> bool:
        """Semantic search applies only when it is enabled *and* there is a term."""
        return self.semantic and bool(self.trimmed_term)

    def search_params(self) -> dict[str, Any]:
        """Keyword search parameters: exactly the non-empty fields.

        Omitted fields impose no constraint on the backend; the ones present
        are combined with logical AND.
        """
        params: dict[str, Any] = {}
        if self.trimmed_term:
            params["q"] = self.trimmed_term
        if self.model_type:
            params["type"] = self.model_type.value
        if self.status:
            params["status"] = self.status.value
        if self.tag and self.tag.strip():
            params["tag"] = self.tag.strip()
        if self.workspace_id is not None:
            params["workspace_id"] = self.workspace_id
        return params

    def replace(self, **changes: Any) -> QueryState:
        return dataclasses.replace(self, **changes)
