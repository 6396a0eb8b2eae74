"""Query state holder for the model list."""

from __future__ import annotations

from loguru import logger

from trackml.catalog.models.enums import ModelStatus, ModelType
from trackml.catalog.models.query import QueryState


class QueryStateHolder:
    """Owns the current ``QueryState`` and exposes one setter per field.

    Setters only replace the state; they never fetch.  While semantic mode is
    on, the type / status / tag filters are disabled: their setters are
    ignored and the previously chosen values are kept for when semantic mode
    is switched off again.
    """

    def __init__(self, initial: QueryState | None = None) -> None:
        self._state = initial or QueryState()

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def filters_enabled(self) -> bool:
        return not self._state.semantic

    def set_term(self, term: str) -> QueryState:
        self._state = self._state.replace(term=term)
        return self._state

    def set_model_type(self, model_type: ModelType | None) -> QueryState:
        return self._set_filter("model_type", model_type)

    def set_status(self, status: ModelStatus | None) -> QueryState:
        return self._set_filter("status", status)

    def set_tag(self, tag: str | None) -> QueryState:
        return self._set_filter("tag", tag or None)

    def set_workspace(self, workspace_id: int | None) -> QueryState:
        self._state = self._state.replace(workspace_id=workspace_id)
        return self._state

    def set_semantic(self, semantic: bool) -> QueryState:
        self._state = self._state.replace(semantic=semantic)
        return self._state

    def reset(self) -> QueryState:
        self._state = QueryState()
        return self._state

    def _set_filter(self, name: str, value: object) -> QueryState:
        if not self.filters_enabled:
            logger.debug("Query: ignoring {}={!r} while semantic search is on", name, value)
            return self._state
        self._state = self._state.replace(**{name: value})
        return self._state
