"""Fetch orchestrator -- turns query state into a displayed model list.

One orchestrator backs one list view.  ``refresh`` picks the backend call:

1. **Semantic**: semantic mode is on and the trimmed term is non-empty ->
   ``semantic_search`` with only the term.
2. **Keyword**: otherwise -> ``search_models`` with exactly the non-empty
   fields of the query.

The displayed list is replaced wholesale with the response; nothing is
merged.  Only the most recently started refresh may change the list
(last-request-wins).  There is no cancellation: a superseded request runs to
completion and its result, success or failure, is dropped on arrival.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from trackml.catalog.errors import CatalogError
from trackml.catalog.services.models import search_models, semantic_search

if TYPE_CHECKING:
    from trackml.catalog.models.api import ModelEntry
    from trackml.catalog.models.query import QueryState
    from trackml.catalog.transport import CatalogClient


class FetchOrchestrator:
    """Owns the displayed list and the list-level loading flag."""

    def __init__(self, client: CatalogClient) -> None:
        self._client = client
        self._entries: dict[int, ModelEntry] = {}
        self._generation = 0
        self.loading = False

    # -- Query -----------------------------------------------------------------

    @property
    def models(self) -> list[ModelEntry]:
        """Displayed entries in backend order."""
        return list(self._entries.values())

    def get(self, model_id: int) -> ModelEntry | None:
        return self._entries.get(model_id)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._entries

    # -- Refresh ---------------------------------------------------------------

    async def refresh(self, query: QueryState) -> list[ModelEntry] | None:
        """Fetch the list for *query* and display it.

        Returns the new list, or ``None`` when a newer refresh started while
        this one was in flight.  Raises ``CatalogError`` on failure of the
        latest request; the displayed list is left untouched in that case.
        """
        self._generation += 1
        generation = self._generation
        self.loading = True

        try:
            if query.uses_semantic_search:
                logger.debug("Fetch #{}: semantic search {!r}", generation, query.trimmed_term)
                result: list[ModelEntry] = list(await semantic_search(self._client, query.trimmed_term))
            else:
                params = query.search_params()
                logger.debug("Fetch #{}: keyword search {}", generation, params)
                result = await search_models(self._client, params)
        except CatalogError:
            if generation != self._generation:
                logger.debug("Fetch #{}: stale failure discarded (latest is #{})", generation, self._generation)
                return None
            self.loading = False
            raise

        if generation != self._generation:
            logger.debug("Fetch #{}: stale result discarded (latest is #{})", generation, self._generation)
            return None

        self._entries = {entry.id: entry for entry in result}
        self.loading = False
        logger.debug("Fetch #{}: displaying {} models", generation, len(self._entries))
        return self.models
