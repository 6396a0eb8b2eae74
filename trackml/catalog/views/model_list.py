"""Model list view session.

Composes the four cooperating parts of the list page:

- ``QueryStateHolder`` -- search term, filters, semantic flag
- ``FetchOrchestrator`` -- the displayed list, last-request-wins
- ``SelectionTracker`` -- ids picked for comparison
- ``MutationCoordinator`` -- create / update / delete / move + refresh

The view is the point where user actions are handled: every public action
catches ``CatalogError`` and turns it into a single flash message in
``error``, leaving earlier state untouched.  Fetches are triggered by
explicit actions only (search submit, filter change, semantic toggle), never
per keystroke: ``set_term`` just records the text.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from trackml.catalog.context import LOGIN_LOCATION
from trackml.catalog.errors import CatalogError, InputValidationError
from trackml.catalog.services.models import list_models
from trackml.catalog.views.base import Confirm, Navigate, always_confirm, flash_message, no_navigation
from trackml.catalog.views.create_flow import CreateFlow
from trackml.catalog.views.fetch import FetchOrchestrator
from trackml.catalog.views.mutations import MutationCoordinator
from trackml.catalog.views.query import QueryStateHolder
from trackml.catalog.views.selection import SelectionTracker

if TYPE_CHECKING:
    from trackml.catalog.models.api import ModelEntry, ModelUpdate
    from trackml.catalog.models.enums import ModelStatus, ModelType
    from trackml.catalog.models.query import QueryState
    from trackml.catalog.transport import CatalogClient

_UNSET: object = object()


@dataclass(frozen=True)
class ModelRow:
    """One rendered list row: the entry joined with its selection flag."""

    entry: ModelEntry
    selected: bool


class ModelListView:
    """State of one model list page, from open until navigation away."""

    def __init__(
        self,
        client: CatalogClient,
        *,
        navigate: Navigate = no_navigation,
        confirm: Confirm = always_confirm,
    ) -> None:
        self._client = client
        self._navigate = navigate
        self.query = QueryStateHolder()
        self.fetcher = FetchOrchestrator(client)
        self.selection = SelectionTracker()
        self.mutations = MutationCoordinator(client, refresh=self.refresh, confirm=confirm)
        self.create_flow = CreateFlow(client, self.mutations)
        self.tags: list[str] = []
        self.error: str | None = None

        client.session.on_clear(lambda: self._navigate(LOGIN_LOCATION))

    # -- Derived state ---------------------------------------------------------

    @property
    def models(self) -> list[ModelEntry]:
        return self.fetcher.models

    @property
    def loading(self) -> bool:
        return self.fetcher.loading

    def rows(self) -> list[ModelRow]:
        """Join the displayed list with the selection, at render time."""
        return [ModelRow(entry, entry.id in self.selection) for entry in self.fetcher.models]

    def dismiss_error(self) -> None:
        self.error = None

    def _fail(self, exc: CatalogError, fallback: str) -> None:
        self.error = flash_message(exc, fallback)
        logger.info("List view: {}", self.error)

    # -- Loading ---------------------------------------------------------------

    async def open(self) -> None:
        """Initial load: the list for the empty query plus the tag choices."""
        await asyncio.gather(self.refresh(), self.load_tags())

    async def refresh(self) -> bool:
        """Re-run the fetch with the current query state.

        Returns ``True`` when the displayed list was replaced.
        """
        try:
            result = await self.fetcher.refresh(self.query.state)
        except CatalogError as exc:
            self._fail(exc, "Failed to fetch models")
            return False
        return result is not None

    async def load_tags(self) -> None:
        """Collect the distinct tags of all the user's models, sorted."""
        try:
            entries = await list_models(self._client)
        except CatalogError as exc:
            self._fail(exc, "Failed to fetch tags")
            return
        self.tags = sorted({tag for entry in entries for tag in entry.tags})

    # -- Query actions ---------------------------------------------------------

    def set_term(self, term: str) -> QueryState:
        """Record the search box text without fetching."""
        return self.query.set_term(term)

    async def submit_search(self, term: str | None = None) -> bool:
        """Return key or search button: fetch with the current term."""
        if term is not None:
            self.query.set_term(term)
        return await self.refresh()

    async def set_semantic(self, semantic: bool) -> bool:
        """Toggle semantic mode; switching it on with a term fetches at once."""
        state = self.query.set_semantic(semantic)
        if semantic and state.trimmed_term:
            return await self.refresh()
        return False

    async def change_filters(
        self,
        *,
        model_type: ModelType | None | object = _UNSET,
        status: ModelStatus | None | object = _UNSET,
        tag: str | None | object = _UNSET,
        workspace_id: int | None | object = _UNSET,
    ) -> bool:
        """Apply one or more filter changes, then fetch once."""
        if model_type is not _UNSET:
            self.query.set_model_type(model_type)  # type: ignore[arg-type]
        if status is not _UNSET:
            self.query.set_status(status)  # type: ignore[arg-type]
        if tag is not _UNSET:
            self.query.set_tag(tag)  # type: ignore[arg-type]
        if workspace_id is not _UNSET:
            self.query.set_workspace(workspace_id)  # type: ignore[arg-type]
        return await self.refresh()

    # -- Selection -------------------------------------------------------------

    def toggle_selection(self, model_id: int, selected: bool) -> None:
        self.selection.toggle(model_id, selected)

    def compare(self) -> str | None:
        """Navigate to the comparison view for the selected models.

        With fewer than two selected, shows an error and does not navigate.
        """
        try:
            location = self.selection.compare_location()
        except InputValidationError as exc:
            self._fail(exc, "Cannot compare")
            return None
        self._navigate(location)
        return location

    # -- Mutations -------------------------------------------------------------

    async def update(self, model_id: int, patch: ModelUpdate) -> ModelEntry | None:
        try:
            return await self.mutations.update(model_id, patch)
        except CatalogError as exc:
            self._fail(exc, "Failed to update model")
            return None

    async def delete(self, model_id: int) -> bool:
        try:
            return await self.mutations.delete(model_id)
        except CatalogError as exc:
            self._fail(exc, "Failed to delete model")
            return False

    async def move(self, model_id: int, from_workspace: int | None, to_workspace: int) -> bool:
        try:
            await self.mutations.move(model_id, from_workspace, to_workspace)
        except CatalogError as exc:
            self._fail(exc, "Failed to move model")
            return False
        return True
