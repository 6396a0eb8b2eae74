"""Model detail view: show, edit, delete, and per-model insights."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from trackml.catalog.errors import CatalogError
from trackml.catalog.models.api import ModelUpdate
from trackml.catalog.services.insights import get_insights
from trackml.catalog.services.models import delete_model, get_model, update_model
from trackml.catalog.views.base import Confirm, Navigate, always_confirm, ask, flash_message, no_navigation

if TYPE_CHECKING:
    from trackml.catalog.models.api import ModelEntry, ModelInsights
    from trackml.catalog.transport import CatalogClient

MODELS_LOCATION = "/models"


class ModelDetailView:
    """State of the detail page for one model.

    Edits accumulate in ``pending`` and are sent as one partial update on
    ``save``; the entry is then re-fetched rather than patched locally.
    """

    def __init__(
        self,
        client: CatalogClient,
        model_id: int,
        *,
        navigate: Navigate = no_navigation,
        confirm: Confirm = always_confirm,
    ) -> None:
        self._client = client
        self._navigate = navigate
        self._confirm = confirm
        self.model_id = model_id
        self.model: ModelEntry | None = None
        self.insights: ModelInsights | None = None
        self.editing = False
        self.pending: dict[str, Any] = {}
        self.loading = False
        self.error: str | None = None

    async def load(self) -> bool:
        self.loading = True
        try:
            self.model = await get_model(self._client, self.model_id)
        except CatalogError as exc:
            self.error = flash_message(exc, "Failed to fetch model details")
            return False
        finally:
            self.loading = False
        return True

    async def load_insights(self) -> bool:
        try:
            result = await get_insights(self._client, self.model_id)
        except CatalogError as exc:
            self.error = flash_message(exc, "Failed to load insights")
            return False
        self.insights = result
        return True

    # -- Editing ---------------------------------------------------------------

    def start_edit(self) -> None:
        self.editing = True
        self.pending = {}

    def edit(self, **fields: Any) -> None:
        self.pending.update(fields)

    def cancel_edit(self) -> None:
        self.editing = False
        self.pending = {}

    async def save(self) -> bool:
        """Send the pending edits, then reload the entry from the backend."""
        try:
            patch = ModelUpdate(**self.pending)
        except ValidationError as exc:
            self.error = f"Invalid changes: {exc}"
            return False
        try:
            await update_model(self._client, self.model_id, patch)
        except CatalogError as exc:
            self.error = flash_message(exc, "Failed to update model")
            return False
        self.editing = False
        self.pending = {}
        return await self.load()

    async def delete(self) -> bool:
        """Delete after confirmation and navigate back to the list."""
        if not await ask(self._confirm, "Are you sure you want to delete this model?"):
            return False
        try:
            await delete_model(self._client, self.model_id)
        except CatalogError as exc:
            self.error = flash_message(exc, "Failed to delete model")
            return False
        self._navigate(MODELS_LOCATION)
        return True
