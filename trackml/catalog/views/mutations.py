"""Mutation coordinator -- create / update / delete / move, then refresh.

The client never merges a mutation result into the displayed list.  Every
successful mutation is followed by one refresh with the *current* query
state, so the list always reflects the backend.  A failed mutation raises
and triggers no refresh, leaving the list as it was.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import date
from typing import TYPE_CHECKING

from loguru import logger

from trackml.catalog.errors import InputValidationError
from trackml.catalog.services.models import create_model, delete_model, update_model
from trackml.catalog.services.workspaces import move_model
from trackml.catalog.views.base import Confirm, always_confirm, ask

if TYPE_CHECKING:
    from trackml.catalog.models.api import ModelDraft, ModelEntry, ModelUpdate
    from trackml.catalog.transport import CatalogClient

Refresh = Callable[[], Awaitable[object]]


class MutationCoordinator:
    """Issues model mutations and re-runs the list fetch afterwards.

    *refresh* is called with no arguments after every successful mutation;
    the list view passes its own ``refresh``, which reads the current query
    state at call time.  *confirm* guards ``delete``.
    """

    def __init__(
        self,
        client: CatalogClient,
        *,
        refresh: Refresh,
        confirm: Confirm = always_confirm,
    ) -> None:
        self._client = client
        self._refresh = refresh
        self._confirm = confirm

    async def create(self, draft: ModelDraft) -> ModelEntry:
        """Create a model from *draft*.

        Rejected locally, with no request, when the name is blank or no user
        is authenticated.  A missing interaction date defaults to today.
        """
        name = draft.name.strip()
        if not name:
            msg = "Name is required"
            raise InputValidationError(msg)
        if self._client.session.user_id is None:
            msg = "User authentication required"
            raise InputValidationError(msg)

        changes: dict[str, object] = {"name": name}
        if draft.date_interacted is None:
            changes["date_interacted"] = date.today()

        entry = await create_model(self._client, draft.model_copy(update=changes))
        logger.info("Created model {} ({!r})", entry.id, entry.name)
        await self._refresh()
        return entry

    async def update(self, model_id: int, patch: ModelUpdate) -> ModelEntry:
        entry = await update_model(self._client, model_id, patch)
        logger.info("Updated model {} ({})", model_id, sorted(patch.model_fields_set))
        await self._refresh()
        return entry

    async def delete(self, model_id: int) -> bool:
        """Delete a model after confirmation.

        Returns ``False`` (and sends nothing) when the user declines.
        """
        if not await ask(self._confirm, "Are you sure you want to delete this model?"):
            logger.debug("Delete of model {} declined", model_id)
            return False
        await delete_model(self._client, model_id)
        logger.info("Deleted model {}", model_id)
        await self._refresh()
        return True

    async def move(self, model_id: int, from_workspace: int | None, to_workspace: int) -> None:
        """Move a model between workspaces.

        Only meaningful for a model that currently has a workspace; otherwise
        (or when source and target are the same) nothing is sent and an
        ``InputValidationError`` reports the no-op.
        """
        if from_workspace is None:
            msg = "Model is not assigned to a workspace"
            raise InputValidationError(msg)
        if from_workspace == to_workspace:
            msg = "Model is already in that workspace"
            raise InputValidationError(msg)
        await move_model(self._client, model_id, from_workspace, to_workspace)
        logger.info("Moved model {} from workspace {} to {}", model_id, from_workspace, to_workspace)
        await self._refresh()
