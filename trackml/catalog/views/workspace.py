"""Workspace view: one workspace with its models, and moving models out."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from trackml.catalog.errors import CatalogError
from trackml.catalog.services.workspaces import get_workspace, list_workspaces, move_model
from trackml.catalog.views.base import flash_message

if TYPE_CHECKING:
    from trackml.catalog.models.api import WorkspaceEntry
    from trackml.catalog.transport import CatalogClient


class WorkspaceView:
    """State of the page for a single workspace.

    After a move the workspace is re-fetched; its ``models`` list is never
    edited locally.
    """

    def __init__(self, client: CatalogClient, workspace_id: int) -> None:
        self._client = client
        self.workspace_id = workspace_id
        self.workspace: WorkspaceEntry | None = None
        self.targets: list[WorkspaceEntry] = []
        self.error: str | None = None

    async def load(self) -> bool:
        try:
            self.workspace = await get_workspace(self._client, self.workspace_id)
        except CatalogError as exc:
            self.error = flash_message(exc, "Failed to load workspace")
            return False
        return True

    async def load_targets(self) -> bool:
        """Other workspaces a model can be moved to."""
        try:
            workspaces = await list_workspaces(self._client)
        except CatalogError as exc:
            self.error = flash_message(exc, "Failed to load workspaces")
            return False
        self.targets = [ws for ws in workspaces if ws.id != self.workspace_id]
        return True

    async def move_model(self, model_id: int, target_workspace_id: int) -> bool:
        try:
            await move_model(self._client, model_id, self.workspace_id, target_workspace_id)
        except CatalogError as exc:
            self.error = flash_message(exc, "Failed to move model")
            return False
        logger.info("Moved model {} out of workspace {}", model_id, self.workspace_id)
        return await self.load()
