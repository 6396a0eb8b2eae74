"""Workspace operations.

Encapsulates workspace access: list, get, create, update, delete, and moving
a model from one workspace to another.  The "exactly one default workspace
per user" rule is enforced by the backend, not here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import TypeAdapter

from trackml.catalog.models.api import MoveModelRequest, WorkspaceCreate, WorkspaceEntry, WorkspaceUpdate

if TYPE_CHECKING:
    from trackml.catalog.transport import CatalogClient

_WORKSPACE = TypeAdapter(WorkspaceEntry)
_WORKSPACES = TypeAdapter(list[WorkspaceEntry])


async def list_workspaces(client: CatalogClient) -> list[WorkspaceEntry]:
    return await client.get_json("/workspaces", _WORKSPACES)


async def get_workspace(client: CatalogClient, workspace_id: int) -> WorkspaceEntry:
    """Get a workspace with its models.  Raises ``NotFoundError`` if missing."""
    return await client.get_json(f"/workspaces/{workspace_id}", _WORKSPACE)


async def create_workspace(client: CatalogClient, body: WorkspaceCreate) -> WorkspaceEntry:
    return await client.send_json("POST", "/workspaces", _WORKSPACE, json=body.model_dump(exclude_none=True))


async def update_workspace(client: CatalogClient, workspace_id: int, body: WorkspaceUpdate) -> WorkspaceEntry:
    """Partially update a workspace.  Raises ``NotFoundError`` if missing."""
    return await client.send_json(
        "PUT",
        f"/workspaces/{workspace_id}",
        _WORKSPACE,
        json=body.model_dump(exclude_unset=True),
    )


async def delete_workspace(client: CatalogClient, workspace_id: int) -> None:
    await client.request("DELETE", f"/workspaces/{workspace_id}")


async def move_model(client: CatalogClient, model_id: int, source_workspace_id: int, target_workspace_id: int) -> None:
    """Reassign a model from *source_workspace_id* to *target_workspace_id*."""
    body = MoveModelRequest(
        model_id=model_id,
        source_workspace_id=source_workspace_id,
        target_workspace_id=target_workspace_id,
    )
    await client.request("POST", "/workspaces/move-model", json=body.model_dump())
