from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

import click

from trackml.catalog.models.enums import ModelStatus, ModelType

if TYPE_CHECKING:
    from trackml.catalog.models.api import ModelEntry
    from trackml.catalog.transport import CatalogClient

T = TypeVar("T")

_TYPE_CHOICES = click.Choice([t.value for t in ModelType])
_STATUS_CHOICES = click.Choice([s.value for s in ModelStatus])


class _Router:
    """Records navigation requests from the views."""

    def __init__(self) -> None:
        self.location: str | None = None

    def __call__(self, location: str) -> None:
        from loguru import logger

        logger.debug("Navigate -> {}", location)
        self.location = location


def _run(action: Callable[[CatalogClient, _Router], Awaitable[T]]) -> T:
    """Build a client, restore the session from settings, and run *action*."""
    from trackml.catalog.context import SessionContext
    from trackml.catalog.errors import CatalogError
    from trackml.catalog.log import setup_logging
    from trackml.catalog.services.auth import restore_session
    from trackml.catalog.settings import get_settings
    from trackml.catalog.transport import CatalogClient

    settings = get_settings()
    root = click.get_current_context().find_root()
    setup_logging(root.params.get("log_level") or settings.log_level)

    token = settings.resolve_token()
    if token is None:
        msg = "No API token configured. Set TRACKML_TOKEN (copy it from the web UI after logging in)."
        raise click.ClickException(msg)

    async def _main() -> T:
        router = _Router()
        async with CatalogClient(SessionContext(), settings=settings) as client:
            try:
                await restore_session(client, token)
            except CatalogError as exc:
                raise click.ClickException(str(exc)) from exc
            return await action(client, router)

    return asyncio.run(_main())


def _fail_on(error: str | None) -> None:
    if error:
        raise click.ClickException(error)


def _echo_entry(entry: ModelEntry, *, selected: bool = False) -> None:
    parts = [f"{entry.id:>5}", "*" if selected else " ", entry.name]
    if entry.developer:
        parts.append(f"({entry.developer})")
    if entry.model_type:
        parts.append(f"[{entry.model_type}]")
    if entry.status:
        parts.append(str(entry.status))
    if entry.tags:
        parts.append("#" + " #".join(entry.tags))
    click.echo(" ".join(parts))


def _echo_details(entry: ModelEntry) -> None:
    click.echo(f"{entry.name}  (id {entry.id})")
    for label, value in (
        ("Developer", entry.developer),
        ("Type", entry.model_type),
        ("Status", entry.status),
        ("Last used", entry.date_interacted),
        ("Parameters", f"{entry.parameters:,}" if entry.parameters is not None else None),
        ("License", entry.license),
        ("Version", entry.version),
        ("Workspace", entry.workspace_id),
        ("Tags", ", ".join(entry.tags) or None),
    ):
        if value is not None:
            click.echo(f"  {label + ':':<12}{value}")
    for link in entry.source_links:
        click.echo(f"  {'Source:':<12}{link}")
    if entry.notes:
        click.echo("")
        click.echo(entry.notes)


@click.group()
@click.option("--log-level", default=None, help="Log level (default: from TRACKML_LOG_LEVEL or WARNING).")
def main(log_level: str | None) -> None:
    """TrackML - catalogue the machine-learning models you try, study, or want to try."""


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


@main.group()
def models() -> None:
    """Browse, search and edit model entries."""


@models.command("list")
@click.option("--search", "term", default="", help="Free-text search term.")
@click.option("--semantic", is_flag=True, default=False, help="Rank by meaning instead of keywords.")
@click.option("--type", "model_type", type=_TYPE_CHOICES, default=None, help="Only models of this type.")
@click.option("--status", type=_STATUS_CHOICES, default=None, help="Only models with this status.")
@click.option("--tag", default=None, help="Only models carrying this tag.")
@click.option("--workspace", "workspace_id", type=int, default=None, help="Only models in this workspace.")
def list_(
    term: str,
    semantic: bool,
    model_type: str | None,
    status: str | None,
    tag: str | None,
    workspace_id: int | None,
) -> None:
    """List models matching the given search and filters."""
    from trackml.catalog.views.model_list import ModelListView

    async def action(client: CatalogClient, router: _Router) -> None:
        view = ModelListView(client, navigate=router)
        view.query.set_term(term)
        view.query.set_model_type(ModelType(model_type) if model_type else None)
        view.query.set_status(ModelStatus(status) if status else None)
        view.query.set_tag(tag)
        view.query.set_workspace(workspace_id)
        view.query.set_semantic(semantic)
        await view.refresh()
        _fail_on(view.error)
        for row in view.rows():
            _echo_entry(row.entry, selected=row.selected)
        if not view.models:
            click.echo("No models found.")

    _run(action)


@models.command()
@click.argument("model_id", type=int)
@click.option("--insights", is_flag=True, default=False, help="Also fetch AI-generated insights.")
def show(model_id: int, insights: bool) -> None:
    """Show one model."""
    from trackml.catalog.views.detail import ModelDetailView

    async def action(client: CatalogClient, router: _Router) -> None:
        view = ModelDetailView(client, model_id, navigate=router)
        await view.load()
        _fail_on(view.error)
        if view.model is not None:
            _echo_details(view.model)
        if insights:
            await view.load_insights()
            _fail_on(view.error)
            if view.insights is not None:
                for heading, text in view.insights.sections():
                    click.echo("")
                    click.echo(f"{heading}:")
                    click.echo(text)

    _run(action)


@models.command()
@click.option("--name", default="", help="Model name (required unless autofill provides one).")
@click.option("--developer", default=None)
@click.option("--type", "model_type", type=_TYPE_CHOICES, default=None)
@click.option("--status", type=_STATUS_CHOICES, default=None)
@click.option("--tag", "tags", multiple=True, help="Repeatable.")
@click.option("--link", "links", multiple=True, help="Source URL; repeatable.  Also sent to autofill.")
@click.option("--notes", default=None)
@click.option("--parameters", type=click.IntRange(min=0), default=None, help="Parameter count.")
@click.option("--license", "license_", default=None)
@click.option("--version", default=None)
@click.option("--workspace", "workspace_id", type=int, default=None)
@click.option("--autofill", "source_id", default=None, help="Pre-fill from this source model ID.")
@click.option(
    "--file",
    "files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Document forwarded to autofill; repeatable.",
)
def add(
    name: str,
    developer: str | None,
    model_type: str | None,
    status: str | None,
    tags: tuple[str, ...],
    links: tuple[str, ...],
    notes: str | None,
    parameters: int | None,
    license_: str | None,
    version: str | None,
    workspace_id: int | None,
    source_id: str | None,
    files: tuple[Path, ...],
) -> None:
    """Add a model, optionally autofilled from an external source."""
    from trackml.catalog.errors import InputValidationError
    from trackml.catalog.views.model_list import ModelListView

    async def action(client: CatalogClient, router: _Router) -> None:
        view = ModelListView(client, navigate=router)
        flow = view.create_flow
        flow.open()

        if source_id:
            for link in links:
                flow.add_link(link)
            for path in files:
                flow.add_file(path)
            await flow.autofill(source_id)
            _fail_on(flow.error)

        fields = {
            "developer": developer,
            "model_type": model_type,
            "status": status,
            "notes": notes,
            "parameters": parameters,
            "license": license_,
            "version": version,
            "workspace_id": workspace_id,
        }
        overrides = {key: value for key, value in fields.items() if value is not None}
        if name:
            overrides["name"] = name
        overrides["tags"] = [*flow.draft.tags, *tags]
        overrides["source_links"] = [*flow.draft.source_links, *links]
        try:
            flow.edit(**overrides)
        except InputValidationError as exc:
            raise click.ClickException(str(exc)) from exc

        entry = await flow.submit()
        _fail_on(flow.error)
        if entry is not None:
            click.echo(f"Created model {entry.id}: {entry.name}")

    _run(action)


@models.command()
@click.argument("model_id", type=int)
@click.option("--name", default=None)
@click.option("--developer", default=None)
@click.option("--type", "model_type", type=_TYPE_CHOICES, default=None)
@click.option("--status", type=_STATUS_CHOICES, default=None)
@click.option("--tags", default=None, help="Comma-separated; replaces existing tags.")
@click.option("--notes", default=None)
@click.option("--parameters", type=click.IntRange(min=0), default=None)
def edit(
    model_id: int,
    name: str | None,
    developer: str | None,
    model_type: str | None,
    status: str | None,
    tags: str | None,
    notes: str | None,
    parameters: int | None,
) -> None:
    """Update fields of a model."""
    from trackml.catalog.views.detail import ModelDetailView

    changes = {
        "name": name,
        "developer": developer,
        "model_type": model_type,
        "status": status,
        "notes": notes,
        "parameters": parameters,
    }
    changes = {key: value for key, value in changes.items() if value is not None}
    if tags is not None:
        changes["tags"] = [tag.strip() for tag in tags.split(",") if tag.strip()]
    if not changes:
        raise click.UsageError("Nothing to change.")

    async def action(client: CatalogClient, router: _Router) -> None:
        view = ModelDetailView(client, model_id, navigate=router)
        view.start_edit()
        view.edit(**changes)
        await view.save()
        _fail_on(view.error)
        if view.model is not None:
            _echo_details(view.model)

    _run(action)


@models.command()
@click.argument("model_id", type=int)
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
def rm(model_id: int, yes: bool) -> None:
    """Delete a model."""
    from trackml.catalog.views.model_list import ModelListView

    def confirm(prompt: str) -> bool:
        return yes or click.confirm(prompt, default=False)

    async def action(client: CatalogClient, router: _Router) -> None:
        view = ModelListView(client, navigate=router, confirm=confirm)
        deleted = await view.delete(model_id)
        _fail_on(view.error)
        click.echo(f"Deleted model {model_id}." if deleted else "Aborted.")

    _run(action)


@models.command()
@click.argument("model_id", type=int)
@click.option("--to", "target", type=int, required=True, help="Target workspace ID.")
def move(model_id: int, target: int) -> None:
    """Move a model to another workspace."""
    from trackml.catalog.errors import CatalogError
    from trackml.catalog.services.models import get_model
    from trackml.catalog.views.model_list import ModelListView

    async def action(client: CatalogClient, router: _Router) -> None:
        try:
            entry = await get_model(client, model_id)
        except CatalogError as exc:
            raise click.ClickException(str(exc)) from exc
        view = ModelListView(client, navigate=router)
        await view.move(model_id, entry.workspace_id, target)
        _fail_on(view.error)
        click.echo(f"Moved model {model_id} to workspace {target}.")

    _run(action)


@models.command()
@click.argument("model_ids", type=int, nargs=-1, required=True)
@click.option("--prompt", default=None, help="Custom instruction for the comparison.")
def compare(model_ids: tuple[int, ...], prompt: str | None) -> None:
    """Compare two or more models with AI-generated analysis."""
    from trackml.catalog.views.comparison import ComparisonView
    from trackml.catalog.views.model_list import ModelListView

    async def action(client: CatalogClient, router: _Router) -> None:
        listing = ModelListView(client, navigate=router)
        for model_id in model_ids:
            listing.toggle_selection(model_id, True)
        location = listing.compare()
        _fail_on(listing.error)

        view = ComparisonView(client)
        await view.open(location or "", prompt)
        _fail_on(view.error)
        for entry in view.models:
            _echo_entry(entry)
        click.echo("")
        for paragraph in view.paragraphs:
            click.echo(paragraph)
            click.echo("")

    _run(action)


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


@main.group()
def workspaces() -> None:
    """Browse workspaces."""


@workspaces.command("list")
def list_workspaces_() -> None:
    """List workspaces."""
    from trackml.catalog.errors import CatalogError
    from trackml.catalog.services.workspaces import list_workspaces

    async def action(client: CatalogClient, router: _Router) -> None:
        try:
            entries = await list_workspaces(client)
        except CatalogError as exc:
            raise click.ClickException(str(exc)) from exc
        for ws in entries:
            default = " (default)" if ws.is_default else ""
            click.echo(f"{ws.id:>5}  {ws.name}{default}  [{len(ws.models)} models]")

    _run(action)


@workspaces.command("show")
@click.argument("workspace_id", type=int)
def show_workspace(workspace_id: int) -> None:
    """Show a workspace and its models."""
    from trackml.catalog.views.workspace import WorkspaceView

    async def action(client: CatalogClient, router: _Router) -> None:
        view = WorkspaceView(client, workspace_id)
        await view.load()
        _fail_on(view.error)
        if view.workspace is None:
            return
        click.echo(view.workspace.name + (" (default)" if view.workspace.is_default else ""))
        if view.workspace.description:
            click.echo(view.workspace.description)
        for entry in view.workspace.models:
            _echo_entry(entry)

    _run(action)


@workspaces.command("move")
@click.argument("workspace_id", type=int)
@click.argument("model_id", type=int)
@click.option("--to", "target", type=int, default=None, help="Target workspace ID (prompted if omitted).")
def move_out(workspace_id: int, model_id: int, target: int | None) -> None:
    """Move a model out of WORKSPACE_ID into another workspace."""
    from trackml.catalog.views.workspace import WorkspaceView

    async def action(client: CatalogClient, router: _Router) -> None:
        view = WorkspaceView(client, workspace_id)
        chosen = target
        if chosen is None:
            await view.load_targets()
            _fail_on(view.error)
            for ws in view.targets:
                click.echo(f"{ws.id:>5}  {ws.name}")
            chosen = click.prompt("Target workspace", type=click.Choice([str(ws.id) for ws in view.targets]))
        await view.move_model(model_id, int(chosen))
        _fail_on(view.error)
        click.echo(f"Moved model {model_id} to workspace {chosen}.")

    _run(action)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@main.command()
def stats() -> None:
    """Summarise the catalogue."""
    from trackml.catalog.views.dashboard import DashboardView

    async def action(client: CatalogClient, router: _Router) -> None:
        view = DashboardView(client)
        await view.load()
        _fail_on(view.error)
        summary = view.summary
        click.echo(f"Models: {summary.total}   Types: {len(summary.by_type)}   Tags: {summary.tag_count}")
        click.echo(f"Used this month: {summary.this_month}")
        for status, count in sorted(summary.by_status.items()):
            click.echo(f"  {status:<10}{count}")
        if summary.recent:
            click.echo("Recent:")
            for entry in summary.recent:
                _echo_entry(entry)

    _run(action)


if __name__ == "__main__":
    main()
