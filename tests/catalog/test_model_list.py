"""List view tests against the fake backend."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

import pytest
from fake_backend import FakeBackend

from trackml.catalog.errors import InputValidationError
from trackml.catalog.models.api import ModelDraft, ModelUpdate
from trackml.catalog.models.enums import ModelStatus, ModelType
from trackml.catalog.transport import CatalogClient
from trackml.catalog.views.model_list import ModelListView
from trackml.catalog.views.mutations import MutationCoordinator


@pytest.fixture
def seeded(backend: FakeBackend) -> FakeBackend:
    backend.add_model(3, name="llama-3", model_type="LLM", status="Tried", tags=["meta", "open"])
    backend.add_model(5, name="mistral-7b", model_type="LLM", status="Studying", tags=["open"])
    backend.add_model(7, name="yolo-v8", model_type="ObjectDetection", status="Tried", tags=["vision"])
    backend.add_model(9, name="whisper", model_type="Audio", status="Wishlist", notes="speech")
    return backend


@pytest.fixture
def view(client: CatalogClient, navigations: list[str]) -> ModelListView:
    return ModelListView(client, navigate=navigations.append)


def _ids(view: ModelListView) -> list[int]:
    return [m.id for m in view.models]


# ---------------------------------------------------------------------------
# Loading and searching
# ---------------------------------------------------------------------------


async def test_open_loads_models_and_tags(seeded: FakeBackend, view: ModelListView) -> None:
    await view.open()
    assert _ids(view) == [3, 5, 7, 9]
    assert view.tags == ["meta", "open", "vision"]
    assert seeded.calls_to("GET", "/models/search")[0].params == {}
    assert view.error is None


async def test_set_term_does_not_fetch(seeded: FakeBackend, view: ModelListView) -> None:
    view.set_term("lla")
    view.set_term("llama")
    assert seeded.calls == []

    await view.submit_search()
    assert [c.params for c in seeded.calls_to("GET", "/models/search")] == [{"q": "llama"}]
    assert _ids(view) == [3]


async def test_filter_change_fetches_once_with_combined_params(seeded: FakeBackend, view: ModelListView) -> None:
    await view.change_filters(model_type=ModelType.LLM, status=ModelStatus.TRIED, tag="open")
    calls = seeded.calls_to("GET", "/models/search")
    assert [c.params for c in calls] == [{"type": "LLM", "status": "Tried", "tag": "open"}]
    assert _ids(view) == [3]


async def test_semantic_toggle_with_term_fetches(seeded: FakeBackend, view: ModelListView) -> None:
    view.set_term("speech")
    assert await view.set_semantic(True)
    assert seeded.calls_to("GET", "/models/semantic-search")[0].params == {"q": "speech"}
    assert _ids(view) == [9]


async def test_semantic_toggle_without_term_does_not_fetch(seeded: FakeBackend, view: ModelListView) -> None:
    assert not await view.set_semantic(True)
    assert seeded.calls == []


async def test_fetch_failure_sets_flash_and_keeps_list(seeded: FakeBackend, view: ModelListView) -> None:
    await view.refresh()
    seeded.fail("GET", "/models/search", 500, {"error": "Search index offline"})

    assert not await view.submit_search("whisper")
    assert view.error == "Failed to fetch models: Search index offline"
    assert _ids(view) == [3, 5, 7, 9]
    assert not view.loading

    view.dismiss_error()
    assert view.error is None


async def test_unauthorized_navigates_to_login(
    seeded: FakeBackend, view: ModelListView, navigations: list[str]
) -> None:
    seeded.fail("GET", "/models/search", 401, {"error": "Token expired"})
    await view.refresh()

    assert navigations == ["/login"]
    assert view.error == "Session expired or invalid; please log in again."
    assert not view.loading


# ---------------------------------------------------------------------------
# Selection and comparison
# ---------------------------------------------------------------------------


async def test_selection_survives_refresh_that_hides_it(seeded: FakeBackend, view: ModelListView) -> None:
    await view.refresh()
    view.toggle_selection(7, True)

    await view.submit_search("llama")
    assert _ids(view) == [3]
    assert view.selection.selected_ids() == [7]
    assert [r.selected for r in view.rows()] == [False]

    await view.submit_search("")
    assert {r.entry.id: r.selected for r in view.rows()}[7] is True


async def test_compare_requires_two(view: ModelListView, navigations: list[str]) -> None:
    view.toggle_selection(3, True)
    assert view.compare() is None
    assert view.error == "Please select at least 2 models to compare"
    assert navigations == []


async def test_compare_navigates(view: ModelListView, navigations: list[str]) -> None:
    view.toggle_selection(3, True)
    view.toggle_selection(5, True)
    assert view.compare() == "/compare?models=3,5"
    assert navigations == ["/compare?models=3,5"]


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


async def test_delete_confirmed_then_refreshes(seeded: FakeBackend, client: CatalogClient) -> None:
    prompts: list[str] = []

    def confirm(prompt: str) -> bool:
        prompts.append(prompt)
        return True

    view = ModelListView(client, confirm=confirm)
    await view.change_filters(status=ModelStatus.WISHLIST)
    seeded.calls.clear()

    assert await view.delete(9)
    assert prompts == ["Are you sure you want to delete this model?"]
    assert [(c.method, c.path) for c in seeded.calls] == [("DELETE", "/models/9"), ("GET", "/models/search")]
    assert seeded.calls[-1].params == {"status": "Wishlist"}
    assert 9 not in view.fetcher


async def test_delete_declined_sends_nothing(seeded: FakeBackend, client: CatalogClient) -> None:
    async def decline(prompt: str) -> bool:
        return False

    view = ModelListView(client, confirm=decline)
    assert not await view.delete(9)
    assert seeded.calls == []
    assert 9 in seeded.models


async def test_failed_mutation_does_not_refresh(seeded: FakeBackend, view: ModelListView) -> None:
    await view.refresh()
    seeded.calls.clear()

    assert await view.update(404, ModelUpdate(notes="x")) is None
    assert view.error == "Failed to update model: Model 404 not found"
    assert seeded.calls_to("GET", "/models/search") == []


async def test_update_then_refresh(seeded: FakeBackend, view: ModelListView) -> None:
    view.set_term("yolo")
    entry = await view.update(7, ModelUpdate(status=ModelStatus.ARCHIVED))
    assert entry is not None
    assert entry.status is ModelStatus.ARCHIVED
    assert seeded.calls[-1].params == {"q": "yolo"}
    assert view.models[0].status is ModelStatus.ARCHIVED


async def test_move_without_workspace_is_rejected(seeded: FakeBackend, view: ModelListView) -> None:
    assert not await view.move(3, None, 2)
    assert view.error == "Model is not assigned to a workspace"
    assert seeded.calls == []


async def test_move_to_same_workspace_is_rejected(seeded: FakeBackend, view: ModelListView) -> None:
    assert not await view.move(3, 2, 2)
    assert view.error == "Model is already in that workspace"
    assert seeded.calls == []


async def test_move_then_refresh(seeded: FakeBackend, view: ModelListView) -> None:
    seeded.add_workspace(1, "Default", is_default=True)
    seeded.add_workspace(2, "Research")
    seeded.models[3]["workspace_id"] = 1
    await view.change_filters(workspace_id=2)
    assert _ids(view) == []

    assert await view.move(3, 1, 2)
    assert _ids(view) == [3]


# ---------------------------------------------------------------------------
# MutationCoordinator
# ---------------------------------------------------------------------------


async def test_create_with_blank_name_sends_nothing(backend: FakeBackend, client: CatalogClient) -> None:
    refresh = AsyncMock()
    mutations = MutationCoordinator(client, refresh=refresh)

    with pytest.raises(InputValidationError, match="Name is required"):
        await mutations.create(ModelDraft(name="   ", developer="Meta"))

    assert backend.calls == []
    refresh.assert_not_awaited()


async def test_create_without_user_sends_nothing(backend: FakeBackend, client: CatalogClient) -> None:
    client.session.user = None
    mutations = MutationCoordinator(client, refresh=AsyncMock())

    with pytest.raises(InputValidationError, match="User authentication required"):
        await mutations.create(ModelDraft(name="phi-3"))
    assert backend.calls == []


async def test_create_defaults_date_and_refreshes(backend: FakeBackend, client: CatalogClient) -> None:
    refresh = AsyncMock()
    mutations = MutationCoordinator(client, refresh=refresh)

    entry = await mutations.create(ModelDraft(name="  phi-3  "))

    assert entry.name == "phi-3"
    assert backend.calls_to("POST", "/models")[0].body["date_interacted"] == date.today().isoformat()
    refresh.assert_awaited_once_with()


async def test_create_keeps_given_date(backend: FakeBackend, client: CatalogClient) -> None:
    mutations = MutationCoordinator(client, refresh=AsyncMock())
    await mutations.create(ModelDraft(name="phi-3", date_interacted=date(2023, 12, 1)))
    assert backend.calls_to("POST", "/models")[0].body["date_interacted"] == "2023-12-01"
