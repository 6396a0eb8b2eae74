"""Service-layer tests against the fake backend."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from fake_backend import FakeBackend

from trackml.catalog.errors import NotFoundError
from trackml.catalog.models.api import ModelDraft, ModelUpdate, WorkspaceCreate, WorkspaceUpdate
from trackml.catalog.models.enums import ModelStatus, ModelType
from trackml.catalog.services.insights import compare_models, get_insights
from trackml.catalog.services.models import (
    autofill_model,
    create_model,
    delete_model,
    get_model,
    parse_autofill_payload,
    semantic_search,
    update_model,
)
from trackml.catalog.services.workspaces import (
    create_workspace,
    delete_workspace,
    get_workspace,
    list_workspaces,
    move_model,
    update_workspace,
)
from trackml.catalog.transport import CatalogClient

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


async def test_create_sends_only_set_fields(backend: FakeBackend, client: CatalogClient) -> None:
    draft = ModelDraft(name="Llama 3", model_type=ModelType.LLM, tags=["meta", "meta", " open "])
    entry = await create_model(client, draft)

    body = backend.calls_to("POST", "/models")[0].body
    assert body == {"name": "Llama 3", "model_type": "LLM", "tags": ["meta", "open"], "source_links": []}
    assert entry.name == "Llama 3"
    assert entry.user_id == 1


async def test_update_sends_partial_body(backend: FakeBackend, client: CatalogClient) -> None:
    backend.add_model(4, name="bert", status="Studying")
    entry = await update_model(client, 4, ModelUpdate(status=ModelStatus.ARCHIVED))

    assert backend.calls_to("PUT", "/models/4")[0].body == {"status": "Archived"}
    assert entry.status is ModelStatus.ARCHIVED
    assert entry.name == "bert"


async def test_entry_date_accepts_timestamps(backend: FakeBackend, client: CatalogClient) -> None:
    backend.add_model(2, date_interacted="2024-05-03T10:11:12Z", tags=None)
    entry = await get_model(client, 2)
    assert entry.date_interacted == date(2024, 5, 3)
    assert entry.tags == []


async def test_delete_missing_model(client: CatalogClient) -> None:
    with pytest.raises(NotFoundError):
        await delete_model(client, 99)


async def test_semantic_search_returns_similarity(backend: FakeBackend, client: CatalogClient) -> None:
    backend.add_model(1, name="whisper", notes="speech recognition")
    backend.add_model(2, name="sdxl", notes="image generation")
    hits = await semantic_search(client, "speech")

    assert [h.id for h in hits] == [1]
    assert hits[0].similarity == 1.0
    assert backend.calls_to("GET", "/models/semantic-search")[0].params == {"q": "speech"}


# ---------------------------------------------------------------------------
# Autofill
# ---------------------------------------------------------------------------


async def test_autofill_sends_multipart(backend: FakeBackend, client: CatalogClient, tmp_path: Path) -> None:
    card = tmp_path / "card.md"
    card.write_text("# Model card")
    result = await autofill_model(
        client,
        "mistralai/Mistral-7B",
        links=["https://arxiv.org/abs/2310.06825", "https://mistral.ai"],
        files=[card],
    )

    assert backend.autofill_received == {
        "model_id": "mistralai/Mistral-7B",
        "model_links": ["https://arxiv.org/abs/2310.06825", "https://mistral.ai"],
        "files": [("card.md", b"# Model card")],
    }
    assert result.name == "Mistral-7B"
    assert result.developer == "mistralai"
    assert result.model_type is ModelType.LLM


async def test_autofill_unstructured_body_goes_to_notes(backend: FakeBackend, client: CatalogClient) -> None:
    backend.autofill_body = "  A 7B model trained on web data.  "
    result = await autofill_model(client, "some/model")
    assert result.notes == "A 7B model trained on web data."
    assert result.name is None


@pytest.mark.parametrize(
    ("text", "notes"),
    [
        ("not json at all", "not json at all"),
        ('["a", "list"]', '["a", "list"]'),
        ("   ", None),
    ],
)
def test_parse_autofill_payload_fallback(text: str, notes: str | None) -> None:
    result = parse_autofill_payload(text)
    assert result.notes == notes
    assert result.name is None


def test_parse_autofill_payload_ignores_unknown_keys() -> None:
    result = parse_autofill_payload('{"name": "phi-3", "downloads": 1000, "tags": ["small"]}')
    assert result.name == "phi-3"
    assert result.tags == ["small"]


def test_parse_autofill_payload_keeps_valid_fields_when_some_are_rejected() -> None:
    result = parse_autofill_payload(
        '{"name": "bert-base", "developer": "Google", "model_type": "Transformer", "license": "apache-2.0"}'
    )
    assert result.name == "bert-base"
    assert result.developer == "Google"
    assert result.license == "apache-2.0"
    assert result.model_type is None
    assert result.notes == "model_type: Transformer"


def test_parse_autofill_payload_appends_rejected_fields_to_notes() -> None:
    result = parse_autofill_payload('{"name": "phi-3", "notes": "Small model.", "parameters": -5, "status": "Hyped"}')
    assert result.name == "phi-3"
    assert result.parameters is None
    assert result.notes == "Small model.\n\nparameters: -5\nstatus: Hyped"


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------


async def test_get_insights(backend: FakeBackend, client: CatalogClient) -> None:
    backend.add_model(3, name="gpt-4o")
    result = await get_insights(client, 3)
    assert result.technical_analysis == "gpt-4o is a dense decoder-only transformer."
    assert result.use_cases == "gpt-4o is well suited to chat."
    assert result.sections() == [
        ("Technical analysis", "gpt-4o is a dense decoder-only transformer."),
        ("Use cases", "gpt-4o is well suited to chat."),
    ]


async def test_compare_omits_blank_prompt(backend: FakeBackend, client: CatalogClient) -> None:
    backend.add_model(3)
    backend.add_model(5)
    await compare_models(client, [3, 5], "   ")
    await compare_models(client, [3, 5], " cost ")

    first, second = backend.calls_to("POST", "/models/insights/compare")
    assert first.body == {"model_ids": [3, 5]}
    assert second.body == {"model_ids": [3, 5], "prompt": "cost"}


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


async def test_workspace_crud(backend: FakeBackend, client: CatalogClient) -> None:
    created = await create_workspace(client, WorkspaceCreate(name="Research"))
    assert created.name == "Research"
    assert created.models == []

    updated = await update_workspace(client, created.id, WorkspaceUpdate(description="papers"))
    assert updated.description == "papers"
    assert backend.calls_to("PUT", f"/workspaces/{created.id}")[0].body == {"description": "papers"}

    assert [ws.id for ws in await list_workspaces(client)] == [created.id]
    await delete_workspace(client, created.id)
    with pytest.raises(NotFoundError):
        await get_workspace(client, created.id)


async def test_move_model_body(backend: FakeBackend, client: CatalogClient) -> None:
    backend.add_workspace(1, "Default", is_default=True)
    backend.add_workspace(2, "Research")
    backend.add_model(7, workspace_id=1)

    await move_model(client, 7, 1, 2)

    assert backend.calls_to("POST", "/workspaces/move-model")[0].body == {
        "model_id": 7,
        "source_workspace_id": 1,
        "target_workspace_id": 2,
    }
    assert backend.models[7]["workspace_id"] == 2
