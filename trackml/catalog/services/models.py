"""Model entry operations: list, get, search, create, update, delete, autofill."""

from __future__ import annotations

import json
import mimetypes
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from trackml.catalog.models.api import AutofillResult, ModelDraft, ModelEntry, ModelUpdate, SemanticHit

if TYPE_CHECKING:
    from trackml.catalog.transport import CatalogClient

_ENTRY = TypeAdapter(ModelEntry)
_ENTRIES = TypeAdapter(list[ModelEntry])
_HITS = TypeAdapter(list[SemanticHit])


async def list_models(client: CatalogClient) -> list[ModelEntry]:
    """List every model owned by the authenticated user."""
    return await client.get_json("/models", _ENTRIES)


async def get_model(client: CatalogClient, model_id: int) -> ModelEntry:
    """Get a model by ID.  Raises ``NotFoundError`` if missing."""
    return await client.get_json(f"/models/{model_id}", _ENTRY)


async def search_models(client: CatalogClient, params: dict[str, Any]) -> list[ModelEntry]:
    """Keyword search.

    *params* must already be reduced to the non-empty fields (see
    ``QueryState.search_params``); they are sent as-is.
    """
    return await client.get_json("/models/search", _ENTRIES, params=params)


async def semantic_search(client: CatalogClient, term: str) -> list[SemanticHit]:
    """Semantic search over free text; ranking is entirely the backend's."""
    return await client.get_json("/models/semantic-search", _HITS, params={"q": term})


async def create_model(client: CatalogClient, draft: ModelDraft) -> ModelEntry:
    return await client.send_json("POST", "/models", _ENTRY, json=draft.to_payload())


async def update_model(client: CatalogClient, model_id: int, body: ModelUpdate) -> ModelEntry:
    """Partially update a model.  Raises ``NotFoundError`` if missing."""
    return await client.send_json("PUT", f"/models/{model_id}", _ENTRY, json=body.to_payload())


async def delete_model(client: CatalogClient, model_id: int) -> None:
    """Delete a model.  Raises ``NotFoundError`` if missing."""
    await client.request("DELETE", f"/models/{model_id}")


# ---------------------------------------------------------------------------
# Autofill
# ---------------------------------------------------------------------------


def _partial_result(payload: dict[str, Any]) -> AutofillResult | None:
    """Validate *payload*, dropping fields the schema rejects.

    Rejected ``key: value`` pairs are appended to ``notes`` instead of being
    lost.  Returns ``None`` when the remainder still does not validate.
    """
    try:
        return AutofillResult.model_validate(payload)
    except ValidationError as exc:
        rejected = {err["loc"][0] for err in exc.errors() if err["loc"]}
        logger.debug("Autofill fields rejected by the schema: {}", sorted(map(str, rejected)))

    kept = {key: value for key, value in payload.items() if key not in rejected}
    try:
        result = AutofillResult.model_validate(kept)
    except ValidationError:
        return None

    extra = "\n".join(f"{key}: {payload[key]}" for key in payload if key in rejected)
    if extra:
        result.notes = f"{result.notes}\n\n{extra}" if result.notes else extra
    return result


def parse_autofill_payload(text: str) -> AutofillResult:
    """Turn an autofill response body into a partial entry.

    A JSON object keeps every field the schema accepts; rejected fields are
    folded into ``notes`` as ``key: value`` lines.  A body that is not a JSON
    object is not an error either: the raw text becomes ``notes`` so the user
    keeps whatever the metadata source produced.
    """
    try:
        payload = json.loads(text)
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        result = _partial_result(payload)
        if result is not None:
            return result

    stripped = text.strip()
    logger.info("Autofill returned unstructured data ({} chars); folding into notes", len(stripped))
    return AutofillResult(notes=stripped or None)


async def autofill_model(
    client: CatalogClient,
    source_id: str,
    links: Sequence[str] = (),
    files: Sequence[Path] = (),
) -> AutofillResult:
    """Ask the backend to look up *source_id* and return a partial entry.

    *links* and *files* are supplementary material forwarded to the metadata
    source.  Files are read eagerly and sent as multipart parts.
    """
    data: dict[str, Any] = {"model_id": source_id}
    if links:
        data["model_links"] = list(links)

    parts = [
        ("files", (path.name, path.read_bytes(), mimetypes.guess_type(path.name)[0] or "application/octet-stream"))
        for path in files
    ]
    logger.debug("Autofill {} (links={}, files={})", source_id, len(links), len(parts))
    response = await client.request("POST", "/models/autofill", data=data, files=parts or None)
    return parse_autofill_payload(response.text)
