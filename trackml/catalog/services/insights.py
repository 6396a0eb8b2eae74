"""AI-generated prose: per-model insights and multi-model comparison."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from pydantic import TypeAdapter

from trackml.catalog.models.api import ComparativeAnalysis, CompareRequest, ModelInsights

if TYPE_CHECKING:
    from trackml.catalog.transport import CatalogClient

_INSIGHTS = TypeAdapter(ModelInsights)
_ANALYSIS = TypeAdapter(ComparativeAnalysis)


async def get_insights(client: CatalogClient, model_id: int) -> ModelInsights:
    return await client.get_json(f"/models/{model_id}/insights", _INSIGHTS)


async def compare_models(
    client: CatalogClient,
    model_ids: Sequence[int],
    prompt: str | None = None,
) -> ComparativeAnalysis:
    """Compare two or more models.

    *prompt* is an optional natural-language instruction forwarded to the
    backend's language model; blank prompts are not sent.
    """
    body = CompareRequest(model_ids=list(model_ids), prompt=prompt.strip() if prompt and prompt.strip() else None)
    return await client.send_json(
        "POST",
        "/models/insights/compare",
        _ANALYSIS,
        json=body.model_dump(exclude_none=True),
    )
