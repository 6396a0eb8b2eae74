"""Dashboard summary over all of a user's models."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

from trackml.catalog.errors import CatalogError
from trackml.catalog.services.models import list_models
from trackml.catalog.views.base import flash_message

if TYPE_CHECKING:
    from collections.abc import Sequence

    from trackml.catalog.models.api import ModelEntry
    from trackml.catalog.transport import CatalogClient

RECENT_LIMIT = 5


@dataclass
class DashboardSummary:
    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    by_type: dict[str, int] = field(default_factory=dict)
    tag_count: int = 0
    this_month: int = 0
    recent: list[ModelEntry] = field(default_factory=list)


def summarize(models: Sequence[ModelEntry], today: date | None = None) -> DashboardSummary:
    """Count models by status and type and pick the most recently used ones.

    "This month" compares calendar month and year against *today*.
    """
    today = today or date.today()
    by_status = Counter(str(m.status) for m in models if m.status)
    by_type = Counter(str(m.model_type) for m in models if m.model_type)
    tags = {tag for m in models for tag in m.tags}
    this_month = sum(
        1
        for m in models
        if m.date_interacted and (m.date_interacted.year, m.date_interacted.month) == (today.year, today.month)
    )
    recent = sorted(models, key=lambda m: m.date_interacted or date.min, reverse=True)[:RECENT_LIMIT]
    return DashboardSummary(
        total=len(models),
        by_status=dict(by_status),
        by_type=dict(by_type),
        tag_count=len(tags),
        this_month=this_month,
        recent=recent,
    )


class DashboardView:
    def __init__(self, client: CatalogClient) -> None:
        self._client = client
        self.summary = DashboardSummary()
        self.error: str | None = None

    async def load(self, today: date | None = None) -> bool:
        try:
            models = await list_models(self._client)
        except CatalogError as exc:
            self.error = flash_message(exc, "Failed to fetch models")
            return False
        self.summary = summarize(models, today)
        return True
