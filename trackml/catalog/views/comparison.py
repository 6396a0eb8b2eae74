"""Comparison view: side-by-side details plus AI-generated analysis."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from urllib.parse import parse_qs, urlsplit

from loguru import logger

from trackml.catalog.errors import CatalogError, InputValidationError
from trackml.catalog.services.insights import compare_models
from trackml.catalog.services.models import get_model
from trackml.catalog.views.base import flash_message
from trackml.catalog.views.selection import MIN_COMPARE

if TYPE_CHECKING:
    from collections.abc import Sequence

    from trackml.catalog.models.api import ModelEntry
    from trackml.catalog.transport import CatalogClient


def parse_compare_location(location: str) -> list[int]:
    """Extract the ordered model ids from ``/compare?models=3,5``.

    Raises ``InputValidationError`` for a malformed id list.
    """
    query = parse_qs(urlsplit(location).query)
    raw = ",".join(query.get("models", []))
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        msg = f"Invalid model list: {raw!r}"
        raise InputValidationError(msg) from None


class ComparisonView:
    """State of the comparison page for a fixed list of model ids."""

    def __init__(self, client: CatalogClient) -> None:
        self._client = client
        self.model_ids: list[int] = []
        self.models: list[ModelEntry] = []
        self.analysis: str = ""
        self.loading = False
        self.comparing = False
        self.error: str | None = None

    @property
    def paragraphs(self) -> list[str]:
        """The analysis split on newline boundaries, blank lines dropped."""
        return [line.strip() for line in self.analysis.splitlines() if line.strip()]

    async def open(self, location: str, prompt: str | None = None) -> bool:
        """Load the page for a navigation target such as ``/compare?models=3,5``."""
        try:
            model_ids = parse_compare_location(location)
        except InputValidationError as exc:
            self.error = str(exc)
            return False
        return await self.load(model_ids, prompt)

    async def load(self, model_ids: Sequence[int], prompt: str | None = None) -> bool:
        """Fetch every model's details, then the comparison text.

        The previously shown comparison is kept until both calls succeed.
        """
        ids = list(model_ids)
        if len(ids) < MIN_COMPARE:
            self.error = "Not enough models selected for comparison"
            return False

        self.loading = True
        self.error = None
        try:
            models = list(await asyncio.gather(*(get_model(self._client, i) for i in ids)))
            analysis = await compare_models(self._client, ids, prompt)
        except CatalogError as exc:
            self.error = flash_message(exc, "Failed to load comparison")
            logger.info("Comparison of {} failed: {}", ids, self.error)
            return False
        finally:
            self.loading = False

        self.model_ids = ids
        self.models = models
        self.analysis = analysis.comparative_analysis
        return True

    async def recompare(self, prompt: str) -> bool:
        """Ask again with a custom prompt; details already shown are kept."""
        if len(self.model_ids) < MIN_COMPARE:
            self.error = "Not enough models selected for comparison"
            return False

        self.comparing = True
        self.error = None
        try:
            analysis = await compare_models(self._client, self.model_ids, prompt)
        except CatalogError as exc:
            self.error = flash_message(exc, "Failed to compare models")
            return False
        finally:
            self.comparing = False

        self.analysis = analysis.comparative_analysis
        return True
