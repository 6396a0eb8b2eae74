"""The "add model" modal: draft editing, autofill, and submission.

State machine::

    IDLE --open--> EDITING --submit--> SUBMITTING --ok--> IDLE (modal closed)
                      ^                    |
                      +------failure-------+  (error shown)

``cancel`` returns to IDLE from EDITING and discards the draft.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger
from pydantic import ValidationError

from trackml.catalog.errors import CatalogError, InputValidationError, TransportError
from trackml.catalog.models.api import AutofillResult, ModelDraft
from trackml.catalog.models.enums import CreateFlowState
from trackml.catalog.services.models import autofill_model
from trackml.catalog.views.base import flash_message

if TYPE_CHECKING:
    from trackml.catalog.models.api import ModelEntry
    from trackml.catalog.transport import CatalogClient
    from trackml.catalog.views.mutations import MutationCoordinator


def merge_autofill(draft: ModelDraft, result: AutofillResult, links: Sequence[str] = ()) -> ModelDraft:
    """Fold an autofill result into *draft*.

    Scalar fields present in *result* replace the draft's.  Tags and source
    links are appended (draft first, then the links the user typed, then the
    returned ones) and de-duplicated.  Notes are appended to existing notes
    rather than replacing them.
    """
    data = draft.model_dump()
    for key, value in result.model_dump(exclude={"tags", "source_links", "notes"}, exclude_none=True).items():
        if value != "":
            data[key] = value

    data["tags"] = [*draft.tags, *result.tags]
    data["source_links"] = [*draft.source_links, *links, *result.source_links]
    if result.notes:
        data["notes"] = f"{draft.notes}\n\n{result.notes}" if draft.notes else result.notes
    return ModelDraft.model_validate(data)


class CreateFlow:
    """Drives one "add model" modal on behalf of the list view."""

    def __init__(self, client: CatalogClient, mutations: MutationCoordinator) -> None:
        self._client = client
        self._mutations = mutations
        self.state = CreateFlowState.IDLE
        self.error: str | None = None
        self.autofilling = False
        self._reset()

    def _reset(self) -> None:
        self.draft = ModelDraft()
        self.source_id = ""
        self.links: list[str] = []
        self.files: list[Path] = []

    @property
    def is_open(self) -> bool:
        return self.state is not CreateFlowState.IDLE

    def _require(self, state: CreateFlowState) -> None:
        if self.state is not state:
            msg = f"Create flow is {self.state}, expected {state}"
            raise RuntimeError(msg)

    # -- Transitions -----------------------------------------------------------

    def open(self) -> None:
        self._require(CreateFlowState.IDLE)
        self._reset()
        self.error = None
        self.state = CreateFlowState.EDITING

    def cancel(self) -> None:
        self._require(CreateFlowState.EDITING)
        self._reset()
        self.error = None
        self.state = CreateFlowState.IDLE

    async def submit(self) -> ModelEntry | None:
        """Submit the draft.

        Returns the created entry and closes the modal on success; on any
        failure returns ``None`` and stays open with ``error`` set.
        """
        self._require(CreateFlowState.EDITING)
        self.state = CreateFlowState.SUBMITTING
        self.error = None
        try:
            entry = await self._mutations.create(self.draft)
        except CatalogError as exc:
            self.error = flash_message(exc, "Failed to create model")
            self.state = CreateFlowState.EDITING
            logger.info("Create failed: {}", self.error)
            return None
        self._reset()
        self.state = CreateFlowState.IDLE
        return entry

    # -- Draft editing ---------------------------------------------------------

    def edit(self, **fields: Any) -> ModelDraft:
        """Set draft fields.  Raises ``InputValidationError`` on bad values."""
        self._require(CreateFlowState.EDITING)
        try:
            self.draft = ModelDraft.model_validate({**self.draft.model_dump(), **fields})
        except ValidationError as exc:
            raise InputValidationError(str(exc)) from exc
        return self.draft

    def add_link(self, url: str) -> None:
        url = url.strip()
        if url and url not in self.links:
            self.links.append(url)

    def remove_link(self, index: int) -> None:
        del self.links[index]

    def clear_links(self) -> None:
        self.links.clear()

    def add_file(self, path: Path) -> None:
        self.files.append(path)

    def remove_file(self, index: int) -> None:
        del self.files[index]

    def clear_files(self) -> None:
        self.files.clear()

    # -- Autofill --------------------------------------------------------------

    async def autofill(self, source_id: str | None = None) -> bool:
        """Pre-populate the draft from the backend's metadata source.

        Failures are surfaced verbatim in ``error``; the draft is unchanged.
        """
        self._require(CreateFlowState.EDITING)
        if source_id is not None:
            self.source_id = source_id
        if not self.source_id.strip():
            self.error = "Enter a model ID to autofill"
            return False

        self.autofilling = True
        self.error = None
        try:
            result = await autofill_model(self._client, self.source_id.strip(), self.links, self.files)
        except TransportError as exc:
            self.error = exc.user_message
            return False
        except OSError as exc:
            self.error = f"Could not read attachment: {exc}"
            return False
        finally:
            self.autofilling = False

        self.draft = merge_autofill(self.draft, result, self.links)
        logger.debug("Autofill merged into draft (name={!r})", self.draft.name)
        return True
