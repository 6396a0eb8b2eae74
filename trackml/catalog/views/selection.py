"""Selection tracker for model comparison."""

from __future__ import annotations

from collections.abc import Iterator

from loguru import logger

from trackml.catalog.errors import InputValidationError

MIN_COMPARE = 2

COMPARE_PATH = "/compare"


def compare_location(model_ids: list[int]) -> str:
    """Navigation target for the comparison view, e.g. ``/compare?models=3,5``."""
    return f"{COMPARE_PATH}?models={','.join(str(i) for i in model_ids)}"


class SelectionTracker:
    """Insertion-ordered set of model ids chosen for comparison.

    Keyed by identifier only, so membership survives refreshes that hide the
    selected entries.  Cleared only by ``clear`` or by discarding the view.
    """

    def __init__(self) -> None:
        self._ids: dict[int, None] = {}

    def toggle(self, model_id: int, selected: bool) -> None:
        if selected:
            self._ids.setdefault(model_id, None)
        else:
            self._ids.pop(model_id, None)
        logger.debug("Selection: {} -> {}", model_id, selected)

    def clear(self) -> None:
        self._ids.clear()

    def is_selected(self, model_id: int) -> bool:
        return model_id in self._ids

    def selected_ids(self) -> list[int]:
        return list(self._ids)

    def compare_ready(self) -> bool:
        return len(self._ids) >= MIN_COMPARE

    def compare_location(self) -> str:
        """Location of the comparison view for the current selection.

        Raises ``InputValidationError`` when fewer than two models are
        selected.
        """
        if not self.compare_ready():
            msg = f"Please select at least {MIN_COMPARE} models to compare"
            raise InputValidationError(msg)
        return compare_location(self.selected_ids())

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._ids

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)
