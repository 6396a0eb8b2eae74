"""View-state coordinators for the catalog pages.

Each view owns the state of one page (query, list, selection, busy flags,
flash message) and exposes the user actions as methods.  Views catch
``CatalogError`` at the action that triggered it; nothing propagates to the
presentation layer except through ``error``.
"""

from trackml.catalog.views.comparison import ComparisonView, parse_compare_location
from trackml.catalog.views.create_flow import CreateFlow, merge_autofill
from trackml.catalog.views.dashboard import DashboardSummary, DashboardView, summarize
from trackml.catalog.views.detail import ModelDetailView
from trackml.catalog.views.fetch import FetchOrchestrator
from trackml.catalog.views.model_list import ModelListView, ModelRow
from trackml.catalog.views.mutations import MutationCoordinator
from trackml.catalog.views.query import QueryStateHolder
from trackml.catalog.views.selection import SelectionTracker, compare_location
from trackml.catalog.views.workspace import WorkspaceView

__all__ = [
    "ComparisonView",
    "CreateFlow",
    "DashboardSummary",
    "DashboardView",
    "FetchOrchestrator",
    "ModelDetailView",
    "ModelListView",
    "ModelRow",
    "MutationCoordinator",
    "QueryStateHolder",
    "SelectionTracker",
    "WorkspaceView",
    "compare_location",
    "merge_autofill",
    "parse_compare_location",
    "summarize",
]
