"""Data models for the catalog client."""

from trackml.catalog.models.api import (
    AuthResponse,
    AutofillResult,
    ComparativeAnalysis,
    CompareRequest,
    ModelDraft,
    ModelEntry,
    ModelInsights,
    ModelUpdate,
    MoveModelRequest,
    SemanticHit,
    User,
    WorkspaceCreate,
    WorkspaceEntry,
    WorkspaceUpdate,
)
from trackml.catalog.models.enums import CreateFlowState, ModelStatus, ModelType
from trackml.catalog.models.query import QueryState

__all__ = [
    "AuthResponse",
    "AutofillResult",
    "ComparativeAnalysis",
    "CompareRequest",
    "CreateFlowState",
    "ModelDraft",
    "ModelEntry",
    "ModelInsights",
    "ModelStatus",
    "ModelType",
    "ModelUpdate",
    "MoveModelRequest",
    "QueryState",
    "SemanticHit",
    "User",
    "WorkspaceCreate",
    "WorkspaceEntry",
    "WorkspaceUpdate",
]
