"""Data models for the contract graph."""

from contract_graph.models.change_models import (
    ChangeRecord,
    ChangeReport,
    ChangeStatus,
    ModuleIdConflict,
)
from contract_graph.models.contract_models import (
    ContractContent,
    ContractDocument,
    ContractFile,
    Dependency,
    DependencyPart,
    Part,
)
from contract_graph.models.graph_models import (
    DependencyEdge,
    GraphChange,
    GraphCommit,
    GraphModule,
    RelationView,
)
from contract_graph.models.report_models import (
    ApplyResult,
    ModuleSearchResult,
    ValidationIssue,
    ValidationOutcome,
    ValidationSummary,
)

__all__ = [
    "ApplyResult",
    "ChangeRecord",
    "ChangeReport",
    "ChangeStatus",
    "ContractContent",
    "ContractDocument",
    "ContractFile",
    "Dependency",
    "DependencyEdge",
    "DependencyPart",
    "GraphChange",
    "GraphCommit",
    "GraphModule",
    "ModuleIdConflict",
    "ModuleSearchResult",
    "Part",
    "RelationView",
    "ValidationIssue",
    "ValidationOutcome",
    "ValidationSummary",
]
